"""
Convivio - Error taxonomy.

Every pipeline stage raises one of these to its immediate caller.
Nothing here is fatal to the process: a failed generation leaves the
dinner's stored menu exactly as it was.
"""


class ConvivioError(Exception):
    """Base class for all Convivio errors."""


class ConfigurationError(ConvivioError):
    """No usable completion credential (or provider) is configured."""


# =============================================================================
# Completion errors
# =============================================================================


class CompletionError(ConvivioError):
    """Base class for failures talking to the completion provider."""


class NetworkError(CompletionError):
    """No connectivity, or the provider answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CompletionTimeoutError(CompletionError, TimeoutError):
    """The call exceeded its fixed wall-clock budget."""

    def __init__(self, message: str, *, timeout: float | None = None):
        super().__init__(message)
        self.timeout = timeout


class RateLimitError(CompletionError):
    """The provider asked us to back off."""

    def __init__(self, message: str, *, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


# =============================================================================
# Decoding and editing errors
# =============================================================================


class DecodeError(ConvivioError):
    """
    The completion text is not a valid instance of the expected shape.

    `path` names the first structural mismatch, e.g. "menu.primi.0.ricetta".
    """

    def __init__(self, reason: str, *, path: str | None = None):
        self.reason = reason
        self.path = path
        message = f"{path}: {reason}" if path else reason
        super().__init__(message)


def decode_error_from_validation(exc) -> DecodeError:
    """Collapse a pydantic ValidationError to its first mismatch."""
    errors = exc.errors()
    if not errors:
        return DecodeError(str(exc))
    first = errors[0]
    path = ".".join(str(part) for part in first.get("loc", ())) or None
    return DecodeError(first.get("msg", "invalid value"), path=path)


class IndexOutOfRangeError(ConvivioError, IndexError):
    """A positional edit addressed an element that no longer exists."""

    def __init__(self, target: str, index: int, length: int):
        self.target = target
        self.index = index
        self.length = length
        super().__init__(f"{target}[{index}] is out of range (length {length})")


class UnknownCourseError(ConvivioError, ValueError):
    """A course name that maps to none of the menu buckets."""


class ItemNotFoundError(ConvivioError, LookupError):
    """A stable id that no longer identifies any dish or wine in the menu."""


class DinnerNotFoundError(ConvivioError, LookupError):
    """No dinner (or cellar) with the given id is visible to the caller."""

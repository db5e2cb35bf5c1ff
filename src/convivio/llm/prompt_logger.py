"""
Convivio - Prompt Logger.

Two sinks for prompts and raw responses:
- DebugLog: bounded in-memory log (most recent first) for developer inspection
- Markdown files under prompt_logs/, enabled via CONVIVIO_LOG_PROMPTS=1
  or the --log-prompts CLI flag

Both are best-effort. A failure to record is logged at debug level and
never reaches the completion call that produced the entry.
"""

import logging
import os
import threading
from collections import deque
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Configuration
LOG_PROMPTS = os.getenv("CONVIVIO_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

# Session tracking
_session_id: str | None = None
_call_counter: int = 0


class DebugLogEntry(BaseModel):
    """One completion call, successful or not."""

    timestamp: datetime = Field(default_factory=datetime.now)
    endpoint: str
    model: str
    prompt: str
    response: str | None = None
    duration: float  # seconds
    success: bool
    error: str | None = None


class DebugLog:
    """
    Bounded, most-recent-first log of completion calls.

    Oldest entries are dropped once `max_entries` is reached.
    """

    def __init__(self, max_entries: int = 50):
        self.max_entries = max_entries
        self._entries: deque[DebugLogEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def record(self, **fields) -> DebugLogEntry | None:
        """Append an entry. Never raises."""
        try:
            entry = DebugLogEntry(**fields)
            with self._lock:
                self._entries.appendleft(entry)
            return entry
        except Exception as e:
            logger.debug(f"Debug log entry dropped: {e}")
            return None

    def entries(self) -> list[DebugLogEntry]:
        with self._lock:
            return list(self._entries)

    def latest(self) -> DebugLogEntry | None:
        with self._lock:
            return self._entries[0] if self._entries else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# =============================================================================
# Markdown prompt files
# =============================================================================


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled
    if enabled:
        _ensure_log_dir()


def _ensure_log_dir() -> None:
    LOG_DIR.mkdir(exist_ok=True)


def _get_session_id() -> str:
    """Get or create a session ID for this run."""
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _session_id


def _get_session_dir() -> Path:
    session_dir = LOG_DIR / _get_session_id()
    session_dir.mkdir(parents=True, exist_ok=True)
    return session_dir


def log_prompt(
    *,
    task: str,
    model: str,
    system_prompt: str,
    user_prompt: str,
    response: str | None = None,
    error: str | None = None,
    duration: float | None = None,
) -> Path | None:
    """
    Write a prompt and its response to a markdown file.

    Args:
        task: Which pipeline task made this call (menu, dish, wine, ...)
        model: The model used
        system_prompt: The system prompt
        user_prompt: The user prompt
        response: Raw response text (optional)
        error: Any error that occurred (optional)
        duration: Call duration in seconds (optional)

    Returns:
        Path to the log file, or None if logging is disabled or failed
    """
    if not LOG_PROMPTS:
        return None

    global _call_counter
    _call_counter += 1

    try:
        _ensure_log_dir()
        filepath = _get_session_dir() / f"{_call_counter:02d}_{task}.md"

        timing = f"\n**Duration:** {duration:.2f}s" if duration is not None else ""
        content = f"""# LLM Call: {task}

**Time:** {datetime.now().isoformat()}
**Model:** {model}{timing}

---

## System Prompt

```
{system_prompt}
```

---

## User Prompt

```
{user_prompt}
```

---

## Response

"""
        if error:
            content += f"**ERROR:** {error}\n"
        elif response:
            content += f"```\n{response}\n```\n"
        else:
            content += "(No response)\n"

        filepath.write_text(content, encoding="utf-8")
        return filepath
    except OSError as e:
        logger.debug(f"Prompt file not written: {e}")
        return None


def reset_session() -> None:
    """Reset the session (for testing or a new run)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0

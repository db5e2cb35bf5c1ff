"""
Convivio - Response Decoder & Validator.

Completion text is assumed to contain one JSON object, possibly wrapped in
prose or markdown code fences. The decoder extracts that object, validates it
against the expected shape and returns a fully-typed model.

Decoding is all-or-nothing: callers get a complete model or a DecodeError
naming the first structural mismatch. Nothing is ever partially applied.
"""

import json
import logging
from collections.abc import Iterator

from pydantic import BaseModel, ValidationError

from convivio.errors import DecodeError, UnknownCourseError, decode_error_from_validation
from convivio.models.menu import Course, Dish, MenuResponse, PairedWine, WineSuggestion
from convivio.models.notes import DinnerNoteType, NoteContent
from convivio.models.proposal import MenuProposal

logger = logging.getLogger(__name__)


# =============================================================================
# JSON span extraction
# =============================================================================


def _balanced_spans(text: str) -> Iterator[str]:
    """
    Yield every balanced {...} span, outermost first, left to right.

    Braces inside JSON strings (including escaped quotes) do not count.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = -1
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break
        if end != -1:
            yield text[start : end + 1]
        start = text.find("{", start + 1)


def extract_json_span(text: str) -> str:
    """
    Return the first balanced span of `text` that parses as a JSON object.

    Raises:
        DecodeError: no complete JSON object in the text
    """
    if not text or not text.strip():
        raise DecodeError("empty completion")
    for span in _balanced_spans(text):
        try:
            if isinstance(json.loads(span), dict):
                return span
        except json.JSONDecodeError:
            continue
    raise DecodeError("no complete JSON object in completion")


def _load_object(text: str) -> dict:
    return json.loads(extract_json_span(text))


def _validate(model: type[BaseModel], data: dict):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        error = decode_error_from_validation(e)
        logger.warning(f"Decode failed for {model.__name__}: {error}")
        raise error from e


def _strip_ids(items) -> None:
    """Drop ids a model may have invented; fresh ones are assigned on validation."""
    if isinstance(items, list):
        for item in items:
            if isinstance(item, dict):
                item.pop("id", None)


# =============================================================================
# Full menu
# =============================================================================


def decode_menu(text: str) -> MenuResponse:
    """
    Decode a full-menu completion.

    Beyond the shape itself: the menu must hold at least one dish, and every
    pairing must name a course bucket that has dishes.
    """
    data = _load_object(text)
    data.pop("schema_version", None)

    sections = data.get("menu")
    if isinstance(sections, dict):
        for dishes in sections.values():
            _strip_ids(dishes)
    _strip_ids(data.get("abbinamenti"))
    _strip_ids(data.get("suggerimenti_acquisto"))

    menu = _validate(MenuResponse, data)

    if menu.menu.dish_count == 0:
        raise DecodeError("menu has no dishes", path="menu")

    populated = menu.menu.populated_courses()
    for i, pairing in enumerate(menu.pairings):
        path = f"abbinamenti.{i}.portata"
        try:
            course = Course.parse(pairing.course)
        except UnknownCourseError as e:
            raise DecodeError(f"unknown course {pairing.course!r}", path=path) from e
        if course not in populated:
            raise DecodeError(f"course {course.value!r} has no dishes", path=path)

    logger.info(
        f"Decoded menu: {menu.menu.dish_count} dishes, {len(menu.pairings)} pairings, "
        f"{len(menu.purchase_suggestions)} purchase suggestions"
    )
    return menu


# =============================================================================
# Narrowed responses
# =============================================================================


def _unwrap(data: dict, key: str, marker: str) -> dict:
    """Accept {"vino": {...}} where a bare object was asked for."""
    inner = data.get(key)
    if marker not in data and isinstance(inner, dict):
        return inner
    return data


def decode_dish(text: str) -> Dish:
    data = _unwrap(_load_object(text), "piatto", "nome")
    data.pop("id", None)
    return _validate(Dish, data)


def decode_paired_wine(text: str) -> PairedWine:
    data = _unwrap(_load_object(text), "vino", "nome")
    return _validate(PairedWine, data)


def decode_wine_suggestion(text: str) -> WineSuggestion:
    data = _load_object(text)
    data.pop("id", None)
    return _validate(WineSuggestion, data)


def decode_proposal(text: str) -> MenuProposal:
    """Decode the backend proposal shape {"menu": {"courses": [...], ...}}."""
    data = _load_object(text)
    inner = data.get("menu")
    if not isinstance(inner, dict):
        raise DecodeError("missing required key", path="menu")
    try:
        return MenuProposal.model_validate(inner)
    except ValidationError as e:
        error = decode_error_from_validation(e)
        raise DecodeError(error.reason, path=f"menu.{error.path}" if error.path else "menu") from e


# =============================================================================
# Dinner notes
# =============================================================================


def decode_dinner_note(text: str, note_type: DinnerNoteType | str) -> NoteContent:
    """Decode one of the dinner briefings into its typed content model."""
    note_type = DinnerNoteType(note_type)
    note = _validate(note_type.content_model, _load_object(text))
    logger.info(f"Decoded {note_type.display_name}")
    return note

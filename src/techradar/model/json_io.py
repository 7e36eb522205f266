"""
Config Exchange (JSON)
======================
Serializes radar configs to and from the JSON exchange document, and merges an
imported (possibly partial) document into a base config.

This module is the validation boundary: everything that comes out of
``import_config`` / ``merge_configs`` satisfies the data-model invariants.

Exchange document::

    {
      "title": "...", "date": "...",
      "quadrants": [{"name": "...", "displayOrder": 0}, ...],
      "rings": [{"name": "...", "displayOrder": 0, "color": "#...", "width": 1.0}, ...],
      "entries": [{"id": 1, "label": "...", "quadrantIndex": 0, "ringIndex": 0,
                   "isNew": false, "moved": "none", "description": "",
                   "active": true, "link": "..."}, ...],
      "displayOptions": {...},
      ...unknown top-level fields are preserved...
    }
"""
from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from techradar.model.errors import ConfigValidationError, ParseError
from techradar.model.options import deep_merge
from techradar.model.radar import Entry, Movement, Quadrant, RadarConfig, Ring, thaw
from techradar.model.validation import validate_config

logger = logging.getLogger(__name__)

KNOWN_KEYS = ("title", "date", "quadrants", "rings", "entries", "displayOptions")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_document(text: str) -> Dict[str, Any]:
    """
    Parse exchange text into a JSON object.

    Raises:
        ParseError: when the text is not valid JSON or not a JSON object.
    """
    if not isinstance(text, str):
        raise ParseError(f"Exchange text must be a string, not {type(text).__name__}.", str(text))

    def reject_constant(name: str) -> Any:
        raise ParseError(f"The text is not valid JSON ({name} is not a JSON number).", text)

    def parse_float(literal: str) -> float:
        value = float(literal)
        if not math.isfinite(value):
            raise ParseError(f"The number {literal} is too large to represent.", text)
        return value

    try:
        document = json.loads(text, parse_constant=reject_constant, parse_float=parse_float)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"The text is not valid JSON (line {e.lineno}, column {e.colno}: {e.msg}).", text
        ) from e
    if not isinstance(document, dict):
        raise ParseError(
            f"A radar configuration must be a JSON object, not {type(document).__name__}.", text
        )
    return document


# ---------------------------------------------------------------------------
# Field readers (strict: wrong types fail, nothing is coerced)
# ---------------------------------------------------------------------------

_MISSING = object()


def _read(obj: Mapping[str, Any], key: str, kinds: Any, path: str, default: Any = _MISSING) -> Any:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        if default is _MISSING:
            raise ConfigValidationError(f"{path}.{key} is required", field=f"{path}.{key}")
        return default
    # bool is a subclass of int; never accept it where a number is expected.
    if isinstance(value, bool) and bool not in kinds:
        raise ConfigValidationError(
            f"{path}.{key} has the wrong type (found: {value!r})", field=f"{path}.{key}", value=value
        )
    if not isinstance(value, kinds):
        raise ConfigValidationError(
            f"{path}.{key} has the wrong type (found: {value!r})", field=f"{path}.{key}", value=value
        )
    return value


def _read_object(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigValidationError(f"{path} must be an object", field=path, value=value)
    return value


def _read_list(document: Mapping[str, Any], key: str) -> List[Any]:
    value = document.get(key, _MISSING)
    if value is _MISSING:
        raise ConfigValidationError(f"{key} is required", field=key)
    if not isinstance(value, list):
        raise ConfigValidationError(f"{key} must be an array", field=key, value=value)
    return value


def _decode_quadrant(raw: Any, index: int) -> Quadrant:
    path = f"quadrants[{index}]"
    obj = _read_object(raw, path)
    return Quadrant(
        name=_read(obj, "name", (str,), path),
        display_order=_read(obj, "displayOrder", (int,), path, default=index),
    )


def _decode_ring(raw: Any, index: int) -> Ring:
    path = f"rings[{index}]"
    obj = _read_object(raw, path)
    width = _read(obj, "width", (int, float), path, default=1.0)
    if not math.isfinite(width):
        raise ConfigValidationError(
            f"{path}.width must be a finite number (found: {width!r})", field=f"{path}.width", value=width
        )
    return Ring(
        name=_read(obj, "name", (str,), path),
        display_order=_read(obj, "displayOrder", (int,), path, default=index),
        color=_read(obj, "color", (str,), path),
        width=width,
    )


def decode_entry(raw: Any, index: int) -> Entry:
    path = f"entries[{index}]"
    obj = _read_object(raw, path)
    moved = _read(obj, "moved", (str,), path, default=Movement.NONE.value)
    try:
        movement = Movement(moved)
    except ValueError:
        raise ConfigValidationError(
            f"{path}.moved must be one of {[m.value for m in Movement]} (found: {moved!r})",
            field=f"{path}.moved", value=moved,
        ) from None
    return Entry(
        id=_read(obj, "id", (str, int), path),
        label=_read(obj, "label", (str,), path),
        quadrant=_read(obj, "quadrantIndex", (int,), path),
        ring=_read(obj, "ringIndex", (int,), path),
        is_new=_read(obj, "isNew", (bool,), path, default=False),
        moved=movement,
        description=_read(obj, "description", (str,), path, default=""),
        link=_read(obj, "link", (str, type(None)), path, default=None),
        active=_read(obj, "active", (bool,), path, default=True),
    )


def decode_config(document: Mapping[str, Any]) -> RadarConfig:
    """
    Build a ``RadarConfig`` from a parsed exchange document.
    Shape and types are checked here; invariants are checked by ``validate_config``.
    """
    document = _read_object(document, "config")
    display_options = document.get("displayOptions", {})
    if not isinstance(display_options, Mapping):
        raise ConfigValidationError(
            "displayOptions must be an object", field="displayOptions", value=display_options
        )
    entries = document.get("entries", [])
    if not isinstance(entries, list):
        raise ConfigValidationError("entries must be an array", field="entries", value=entries)
    return RadarConfig(
        title=_read(document, "title", (str,), "config", default=""),
        date=_read(document, "date", (str,), "config", default=""),
        quadrants=tuple(_decode_quadrant(q, i) for i, q in enumerate(_read_list(document, "quadrants"))),
        rings=tuple(_decode_ring(r, i) for i, r in enumerate(_read_list(document, "rings"))),
        entries=tuple(decode_entry(e, i) for i, e in enumerate(entries)),
        display_options=dict(display_options),
        extras={k: v for k, v in document.items() if k not in KNOWN_KEYS},
    )


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_entry(entry: Entry) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": entry.id,
        "label": entry.label,
        "quadrantIndex": entry.quadrant,
        "ringIndex": entry.ring,
        "isNew": entry.is_new,
        "moved": entry.moved.value,
        "description": entry.description,
        "active": entry.active,
    }
    if entry.link is not None:
        data["link"] = entry.link
    return data


def encode_config(config: RadarConfig) -> Dict[str, Any]:
    """Convert a config into its JSON-compatible exchange document."""
    document: Dict[str, Any] = {
        "title": config.title,
        "date": config.date,
        "quadrants": [{"name": q.name, "displayOrder": q.display_order} for q in config.quadrants],
        "rings": [
            {"name": r.name, "displayOrder": r.display_order, "color": r.color, "width": r.width}
            for r in config.rings
        ],
        "entries": [encode_entry(e) for e in config.entries],
        "displayOptions": thaw(config.display_options),
    }
    for key, value in config.extras.items():
        if key in KNOWN_KEYS:
            logger.warning(f"Dropping extra field '{key}': it shadows a known config field.")
            continue
        document[key] = thaw(value)
    return document


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def export_config(config: RadarConfig, indent: Optional[int] = 2) -> str:
    """
    Serialize ``config`` to exchange text.

    Raises:
        ConfigValidationError: the config holds a number JSON cannot carry (NaN, Infinity).
    """
    try:
        text = json.dumps(encode_config(config), indent=indent, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise ConfigValidationError(f"The config cannot be written as JSON: {e}.", field="config") from e
    logger.info(f"Exported config '{config.title}' with {len(config.entries)} entries.")
    return text


def import_config(text: str) -> RadarConfig:
    """
    Parse and validate exchange text.

    Raises:
        ParseError: malformed text.
        ConfigValidationError: wrong shape or broken invariants.
    """
    config = validate_config(decode_config(parse_document(text)))
    logger.info(f"Imported config '{config.title}' with {len(config.entries)} entries.")
    return config


def _merge_entries(base: List[Dict[str, Any]], imported: Any) -> List[Dict[str, Any]]:
    if not isinstance(imported, list):
        raise ConfigValidationError("entries must be an array", field="entries", value=imported)
    merged = list(base)
    position = {str(item["id"]): i for i, item in enumerate(merged)}
    for index, item in enumerate(imported):
        obj = _read_object(item, f"entries[{index}]")
        if "id" not in obj:
            raise ConfigValidationError(
                f"entries[{index}].id is required", field=f"entries[{index}].id"
            )
        key = str(obj["id"])
        if key in position:
            merged[position[key]] = dict(obj)
        else:
            position[key] = len(merged)
            merged.append(dict(obj))
    return merged


def merge_configs(base: RadarConfig, imported: Union[RadarConfig, Mapping[str, Any]]) -> RadarConfig:
    """
    Merge ``imported`` into ``base`` and return a new, validated config.

    ``imported`` may be a full config or a partial exchange document. Fields it
    carries override ``base``; entries merge by id (replace, append, keep);
    objects such as ``displayOptions`` merge recursively; arrays such as
    ``quadrants`` and ``rings`` are replaced.
    """
    patch = encode_config(imported) if isinstance(imported, RadarConfig) else _read_object(imported, "config")
    document = encode_config(base)
    for key, value in patch.items():
        if key == "entries":
            document["entries"] = _merge_entries(document["entries"], value)
        elif isinstance(value, Mapping) and isinstance(document.get(key), Mapping):
            document[key] = deep_merge(document[key], value)
        else:
            document[key] = value
    merged = validate_config(decode_config(document))
    logger.info(
        f"Merged {len(patch)} field(s) into '{base.title}': {len(merged.entries)} entries after merge."
    )
    return merged


def import_and_merge(base: RadarConfig, text: str) -> RadarConfig:
    """Parse exchange text (full or partial) and merge it into ``base``."""
    return merge_configs(base, parse_document(text))


def export_file_name(slug: str = "tech-radar", now: Optional[datetime] = None) -> str:
    """Download name for an exported config, e.g. ``tech-radar-20240131-154500.json``."""
    now = now or datetime.now()
    return f"{slug}-{now:%Y%m%d-%H%M%S}.json"

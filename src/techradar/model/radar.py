"""
Radar Data Model
================
This module defines the in-memory representation of a radar chart.

Why is this file needed?
------------------------
1. Value semantics: every class is a frozen dataclass holding tuples and
   read-only mappings, so a config handed to the layout engine or the renderer cannot be changed behind
   the caller's back. Transformations (merge, reset) build new instances.
2. Single vocabulary: the layout engine, the renderer and the JSON exchange
   layer all speak in terms of these types.

Classes:
    Movement: How an entry moved since the previous edition of the radar.
    Quadrant: One of the four angular sectors.
    Ring: One of the concentric bands.
    Entry: A single blip.
    RadarConfig: The complete dataset of a chart.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

EntryId = Union[str, int]

QUADRANT_COUNT = 4


def freeze(value: Any) -> Any:
    """Read-only copy of a JSON-like value: objects become mapping proxies, arrays tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Plain, mutable copy of a frozen value (dicts and lists), ready for ``json``."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


class Movement(StrEnum):
    NONE = "none"
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


@dataclass(frozen=True)
class Quadrant:
    name: str
    display_order: int


@dataclass(frozen=True)
class Ring:
    name: str
    display_order: int
    color: str
    # Relative share of the chart area. Equal widths give equal ring areas.
    width: float = 1.0


@dataclass(frozen=True)
class Entry:
    """
    A blip. ``quadrant`` and ``ring`` are indices into the owning config's
    ``quadrants`` and ``rings`` tuples (list positions, not display orders).
    """
    id: EntryId
    label: str
    quadrant: int
    ring: int
    is_new: bool = False
    moved: Movement = Movement.NONE
    description: str = ""
    link: Optional[str] = None
    active: bool = True

    @property
    def key(self) -> str:
        """Identity used for uniqueness, merging and seeding."""
        return str(self.id)


@dataclass(frozen=True)
class RadarConfig:
    """
    The complete dataset describing one chart instance.

    ``display_options`` is the raw JSON object from the exchange document; it is
    resolved against defaults by :func:`techradar.model.options.resolve_display_options`.
    ``extras`` holds unknown top-level exchange fields so they survive round-trips.
    Both are stored as read-only copies; use :func:`thaw` for a mutable one.
    """
    title: str
    quadrants: Tuple[Quadrant, ...]
    rings: Tuple[Ring, ...]
    entries: Tuple[Entry, ...] = ()
    display_options: Mapping[str, Any] = field(default_factory=dict, hash=False)
    date: str = ""
    extras: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Accept lists and dicts from callers but store frozen copies.
        object.__setattr__(self, "quadrants", tuple(self.quadrants))
        object.__setattr__(self, "rings", tuple(self.rings))
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "display_options", freeze(self.display_options))
        object.__setattr__(self, "extras", freeze(self.extras))

    def entry_by_id(self, entry_id: EntryId) -> Optional[Entry]:
        wanted = str(entry_id)
        for entry in self.entries:
            if entry.key == wanted:
                return entry
        return None

    def with_entries(self, entries: Tuple[Entry, ...]) -> RadarConfig:
        return replace(self, entries=tuple(entries))

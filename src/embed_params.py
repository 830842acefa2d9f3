"""Embed parameter store.

Holds the configuration an embed builder carries between calls:
- map:       zoom, maptype, language, region
- view:      heading, pitch, fov (Street View camera)
- direction: mode, avoid, units

Validation policy:
- Ranged numeric fields are clamped to their bounds at assignment time.
- Enumerated fields (and every member of `avoid`) raise ValidationError.
- Non-numeric input to a numeric field raises ValidationError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple


class ValidationError(ValueError):
    """Raised when a parameter value is outside its allowed set or type."""


VALID_MAP_TYPES: Tuple[str, ...] = ("roadmap", "satellite")
VALID_MODES: Tuple[str, ...] = ("driving", "walking", "bicycling", "transit")
VALID_UNITS: Tuple[str, ...] = ("metric", "imperial")
VALID_AVOID: Tuple[str, ...] = ("tolls", "ferries", "highways")

ZOOM_RANGE: Tuple[int, int] = (0, 21)
HEADING_RANGE: Tuple[float, float] = (0.0, 360.0)
PITCH_RANGE: Tuple[float, float] = (-90.0, 90.0)
FOV_RANGE: Tuple[float, float] = (10.0, 100.0)

DEFAULT_ZOOM = 12
DEFAULT_MAP_TYPE = "roadmap"
DEFAULT_HEADING = 0.0
DEFAULT_PITCH = 0.0
DEFAULT_FOV = 90.0
DEFAULT_MODE = "driving"
DEFAULT_UNITS = "metric"


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, value))


def _as_number(value: Any, name: str) -> float:
    # bool is an int subclass; True/False are never meaningful angles or zooms.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Invalid {name}: expected a number, got {value!r}.")
    if value != value:  # NaN
        raise ValidationError(f"Invalid {name}: NaN is not allowed.")
    return float(value)


def _require_choice(value: Any, choices: Tuple[str, ...], name: str) -> str:
    if value not in choices:
        raise ValidationError(
            f"Invalid {name}. Must be one of: {', '.join(choices)}"
        )
    return value


def _as_code(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {name}: expected a string, got {value!r}.")
    return value.strip()


@dataclass
class MapParams:
    zoom: int = DEFAULT_ZOOM
    maptype: str = DEFAULT_MAP_TYPE
    language: str = ""
    region: str = ""


@dataclass
class ViewParams:
    heading: float = DEFAULT_HEADING
    pitch: float = DEFAULT_PITCH
    fov: float = DEFAULT_FOV


@dataclass
class DirectionParams:
    mode: str = DEFAULT_MODE
    avoid: List[str] = field(default_factory=list)
    units: str = DEFAULT_UNITS


class EmbedParams:
    """Mutable, validated parameter store owned by one builder."""

    def __init__(self) -> None:
        self.map = MapParams()
        self.view = ViewParams()
        self.direction = DirectionParams()

    # ---- map ----

    def set_zoom(self, level: Any) -> None:
        number = _as_number(level, "zoom level")
        self.map.zoom = int(_clamp(number, ZOOM_RANGE))

    def set_map_type(self, map_type: Any) -> None:
        self.map.maptype = _require_choice(map_type, VALID_MAP_TYPES, "map type")

    def set_language(self, language: Any) -> None:
        self.map.language = _as_code(language, "language")

    def set_region(self, region: Any) -> None:
        self.map.region = _as_code(region, "region")

    # ---- view ----

    def set_heading(self, degrees: Any) -> None:
        self.view.heading = _clamp(_as_number(degrees, "heading"), HEADING_RANGE)

    def set_pitch(self, degrees: Any) -> None:
        self.view.pitch = _clamp(_as_number(degrees, "pitch"), PITCH_RANGE)

    def set_fov(self, degrees: Any) -> None:
        self.view.fov = _clamp(_as_number(degrees, "field of view"), FOV_RANGE)

    # ---- direction ----

    def set_mode(self, mode: Any) -> None:
        self.direction.mode = _require_choice(mode, VALID_MODES, "mode")

    def set_units(self, units: Any) -> None:
        self.direction.units = _require_choice(units, VALID_UNITS, "units")

    def set_avoid(self, avoid: Iterable[Any]) -> None:
        """Replace the avoid list; any invalid member rejects the whole call."""
        if isinstance(avoid, str):
            raise ValidationError(
                "Invalid avoid options: expected a list of features, got a string."
            )
        try:
            members = list(avoid)
        except TypeError:
            raise ValidationError(
                f"Invalid avoid options: expected a list of features, got {avoid!r}."
            ) from None
        invalid = [m for m in members if m not in VALID_AVOID]
        if invalid:
            raise ValidationError(
                "Invalid avoid options: " + ", ".join(str(m) for m in invalid)
            )
        deduped: List[str] = []
        for m in members:
            if m not in deduped:
                deduped.append(m)
        self.direction.avoid = deduped

    # ---- snapshot / reset ----

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            "map": {
                "zoom": self.map.zoom,
                "maptype": self.map.maptype,
                "language": self.map.language,
                "region": self.map.region,
            },
            "view": {
                "heading": self.view.heading,
                "pitch": self.view.pitch,
                "fov": self.view.fov,
            },
            "direction": {
                "mode": self.direction.mode,
                "avoid": list(self.direction.avoid),
                "units": self.direction.units,
            },
        }

    def reset_map(self) -> None:
        self.map = MapParams()

    def reset_view(self) -> None:
        self.view = ViewParams()

    def reset_direction(self) -> None:
        self.direction = DirectionParams()

    def reset_all(self) -> None:
        self.reset_map()
        self.reset_view()
        self.reset_direction()

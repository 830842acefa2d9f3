"""Google Maps Embed API URL builder.

Builds embed URLs for the five Maps Embed API modes:
    place, search, view, directions, streetview
and wraps them in an iframe tag. Nothing here calls Google; the caller
loads the URL (typically in a browser via the iframe).

Request merge order for every mode (last writer wins):
    1) mode-required parameters
    2) stored configuration (language/region only when non-empty)
    3) per-call `options`
then `key` is appended by `generate_url`.

References:
- Maps Embed API: https://developers.google.com/maps/documentation/embed/embedding-map
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

import iframe  # type: ignore
from embed_params import (  # type: ignore
    DEFAULT_FOV,
    DEFAULT_HEADING,
    DEFAULT_PITCH,
    EmbedParams,
    ValidationError,
)


API_ENDPOINT = "https://www.google.com/maps/embed/v1/"

EMBED_MODES = ("place", "search", "view", "directions", "streetview")


class MissingApiKeyError(RuntimeError):
    """Raised when a URL is requested but no API key is configured."""

    code = "missing_api_key"

    def __init__(self, message: str = "Google Maps API key is required") -> None:
        super().__init__(message)


def format_number(value: float) -> str:
    """Render 45.0 as '45' and 47.6062 as '47.6062'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_option(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return "|".join(_format_option(v) for v in value)
    return str(value)


def _check_coordinates(latitude: Any, longitude: Any) -> str:
    for name, value, bound in (("latitude", latitude, 90), ("longitude", longitude, 180)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"Invalid {name}: expected a number, got {value!r}.")
        if not -bound <= value <= bound:
            raise ValidationError(
                f"Invalid {name}. Must be between -{bound} and {bound}."
            )
    return f"{format_number(float(latitude))},{format_number(float(longitude))}"


class EmbedBuilder:
    """Configurable builder for Maps Embed API URLs and iframes.

    Setters validate, store, and return the builder so calls can be chained:

        url = EmbedBuilder(key).set_zoom(15).set_map_type("satellite").view(47.6, -122.3)
    """

    def __init__(self, api_key: str, params: Optional[EmbedParams] = None) -> None:
        self._params = params if params is not None else EmbedParams()
        self.set_api_key(api_key)

    # ------------------------------
    # API key
    # ------------------------------

    def set_api_key(self, api_key: str) -> "EmbedBuilder":
        self._api_key = api_key or ""
        return self

    def get_api_key(self) -> str:
        return self._api_key

    # ------------------------------
    # Map parameters
    # ------------------------------

    def set_zoom(self, level: int) -> "EmbedBuilder":
        """Zoom level, clamped to 0-21."""
        self._params.set_zoom(level)
        return self

    def get_zoom(self) -> int:
        return self._params.map.zoom

    def set_map_type(self, map_type: str) -> "EmbedBuilder":
        """roadmap or satellite."""
        self._params.set_map_type(map_type)
        return self

    def get_map_type(self) -> str:
        return self._params.map.maptype

    def set_language(self, language: str) -> "EmbedBuilder":
        """Language code (e.g. 'en', 'es'); empty lets Google infer it."""
        self._params.set_language(language)
        return self

    def get_language(self) -> str:
        return self._params.map.language

    def set_region(self, region: str) -> "EmbedBuilder":
        """Region code (e.g. 'US', 'GB'); empty lets Google infer it."""
        self._params.set_region(region)
        return self

    def get_region(self) -> str:
        return self._params.map.region

    # ------------------------------
    # Street View camera
    # ------------------------------

    def set_heading(self, degrees: float) -> "EmbedBuilder":
        """Compass heading, clamped to 0-360."""
        self._params.set_heading(degrees)
        return self

    def get_heading(self) -> float:
        return self._params.view.heading

    def set_pitch(self, degrees: float) -> "EmbedBuilder":
        """Camera pitch, clamped to -90..90."""
        self._params.set_pitch(degrees)
        return self

    def get_pitch(self) -> float:
        return self._params.view.pitch

    def set_fov(self, degrees: float) -> "EmbedBuilder":
        """Horizontal field of view, clamped to 10-100."""
        self._params.set_fov(degrees)
        return self

    def get_fov(self) -> float:
        return self._params.view.fov

    # ------------------------------
    # Directions
    # ------------------------------

    def set_travel_mode(self, mode: str) -> "EmbedBuilder":
        """driving, walking, bicycling or transit."""
        self._params.set_mode(mode)
        return self

    def get_travel_mode(self) -> str:
        return self._params.direction.mode

    def set_avoid(self, avoid: Iterable[str]) -> "EmbedBuilder":
        """Features to avoid: any of tolls, ferries, highways."""
        self._params.set_avoid(avoid)
        return self

    def get_avoid(self) -> List[str]:
        return list(self._params.direction.avoid)

    def set_units(self, units: str) -> "EmbedBuilder":
        """metric or imperial."""
        self._params.set_units(units)
        return self

    def get_units(self) -> str:
        return self._params.direction.units

    # ------------------------------
    # Snapshot / reset
    # ------------------------------

    def get_all_params(self) -> Dict[str, Dict[str, Any]]:
        return self._params.as_dict()

    def reset_map_params(self) -> "EmbedBuilder":
        self._params.reset_map()
        return self

    def reset_view_params(self) -> "EmbedBuilder":
        self._params.reset_view()
        return self

    def reset_direction_params(self) -> "EmbedBuilder":
        self._params.reset_direction()
        return self

    def reset_options(self) -> "EmbedBuilder":
        """Restore every parameter to its default. The API key is kept."""
        self._params.reset_all()
        return self

    # ------------------------------
    # Embed modes
    # ------------------------------

    def place(self, place_id: str, options: Optional[Mapping[str, Any]] = None) -> str:
        if not place_id or not str(place_id).strip():
            raise ValidationError("Place ID is required.")
        return self._build("place", {"q": f"place_id:{place_id}"}, options)

    def search(self, query: str, options: Optional[Mapping[str, Any]] = None) -> str:
        return self._build("search", {"q": query}, options)

    def view(
        self,
        latitude: float,
        longitude: float,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        params = {
            "center": _check_coordinates(latitude, longitude),
            "zoom": self.get_zoom(),
            "maptype": self.get_map_type(),
        }
        return self._build("view", params, options)

    def directions(
        self,
        origin: str,
        destination: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        direction = self._params.direction
        params: Dict[str, Any] = {
            "origin": origin,
            "destination": destination,
            "mode": direction.mode,
        }
        if direction.avoid:
            params["avoid"] = "|".join(direction.avoid)
        params["units"] = direction.units
        return self._build("directions", params, options)

    def streetview(
        self,
        latitude: float,
        longitude: float,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        view = self._params.view
        params: Dict[str, Any] = {"location": _check_coordinates(latitude, longitude)}
        # Camera values at their defaults are left for Google to apply.
        if view.heading != DEFAULT_HEADING:
            params["heading"] = view.heading
        if view.pitch != DEFAULT_PITCH:
            params["pitch"] = view.pitch
        if view.fov != DEFAULT_FOV:
            params["fov"] = view.fov
        return self._build("streetview", params, options)

    def generate_iframe(
        self, url: str, attrs: Optional[Mapping[str, Any]] = None
    ) -> str:
        return iframe.generate_iframe(url, attrs)

    # ------------------------------
    # URL assembly
    # ------------------------------

    def _common_options(self) -> Dict[str, str]:
        common: Dict[str, str] = {}
        if self._params.map.language:
            common["language"] = self._params.map.language
        if self._params.map.region:
            common["region"] = self._params.map.region
        return common

    def _build(
        self,
        mode: str,
        required: Dict[str, Any],
        options: Optional[Mapping[str, Any]],
    ) -> str:
        params = dict(required)
        params.update(self._common_options())
        params.update(options or {})
        return self.generate_url(mode, params)

    def generate_url(self, mode: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Return the embed URL for `mode` with `params` plus the API key.

        Raises MissingApiKeyError when no key is set.
        """
        if mode not in EMBED_MODES:
            raise ValidationError(
                f"Invalid embed mode. Must be one of: {', '.join(EMBED_MODES)}"
            )
        if not self._api_key:
            raise MissingApiKeyError()

        query = {
            k: _format_option(v)
            for k, v in (params or {}).items()
            if v is not None and k != "key"
        }
        query["key"] = self._api_key
        return f"{API_ENDPOINT}{mode}?{urlencode(query)}"

"""YAML configuration loader with environment-based secret resolution.

Notes:
- The API key is NOT stored in the YAML file; only the ENV VAR name is.
- Embed defaults go through the same validation as the builder setters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

import embed_client  # type: ignore
import embed_params  # type: ignore


@dataclass(frozen=True)
class APIConfig:
    google_maps_api_key_env: str

    def get_google_maps_api_key(self) -> str | None:
        return os.getenv(self.google_maps_api_key_env)


@dataclass(frozen=True)
class EmbedDefaults:
    zoom: int = embed_params.DEFAULT_ZOOM
    maptype: str = embed_params.DEFAULT_MAP_TYPE
    language: str = ""
    region: str = ""
    heading: float = embed_params.DEFAULT_HEADING
    pitch: float = embed_params.DEFAULT_PITCH
    fov: float = embed_params.DEFAULT_FOV
    mode: str = embed_params.DEFAULT_MODE
    avoid: List[str] = field(default_factory=list)
    units: str = embed_params.DEFAULT_UNITS


@dataclass(frozen=True)
class IframeConfig:
    width: int
    height: int


@dataclass(frozen=True)
class Config:
    project_name: str
    project_version: str
    api: APIConfig
    embed_defaults: EmbedDefaults
    iframe: IframeConfig

    def validate(self) -> None:
        if self.iframe.width <= 0:
            raise ValueError("iframe.width must be positive.")
        if self.iframe.height <= 0:
            raise ValueError("iframe.height must be positive.")
        # Enum and type checks are shared with the builder.
        try:
            to_params(self.embed_defaults)
        except embed_params.ValidationError as e:
            raise ValueError(f"embed_defaults: {e}") from e


def _require_key(d: Dict[str, Any], key: str) -> Any:
    if key not in d:
        raise KeyError(f"Missing required configuration key: {key}")
    return d[key]


def to_params(defaults: EmbedDefaults) -> embed_params.EmbedParams:
    params = embed_params.EmbedParams()
    params.set_zoom(defaults.zoom)
    params.set_map_type(defaults.maptype)
    params.set_language(defaults.language)
    params.set_region(defaults.region)
    params.set_heading(defaults.heading)
    params.set_pitch(defaults.pitch)
    params.set_fov(defaults.fov)
    params.set_mode(defaults.mode)
    params.set_avoid(defaults.avoid)
    params.set_units(defaults.units)
    return params


def load_config(path: str) -> Config:
    """Load and validate YAML configuration from `path`.

    The `embed_defaults` section is optional; omitted keys take builder defaults.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    project = raw.get("project", {})
    api_raw = raw.get("api", {})
    defaults_raw = raw.get("embed_defaults") or {}
    iframe_raw = raw.get("iframe", {})

    base = EmbedDefaults()
    cfg = Config(
        project_name=_require_key(project, "name"),
        project_version=str(_require_key(project, "version")),
        api=APIConfig(
            google_maps_api_key_env=_require_key(api_raw, "google_maps_api_key_env"),
        ),
        embed_defaults=EmbedDefaults(
            zoom=defaults_raw.get("zoom", base.zoom),
            maptype=defaults_raw.get("maptype", base.maptype),
            language=defaults_raw.get("language") or "",
            region=defaults_raw.get("region") or "",
            heading=defaults_raw.get("heading", base.heading),
            pitch=defaults_raw.get("pitch", base.pitch),
            fov=defaults_raw.get("fov", base.fov),
            mode=defaults_raw.get("mode", base.mode),
            avoid=defaults_raw.get("avoid") or [],
            units=defaults_raw.get("units", base.units),
        ),
        iframe=IframeConfig(
            width=int(_require_key(iframe_raw, "width")),
            height=int(_require_key(iframe_raw, "height")),
        ),
    )

    cfg.validate()
    return cfg


def build_client(cfg: Config, api_key: Optional[str] = None) -> embed_client.EmbedBuilder:
    """Return a builder seeded from `cfg.embed_defaults`.

    The key argument wins over the environment variable named in the config.
    """
    key = api_key if api_key is not None else cfg.api.get_google_maps_api_key()
    return embed_client.EmbedBuilder(key or "", params=to_params(cfg.embed_defaults))

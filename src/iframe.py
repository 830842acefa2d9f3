"""Iframe HTML serializer for embed URLs.

Pure function of (url, attrs); no builder state involved.
"""

from __future__ import annotations

import html
import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

from embed_params import ValidationError  # type: ignore


# Fixed order; caller overrides keep the default's position.
DEFAULT_IFRAME_ATTRS: Dict[str, Any] = {
    "width": "600",
    "height": "450",
    "frameborder": "0",
    "style": "border:0",
    "allowfullscreen": True,
    "loading": "lazy",
    "referrerpolicy": "no-referrer-when-downgrade",
}

ALLOWED_URL_SCHEMES = {"http", "https"}

_ATTR_NAME_RE = re.compile(r"[A-Za-z_:][-A-Za-z0-9_:.]*")


def escape_url(url: str) -> str:
    """Return `url` safe for an HTML attribute, or "" for a disallowed scheme."""
    url = (url or "").strip()
    if not url:
        return ""
    scheme = urlsplit(url).scheme.lower()
    if scheme and scheme not in ALLOWED_URL_SCHEMES:
        return ""
    return html.escape(url, quote=True)


def escape_attr(value: Any) -> str:
    return html.escape(str(value), quote=True)


def generate_iframe(url: str, attrs: Optional[Mapping[str, Any]] = None) -> str:
    """Build an `<iframe>` tag for `url`.

    Boolean True renders a bare attribute; False or None drops it. A `src`
    key in `attrs` is ignored, the url argument always wins.
    """
    merged: Dict[str, Any] = dict(DEFAULT_IFRAME_ATTRS)
    for name, value in (attrs or {}).items():
        if not isinstance(name, str) or not _ATTR_NAME_RE.fullmatch(name):
            raise ValidationError(f"Invalid iframe attribute name: {name!r}")
        if name.lower() == "src":
            continue
        merged[name] = value

    parts = []
    for name, value in merged.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape_attr(value)}"')

    return f'<iframe src="{escape_url(url)}"{"".join(parts)}></iframe>'

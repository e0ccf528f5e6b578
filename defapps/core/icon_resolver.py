"""Cached icon lookups for applications and MIME types.

Resolution order for a name:
  1. Absolute path to an image file
  2. Current icon theme
  3. Generic fallback from the theme
"""

from __future__ import annotations

import os
from typing import Iterable

from PyQt6.QtGui import QIcon

FALLBACK_APP_ICON = "application-x-executable"
FALLBACK_MIME_ICON = "application-octet-stream"

_icons: dict[str, QIcon] = {}
_mimetype_icons: dict[str, QIcon] = {}


def resolve_icon(icon_name: str, fallback: str = FALLBACK_APP_ICON) -> QIcon:
    """Resolve an Icon= value to a QIcon, caching by name."""
    key = f"{icon_name}\0{fallback}"
    if key in _icons:
        return _icons[key]

    if icon_name.startswith("/") and os.path.isfile(icon_name):
        icon = QIcon(icon_name)
    elif icon_name:
        icon = QIcon.fromTheme(icon_name, QIcon.fromTheme(fallback))
    else:
        icon = QIcon.fromTheme(fallback)
    _icons[key] = icon
    return icon


def mimetype_icon(name: str, resolver) -> QIcon:
    """Icon for a canonical MIME type, as named by the MIME database."""
    if name not in _mimetype_icons:
        info = resolver.resolve(name)
        icon_name = info.icon_name if info else ""
        _mimetype_icons[name] = resolve_icon(icon_name, FALLBACK_MIME_ICON)
    return _mimetype_icons[name]


def preload_mimetype_icons(names: Iterable[str], resolver) -> None:
    """Look up every type icon once, so selecting big applications stays snappy."""
    for name in names:
        mimetype_icon(name, resolver)

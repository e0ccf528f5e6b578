"""MIME type lookups backed by the shared-mime-info database (via QMimeDatabase).

Aliases are resolved to canonical names, and every lookup is memoized since the
database does not change while the application is running.
"""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import QMimeDatabase


@dataclass(frozen=True)
class MimeInfo:
    """Canonical name and display metadata for one MIME type."""
    name: str
    comment: str = ""
    icon_name: str = ""
    filter_string: str = ""

    @property
    def label(self) -> str:
        """Human readable label: filter string, then comment, then the name."""
        for text in (self.filter_string, self.comment, self.name):
            if text.strip():
                return text.strip()
        return ""


def category_of(name: str) -> str | None:
    """Return the group of a canonical type ("text" for "text/plain")."""
    parts = name.split("/")
    if len(parts) != 2:
        return None
    group = parts[0].strip()
    return group or None


class MimeResolver:
    """Resolves raw type tokens through QMimeDatabase, caching the results."""

    def __init__(self) -> None:
        self._db = QMimeDatabase()
        self._cache: dict[str, MimeInfo | None] = {}

    def resolve(self, token: str) -> MimeInfo | None:
        token = token.strip()
        if token in self._cache:
            return self._cache[token]

        info = None
        if token:
            mimetype = self._db.mimeTypeForName(token)
            if mimetype.isValid():
                info = MimeInfo(
                    name=mimetype.name(),
                    comment=mimetype.comment(),
                    icon_name=mimetype.iconName(),
                    filter_string=mimetype.filterString(),
                )
        self._cache[token] = info
        return info

    def canonical_name(self, token: str) -> str | None:
        info = self.resolve(token)
        return info.name if info else None

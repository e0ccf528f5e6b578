"""Index of installed applications and the MIME types they claim to handle.

Several .desktop files can describe the same application (typically a visible
launcher plus NoDisplay helpers). Their records are folded together here:
MIME types accumulate, while the cited desktop file, name and icon prefer
visible entries over hidden ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

from defapps.core.desktop_parser import DesktopRecord, find_desktop_files, parse_desktop_file
from defapps.core.logger import get_logger
from defapps.core.mime_resolver import category_of

_log = get_logger("app_index")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", bound=Hashable)


class MultiMap(Generic[K, V]):
    """Maps each key to an insertion-ordered set of values."""

    def __init__(self) -> None:
        self._data: dict[K, dict[V, None]] = {}

    def add(self, key: K, value: V) -> bool:
        """Add a pair; returns False if it was already present."""
        values = self._data.setdefault(key, {})
        if value in values:
            return False
        values[value] = None
        return True

    def contains(self, key: K, value: V) -> bool:
        return value in self._data.get(key, {})

    def values(self, key: K) -> list[V]:
        return list(self._data.get(key, {}))

    def keys(self) -> list[K]:
        return list(self._data)

    def all_values(self) -> set[V]:
        return {v for values in self._data.values() for v in values}

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[K]:
        return iter(self._data)

    def __len__(self) -> int:
        return sum(len(v) for v in self._data.values())


@dataclass
class AppMetadata:
    display_name: str
    icon: str = ""


@dataclass
class _Cited:
    """A value picked from some record, tagged with that record's visibility."""
    value: object
    visible: bool


def takes_desktop_file(current: _Cited | None, record: DesktopRecord) -> bool:
    """A visible record always wins; a hidden one only until a visible one is seen."""
    return current is None or not record.hidden or not current.visible


def takes_metadata(current: _Cited | None, record: DesktopRecord) -> bool:
    """Like takes_desktop_file, but only records with an icon may replace name and icon."""
    if current is None:
        return True
    if not record.icon:
        return False
    return takes_desktop_file(current, record)


class ApplicationIndex:
    """Aggregate view over every parsed .desktop record."""

    def __init__(self) -> None:
        self._desktop_files: dict[str, _Cited] = {}
        self._metadata: dict[str, _Cited] = {}
        self._mimetypes: MultiMap[str, str] = MultiMap()
        self._applications: MultiMap[str, str] = MultiMap()

    @classmethod
    def scan(cls, dirs: Iterable[str | Path], resolver) -> "ApplicationIndex":
        """Parse every .desktop file in dirs and build an index from them."""
        index = cls()
        for path in find_desktop_files(dirs):
            record = parse_desktop_file(path, resolver)
            if record is not None:
                index.ingest(record)
        index.report_orphans()
        _log.info(
            "Indexed %d applications handling %d MIME types",
            len(index.identities()), len(index.all_mimetypes()),
        )
        return index

    def ingest(self, record: DesktopRecord) -> None:
        identity = record.identity
        visible = not record.hidden

        if takes_desktop_file(self._desktop_files.get(identity), record):
            self._desktop_files[identity] = _Cited(record.filename, visible)

        current = self._metadata.get(identity)
        if takes_metadata(current, record):
            self._metadata[identity] = _Cited(AppMetadata(record.name, record.icon), visible)

        for name in record.mimetypes:
            category = category_of(name)
            if category is None:
                continue
            if self._mimetypes.add(identity, name):
                self._applications.add(category, identity)

    # ── Queries ──
    def identities(self) -> list[str]:
        return sorted(self._mimetypes.keys())

    def categories(self) -> list[str]:
        """Type categories ("audio", "image", ...) that have applications, sorted."""
        return sorted(self._applications.keys())

    def applications_in(self, category: str) -> set[str]:
        return set(self._applications.values(category))

    def sorted_applications_in(self, category: str) -> list[str]:
        return sorted(
            self.applications_in(category),
            key=lambda identity: (self.metadata_for(identity).display_name, identity),
        )

    def metadata_for(self, identity: str) -> AppMetadata:
        cited = self._metadata.get(identity)
        if cited is None:
            return AppMetadata(display_name=identity)
        return cited.value

    def mimetypes_for(self, identity: str) -> list[str]:
        return sorted(self._mimetypes.values(identity))

    def mimetypes_claimed_by(self, identity: str, category: str | None = None) -> list[str]:
        """Types handled by identity, optionally limited to one category."""
        return [
            name for name in self.mimetypes_for(identity)
            if category is None or category_of(name) == category
        ]

    def all_mimetypes(self) -> list[str]:
        return sorted(self._mimetypes.all_values())

    def desktop_file_for(self, identity: str) -> str | None:
        cited = self._desktop_files.get(identity)
        return cited.value if cited else None

    def report_orphans(self) -> list[str]:
        """Applications with MIME types but no desktop file to cite as default."""
        orphans = [i for i in self.identities() if self.desktop_file_for(i) is None]
        for identity in orphans:
            _log.warning("%s does not have an associated desktop file!", identity)
        return orphans

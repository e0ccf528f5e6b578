"""Writer for the mimeapps.list default-applications file.

Only the association lines of the MIME types being changed are touched. Every
other section, comment and line is written back in its original order.

The rewrite is a plain read-modify-write with no locking: if another program
edits the file between our read and our write, its change is lost.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable

from defapps.core.app_index import ApplicationIndex
from defapps.core.errors import UnknownApplication, WriteFailure
from defapps.core.logger import get_logger

_log = get_logger("mimeapps")

DEFAULT_APPLICATIONS_HEADER = "[Default Applications]"


def _canonical_key(line: str, resolver) -> str:
    key = line.split("=", 1)[0].strip()
    # MIME names are ASCII; anything else cannot resolve
    if not key.isascii():
        return key
    info = resolver.resolve(key)
    return info.name if info else key


def _newline_of(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def split_mimeapps(text: str) -> tuple[list[str], list[str]]:
    """Split a document into lines outside [Default Applications] and entries inside it.

    Lines outside keep their line endings; entries inside are stripped and
    blank ones dropped.
    """
    preamble: list[str] = []
    associations: list[str] = []
    in_defaults = False
    for line in text.splitlines(keepends=True):
        stripped = line.strip()
        if stripped.startswith("["):
            in_defaults = stripped == DEFAULT_APPLICATIONS_HEADER
            if not in_defaults:
                preamble.append(line)
            continue
        if not in_defaults:
            preamble.append(line)
        elif stripped:
            associations.append(stripped)
    return preamble, associations


def merge_mimeapps(
    text: str,
    desktop_file: str,
    selected: Iterable[str],
    deselected: Iterable[str] = (),
    resolver=None,
) -> str:
    """Return text with desktop_file as the default for every selected type.

    Existing defaults for selected and deselected types are dropped first.
    """
    selected = set(selected)
    touched = selected | set(deselected)
    newline = _newline_of(text)

    preamble, associations = split_mimeapps(text)
    kept = []
    for line in associations:
        if "=" not in line:
            kept.append(line)
            continue
        key = _canonical_key(line, resolver) if resolver else line.split("=", 1)[0].strip()
        if key not in touched:
            kept.append(line)

    out = list(preamble)
    if out and not out[-1].endswith(("\n", "\r")):
        out[-1] += newline
    if out and out[-1].strip():
        out.append(newline)
    out.append(DEFAULT_APPLICATIONS_HEADER + newline)
    out.extend(line + newline for line in kept)
    out.extend(f"{name}={desktop_file}{newline}" for name in sorted(selected))
    return "".join(out)


class AssociationWriter:
    """Sets default applications on behalf of an ApplicationIndex."""

    def __init__(self, index: ApplicationIndex, resolver) -> None:
        self.index = index
        self.resolver = resolver

    def _desktop_file(self, identity: str) -> str:
        desktop_file = self.index.desktop_file_for(identity)
        if not desktop_file:
            _log.warning("invalid application %s", identity)
            raise UnknownApplication(identity)
        return desktop_file

    def apply(
        self,
        text: str,
        identity: str,
        selected: Iterable[str],
        deselected: Iterable[str] = (),
    ) -> str:
        """Merge a new default for identity into existing document text."""
        desktop_file = self._desktop_file(identity)
        return merge_mimeapps(text, desktop_file, selected, deselected, self.resolver)

    def save(
        self,
        path: str | Path,
        identity: str,
        selected: Iterable[str],
        deselected: Iterable[str] = (),
    ) -> str:
        """Rewrite the file at path; returns the new content."""
        # A symlinked file is rewritten at its target
        path = Path(os.path.realpath(path))
        desktop_file = self._desktop_file(identity)

        text = _read_document(path)
        content = merge_mimeapps(text, desktop_file, selected, deselected, self.resolver)
        _write_replacing(path, content)
        _log.info("Set %s as default in %s", desktop_file, path)
        return content


def _read_document(path: Path) -> str:
    """Current content of path, or "" when it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()
    except FileNotFoundError:
        _log.debug("%s does not exist yet, starting empty", path)
    except OSError as e:
        _log.warning("Unable to read %s, starting empty: %s", path, e)
    return ""


def _write_replacing(path: Path, content: str) -> None:
    """Write content next to path, then move it over path."""
    tmp_name = None
    try:
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as e:
        _log.error("Failed to write %s: %s", path, e)
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise WriteFailure(str(path), e.strerror or str(e)) from e

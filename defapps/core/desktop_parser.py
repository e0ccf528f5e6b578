""".desktop file parser — extracts identity, name, icon and supported MIME types."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from defapps.core.logger import get_logger
from defapps.core.mime_resolver import category_of

_log = get_logger("desktop_parser")

DESKTOP_ENTRY_HEADER = "[Desktop Entry]"


@dataclass
class DesktopRecord:
    """What one .desktop file says about the application it launches."""
    identity: str
    name: str
    filename: str
    icon: str = ""
    hidden: bool = False
    mimetypes: list[str] = field(default_factory=list)


def _simplify(line: str) -> str:
    return " ".join(line.split())


def identity_from_exec(exec_value: str) -> str | None:
    """Derive an application identity from an Exec= command line.

    The first word is the program, except for ``env VAR=value program ...``
    where the program is the third word. Paths are reduced to their basename.
    """
    parts = exec_value.split(" ")
    if not parts or not parts[0]:
        return None
    program = parts[2] if parts[0] == "env" and len(parts) > 2 else parts[0]
    return os.path.basename(program) or program


def resolve_mimetypes(tokens: Iterable[str], resolver) -> list[str]:
    """Canonicalize MimeType= tokens, dropping unknown and malformed ones."""
    names: list[str] = []
    for token in tokens:
        info = resolver.resolve(token.strip())
        if info is None or category_of(info.name) is None:
            continue
        if info.name not in names:
            names.append(info.name)
    return names


def parse_desktop_text(text: str, filename: str, resolver) -> DesktopRecord | None:
    """Parse the contents of a .desktop file.

    Returns None when the entry declares no usable MIME types.
    """
    in_desktop_entry = False
    identity = filename
    name = ""
    icon = ""
    hidden = False
    raw_types: list[str] = []

    for raw_line in text.splitlines():
        line = _simplify(raw_line)
        if line.startswith("["):
            in_desktop_entry = line == DESKTOP_ENTRY_HEADER
            continue
        if not in_desktop_entry or "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip()

        if key == "MimeType":
            raw_types = [t for t in value.split(";") if t.strip()]
        elif key == "Name":
            # First unqualified Name wins; Name[de]= etc. never match here
            if not name:
                name = value
        elif key == "Icon":
            icon = value
        elif key == "Exec":
            identity = identity_from_exec(value) or identity
        elif key == "NoDisplay":
            hidden = "true" in value.lower()

    mimetypes = resolve_mimetypes(raw_types, resolver)
    if not mimetypes:
        return None

    if not name:
        _log.warning("Missing name in %s (%s) for %s", filename, identity, ", ".join(mimetypes))
        name = identity

    return DesktopRecord(
        identity=identity,
        name=name,
        filename=filename,
        icon=icon,
        hidden=hidden,
        mimetypes=mimetypes,
    )


def parse_desktop_file(path: str | Path, resolver) -> DesktopRecord | None:
    """Parse a single .desktop file, or return None if it is unreadable or empty."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        _log.debug("Failed to open %s: %s", path, e)
        return None
    return parse_desktop_text(text, path.name, resolver)


def find_desktop_files(dirs: Iterable[str | Path]) -> list[Path]:
    """List the *.desktop files in each directory, in directory order."""
    files: list[Path] = []
    for d in dirs:
        d = Path(d)
        if not d.is_dir():
            continue
        _log.debug("Loading applications from %s", d)
        files.extend(sorted(p for p in d.glob("*.desktop") if p.is_file()))
    return files

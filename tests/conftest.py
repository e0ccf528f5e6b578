import pytest

from defapps.core.desktop_parser import DesktopRecord
from defapps.core.mime_resolver import MimeInfo

KNOWN_TYPES = {
    "text/plain": "plain text document",
    "text/html": "HTML document",
    "image/png": "PNG image",
    "image/jpeg": "JPEG image",
    "audio/mpeg": "MP3 audio",
    "application/pdf": "PDF document",
    "inode/directory": "folder",
}

ALIASES = {
    "image/jpg": "image/jpeg",
    "application/x-pdf": "application/pdf",
    "text/x-plain": "text/plain",
}


class FakeResolver:
    """Dictionary-backed stand-in for the QMimeDatabase resolver."""

    def __init__(self, extra=None):
        self.types = dict(KNOWN_TYPES)
        self.types.update(extra or {})
        self.lookups = []

    def resolve(self, token):
        token = token.strip()
        self.lookups.append(token)
        name = ALIASES.get(token, token)
        if name not in self.types:
            return None
        return MimeInfo(
            name=name,
            comment=self.types[name],
            icon_name=name.replace("/", "-"),
        )

    def canonical_name(self, token):
        info = self.resolve(token)
        return info.name if info else None


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def make_record():
    def _make(identity="app", filename=None, name=None, icon="app-icon",
              hidden=False, mimetypes=("text/plain",)):
        return DesktopRecord(
            identity=identity,
            name=name or identity.title(),
            filename=filename or f"{identity}.desktop",
            icon=icon,
            hidden=hidden,
            mimetypes=list(mimetypes),
        )
    return _make


def desktop_text(*lines, header="[Desktop Entry]"):
    return "\n".join([header, *lines]) + "\n"

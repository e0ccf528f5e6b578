"""QApplication subclass holding settings and the scanned application index."""

from PyQt6.QtWidgets import QApplication

from defapps import __app_name__, __version__
from defapps.core.app_index import ApplicationIndex
from defapps.core.config import Config
from defapps.core.logger import get_logger
from defapps.core.mime_resolver import MimeResolver

_log = get_logger("app")


class DefappsApp(QApplication):
    """Main application for defapps."""

    def __init__(self, argv: list[str]) -> None:
        super().__init__(argv)
        self.setApplicationName(__app_name__)
        self.setApplicationVersion(__version__)
        self.setDesktopFileName(__app_name__)

        self.config = Config()
        self.resolver = MimeResolver()
        self.index = self.load_index()

    def load_index(self) -> ApplicationIndex:
        dirs = self.config.application_dirs()
        _log.info("Scanning %d application directories", len(dirs))
        return ApplicationIndex.scan(dirs, self.resolver)

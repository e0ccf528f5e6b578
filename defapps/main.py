"""Entry point for defapps."""

import sys

from defapps.core.logger import setup_logging

setup_logging()

from defapps.app import DefappsApp
from defapps.ui.main_window import MainWindow


def main() -> None:
    app = DefappsApp(sys.argv)
    window = MainWindow(app)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()

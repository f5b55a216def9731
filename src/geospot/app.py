"""Application bootstrap for GeoSpot."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

from PySide6.QtWidgets import QApplication

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr at ``level``."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_application(argv: Optional[Iterable[str]] = None) -> QApplication:
    """Create and configure the QApplication instance."""
    args = list(argv) if argv is not None else sys.argv
    app = QApplication(args)
    QApplication.setApplicationName("GeoSpot")
    QApplication.setOrganizationName("GeoSpot")
    QApplication.setOrganizationDomain("geospot.local")
    return app


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse users and nearby landmarks on a map")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument("--settings", type=Path, help="YAML file with map settings")
    parser.add_argument(
        "--wikipedia",
        action="store_true",
        help="Look up landmarks with Wikipedia geosearch instead of the bundled catalog",
    )
    parser.add_argument("--language", default="en", help="Wikipedia language edition")
    args, _unknown = parser.parse_known_args(argv)
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point that boots the GUI event loop."""
    argv = list(argv) if argv is not None else sys.argv
    args = parse_args(argv[1:])
    configure_logging(args.log_level)
    log = logging.getLogger(__name__)

    # Lazy imports to keep argument errors fast and avoid cycles during bootstrap
    from geospot.models.settings import MapSettings
    from geospot.services.landmarks import CatalogLandmarkSource, WikipediaLandmarkSource
    from geospot.services.settings_loader import SettingsError, load_settings

    settings = MapSettings.default()
    if args.settings is not None:
        try:
            settings = load_settings(args.settings)
        except SettingsError as exc:
            log.error("Could not load settings from %s: %s", args.settings, exc)
            return 2

    if args.wikipedia:
        source = WikipediaLandmarkSource(language=args.language, user_agent=settings.user_agent)
    else:
        source = CatalogLandmarkSource.bundled()

    app = create_application(argv)

    from geospot.ui.main_window import MainWindow

    window = MainWindow(settings=settings, source=source)
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

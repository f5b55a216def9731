#!/usr/bin/env python3
"""List landmarks near a coordinate, with their short summaries."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from geospot.app import configure_logging  # noqa: E402
from geospot.models.entities import Position  # noqa: E402
from geospot.services.geo import haversine_m  # noqa: E402
from geospot.services.landmarks import (  # noqa: E402
    CatalogLandmarkSource,
    LandmarkSourceError,
    WikipediaLandmarkSource,
)
from geospot.services.summaries import ExtractiveSummarizer, SummaryError  # noqa: E402

log = logging.getLogger("find_landmarks")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List landmarks near a latitude/longitude")
    parser.add_argument("lat", type=float, help="Latitude in degrees")
    parser.add_argument("lng", type=float, help="Longitude in degrees")
    parser.add_argument("--radius", type=int, default=10_000, help="Search radius in meters")
    parser.add_argument("--limit", type=int, default=20, help="Maximum number of landmarks")
    parser.add_argument("--catalog", type=Path, help="YAML catalog to search instead of the bundled one")
    parser.add_argument("--wikipedia", action="store_true", help="Query Wikipedia geosearch")
    parser.add_argument("--log-level", default="WARNING", help="Logging verbosity")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    configure_logging(args.log_level)

    center = Position(args.lat, args.lng)
    if not center.is_valid:
        print(f"Invalid coordinate: {args.lat}, {args.lng}", file=sys.stderr)
        return 2

    try:
        if args.wikipedia:
            source = WikipediaLandmarkSource()
        elif args.catalog is not None:
            source = CatalogLandmarkSource.from_yaml(args.catalog)
        else:
            source = CatalogLandmarkSource.bundled()
        landmarks = source.fetch(center, radius_m=args.radius, limit=args.limit)
    except LandmarkSourceError as exc:
        print(f"Landmark lookup failed: {exc}", file=sys.stderr)
        return 1

    if not landmarks:
        print("No landmarks found.")
        return 0

    summarizer = ExtractiveSummarizer()
    for landmark in landmarks:
        distance = haversine_m(center, landmark.position) if landmark.position else float("nan")
        print(f"{landmark.title} ({distance:.0f} m)")
        try:
            print(f"    {summarizer.summarize(landmark.title, landmark.description, landmark.url)}")
        except SummaryError as exc:
            log.info("No summary for %s: %s", landmark.title, exc)
        if landmark.url:
            print(f"    {landmark.url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

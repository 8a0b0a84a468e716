#!/usr/bin/env python3
"""
inspect_floors.py - Print the floor catalog built from a course fixture.

Useful for checking how a progress snapshot maps onto library floors
(ordering, accessibility, status) without starting the viewer.

Usage:
  python scripts/inspect_floors.py
  python scripts/inspect_floors.py --fixture data/my_course.yaml --now 2025-10-05T00:00:00Z --json
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from campuslift.building import FloorCatalog, Floor, submission_summary
from campuslift.services import MockCourseService
from campuslift.utils import load_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_now(value: str) -> datetime:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def floor_to_dict(floor: Floor) -> dict:
    """Flatten a floor for JSON output."""
    entry = {
        "floor_number": floor.floor_number,
        "kind": floor.kind.value,
        "name": floor.name,
        "accessible": floor.accessible,
        "status": floor.status_text,
    }
    if floor.progress is not None:
        entry["record_id"] = floor.record_id
        entry["completion_percentage"] = floor.progress.completion_percentage
        entry["items"] = f"{floor.progress.completed_item_count}/{floor.progress.total_item_count}"
        entry["submissions"] = submission_summary(floor.record)
    return entry


def format_floor(floor: Floor) -> str:
    lock = "LOCKED" if not floor.accessible else "open"
    status = floor.status_text or "-"
    return f"{floor.floor_number:>3}  {lock:<6}  {floor.name:<40}  {status}"


def main():
    parser = argparse.ArgumentParser(
        description="Print the library floors built from a course fixture"
    )
    parser.add_argument(
        "--fixture",
        type=Path,
        default=None,
        help="Course fixture YAML (default: configured or bundled mock course)"
    )
    parser.add_argument(
        "--course-id",
        default=None,
        help="Course ID passed to the data source (default: from config)"
    )
    parser.add_argument(
        "--now",
        type=parse_now,
        default=None,
        help="Evaluate unlock dates at this ISO timestamp (default: current time)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print floors as JSON instead of a table"
    )

    args = parser.parse_args()
    config = load_config()

    service = MockCourseService(args.fixture or config.fixture_path, delay_ms=0)
    course_id = args.course_id or config.course_id

    logger.info(f"Loading modules for course {course_id}...")
    records = asyncio.run(service.fetch_records(course_id))

    catalog = FloorCatalog(lobby_name=config.layout.lobby_name)
    floors = catalog.build(records, now=args.now)

    if args.json:
        print(json.dumps([floor_to_dict(f) for f in floors], indent=2, ensure_ascii=False))
        return

    for floor in floors:
        print(format_floor(floor))

    locked = sum(1 for f in floors if not f.accessible)
    logger.info(f"Floors: {len(floors)} ({locked} locked)")


if __name__ == "__main__":
    main()

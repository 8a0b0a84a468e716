"""
MockCourseService - Development data source for course module progress.

Loads a YAML course fixture and serves it as if it came from the course
API, including simulated network latency.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from campuslift.schemas import ProgressRecord, parse_records

logger = logging.getLogger(__name__)


# Bundled fixture: a typical five-module course
DEFAULT_FIXTURE_PATH = Path(__file__).parent.parent / "data" / "mock_course.yaml"


def load_course_fixture(path: Path | None = None) -> dict[str, Any]:
    """
    Load a course fixture file.

    Returns:
        Dict with keys:
        - course: id and name
        - modules: list of raw module records

    Raises:
        FileNotFoundError: If the fixture doesn't exist
        yaml.YAMLError: If YAML parsing fails
        ValueError: If the file has no modules list
    """
    file_path = path or DEFAULT_FIXTURE_PATH
    if not file_path.exists():
        raise FileNotFoundError(f"Course fixture not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("modules"), list):
        raise ValueError(f"{file_path.name}: expected a mapping with a 'modules' list")
    return data


class MockCourseService:
    """
    Serve course modules from a fixture file.

    Args:
        fixture_path: YAML fixture (default: bundled mock course)
        delay_ms: Simulated network latency per fetch
    """

    def __init__(self, fixture_path: Path | None = None, delay_ms: int = 300):
        self.fixture_path = fixture_path or DEFAULT_FIXTURE_PATH
        self.delay_ms = delay_ms
        self.fetch_count = 0

    async def fetch_records(self, course_id: str) -> list[ProgressRecord]:
        """Fetch and validate the modules of a course."""
        self.fetch_count += 1
        if self.delay_ms:
            await asyncio.sleep(self.delay_ms / 1000)

        data = load_course_fixture(self.fixture_path)
        records = parse_records(data["modules"])
        logger.info(f"Fetched {len(records)} modules for course {course_id}")
        return records

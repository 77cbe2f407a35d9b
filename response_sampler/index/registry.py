"""Sample index registry — persists which paths have been sampled."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from response_sampler.models.index import IndexEntry, SampleIndex

logger = logging.getLogger(__name__)


def format_fetch_timestamp(moment: datetime, timezone: str = "America/New_York") -> str:
    """Format a timestamp the way index entries record it, e.g. ``1/18/2024, 3:04:05 PM``."""
    local = moment.astimezone(ZoneInfo(timezone))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
    )


class SampleIndexManager:
    """Manages the index.json file for one test case group."""

    def __init__(self, index_path: Path, test_case_group: str, timezone: str = "America/New_York"):
        self.path = index_path
        self.test_case_group = test_case_group
        self.timezone = timezone

    def load(self) -> SampleIndex:
        """Load the index from disk, or create an empty one."""
        if self.path.exists():
            try:
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f)
                index = SampleIndex.from_document(data)
                logger.debug("Loaded %d index entries from %s", len(index), self.path)
                return index
            except Exception as e:
                logger.warning("Failed to load index %s: %s. Starting empty.", self.path, e)
        return SampleIndex()

    def save(self, index: SampleIndex) -> None:
        """Rewrite the whole index to disk.

        The document is written to a sibling temp file and swapped in, so an
        interrupted flush leaves the previous index intact.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(index.to_document(), f, indent=4, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved index (%d entries) to %s", len(index), self.path)

    def new_entry(self, key: str, fetched_at: datetime) -> IndexEntry:
        """An entry with no sample files or screenshots recorded yet."""
        return IndexEntry(
            key=key,
            test_case_group=self.test_case_group,
            fetch_timestamp=format_fetch_timestamp(fetched_at, self.timezone),
        )

    def summarize(self, index: SampleIndex) -> dict:
        """Count index entries, samples and screenshots per service."""
        samples: dict[str, int] = {}
        screenshots: dict[str, int] = {}
        for entry in index.entries.values():
            for service in entry.sample_files:
                samples[service] = samples.get(service, 0) + 1
            for service in entry.screenshots:
                screenshots[service] = screenshots.get(service, 0) + 1
        return {
            "test_case_group": self.test_case_group,
            "entries": len(index),
            "samples": samples,
            "screenshots": screenshots,
        }

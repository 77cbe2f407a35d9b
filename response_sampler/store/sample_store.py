"""Sample store — maps relative sample and screenshot paths onto disk."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class SampleStore:
    """Resolves sample/screenshot locations and writes sample HTML.

    Holds no state beyond its two base directories and never deletes files.
    """

    def __init__(self, response_samples_dir: Path, screenshots_dir: Path):
        self.response_samples_dir = response_samples_dir
        self.screenshots_dir = screenshots_dir

    def sample_path(self, relative_path: str) -> Path:
        return self.response_samples_dir / relative_path

    def screenshot_path(self, relative_path: str) -> Path:
        """Absolute screenshot location, with its parent directory created."""
        path = self.screenshots_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def write_sample(self, relative_path: str, html: str) -> Path:
        """Write sample HTML, creating missing parent directories."""
        path = self.sample_path(relative_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(html)
        logger.debug("Wrote sample file %s", path)
        return path

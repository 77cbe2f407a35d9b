"""Configuration models for the response sampler."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

INDEX_FILE_NAME = "index.json"

DEFAULT_SERVICES = ["bobcat-redirects", "bobcat-primo-classic"]

# 5 minutes
DEFAULT_TIMEOUT_MS = 300_000

# Number of seconds to wait between test case paths
DEFAULT_SLEEP_SECONDS = 0.0


class RunConfig(BaseModel):
    # Target
    test_case_group: str
    root_dir: Path = Path(".")

    # Services, in the order they are sampled for each path
    services: list[str] = Field(default_factory=lambda: list(DEFAULT_SERVICES))
    exclude: list[str] = Field(default_factory=list)
    endpoint_overrides: dict[str, str] = Field(default_factory=dict)

    # Browser
    headed: bool = False
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    # Run scope
    limit: Optional[int] = None
    replace: bool = False
    sleep_seconds: float = DEFAULT_SLEEP_SECONDS

    # Index
    timezone: str = "America/New_York"

    @field_validator("limit", "timeout_ms")
    @classmethod
    def non_negative_int(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("sleep_seconds")
    @classmethod
    def non_negative_sleep(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @property
    def logs_dir(self) -> Path:
        return self.root_dir / "logs"

    @property
    def response_samples_dir(self) -> Path:
        return self.root_dir / "response-samples"

    @property
    def screenshots_dir(self) -> Path:
        return self.root_dir / "screenshots"

    @property
    def test_case_files_dir(self) -> Path:
        return self.root_dir / "test-case-files"

    @property
    def index_path(self) -> Path:
        return self.response_samples_dir / self.test_case_group / INDEX_FILE_NAME

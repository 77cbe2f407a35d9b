"""Run result data structures."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PathResult(BaseModel):
    path: str
    key: str
    fetched: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    write_errors: list[str] = Field(default_factory=list)
    screenshot_errors: list[str] = Field(default_factory=list)
    index_saved: bool = True

    @property
    def ok(self) -> bool:
        return not self.failed


class RunResult(BaseModel):
    test_case_group: str
    services: list[str] = Field(default_factory=list)
    started_at: str = ""
    completed_at: str = ""
    duration_seconds: float = 0.0
    path_results: list[PathResult] = Field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.path_results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.path_results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.path_results if not r.ok)

    @property
    def inconsistent_paths(self) -> list[str]:
        return [r.path for r in self.path_results if r.write_errors]

    def failures_by_service(self) -> dict[str, int]:
        counts: dict[str, int] = {service: 0 for service in self.services}
        for result in self.path_results:
            for service in result.failed:
                counts[service] = counts.get(service, 0) + 1
        return counts

"""Resumable index data structures.

Field aliases match the JSON written by earlier runs, so existing
``index.json`` files keep loading.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IndexEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    test_case_group: str = Field(alias="testCaseGroup")
    fetch_timestamp: str = Field(alias="fetchTimestamp")
    sample_files: dict[str, str] = Field(default_factory=dict, alias="sampleFiles")
    screenshots: dict[str, str] = Field(default_factory=dict)


class SampleIndex(BaseModel):
    """All index entries for one test case group, keyed by URL path."""

    entries: dict[str, IndexEntry] = Field(default_factory=dict)

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, path: str) -> IndexEntry | None:
        return self.entries.get(path)

    def put(self, path: str, entry: IndexEntry) -> None:
        self.entries[path] = entry

    def to_document(self) -> dict:
        """The JSON document form: an object keyed by path."""
        return {
            path: entry.model_dump(by_alias=True)
            for path, entry in self.entries.items()
        }

    @classmethod
    def from_document(cls, data: dict) -> "SampleIndex":
        return cls(entries={
            path: IndexEntry.model_validate(entry)
            for path, entry in data.items()
        })

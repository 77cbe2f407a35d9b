"""Shared URL utilities — recognize permalink URLs and derive stable sample keys."""

from __future__ import annotations

import re
from collections import defaultdict
from urllib.parse import urlparse

PERMALINK_URL_PATTERN = re.compile(r"^https?://bobcat.library.nyu.edu/permalink.*/")


def is_permalink_url(line: str) -> bool:
    """Return True if a test case line is an eligible permalink URL."""
    return PERMALINK_URL_PATTERN.match(line) is not None


def url_path(url: str) -> str:
    return urlparse(url).path


def sample_key(path: str) -> str:
    """Derive the filesystem-safe sample key for a URL path.

    ``/permalink/ab/cd1`` becomes ``permalink--ab--cd1``.
    """
    return path[1:].replace("/", "--")


def find_key_collisions(paths: list[str]) -> dict[str, list[str]]:
    """Return sample keys shared by more than one distinct path."""
    by_key: dict[str, set[str]] = defaultdict(set)
    for path in paths:
        by_key[sample_key(path)].add(path)
    return {
        key: sorted(colliding)
        for key, colliding in by_key.items()
        if len(colliding) > 1
    }

"""Sampling orchestrator — resolves a run and drives the collector."""

from __future__ import annotations

import asyncio
import logging

from response_sampler.browser.session import open_browser_page
from response_sampler.collector.collector import SampleCollector
from response_sampler.extractor.test_case_paths import (
    TestCaseGroupError,
    extract_test_case_paths,
    list_test_case_groups,
)
from response_sampler.index.registry import SampleIndexManager
from response_sampler.models.config import RunConfig
from response_sampler.models.index import SampleIndex
from response_sampler.models.run_result import RunResult
from response_sampler.samplers.sampler import build_samplers, validate_service_keys
from response_sampler.store.sample_store import SampleStore
from response_sampler.url_utils import find_key_collisions

logger = logging.getLogger(__name__)


class Orchestrator:
    """Coordinates one sampling run for a test case group."""

    def __init__(self, config: RunConfig):
        self.config = config
        groups = list_test_case_groups(config.test_case_files_dir)
        if config.test_case_group not in groups:
            raise TestCaseGroupError(config.test_case_group, groups)
        validate_service_keys(config.services)
        validate_service_keys(config.exclude)

        self.index_manager = SampleIndexManager(
            index_path=config.index_path,
            test_case_group=config.test_case_group,
            timezone=config.timezone,
        )
        self.store = SampleStore(config.response_samples_dir, config.screenshots_dir)

    def run(self) -> RunResult:
        """Sample every pending path for the configured group."""
        return asyncio.run(self._run())

    async def _run(self) -> RunResult:
        index = self.index_manager.load()
        paths = self._pending_paths(index)
        logger.info(
            "=== Sampling group %s: %d paths pending (index has %d entries) ===",
            self.config.test_case_group, len(paths), len(index),
        )

        async with open_browser_page(
            headed=self.config.headed, timeout_ms=self.config.timeout_ms,
        ) as page:
            # Samplers run serially in this order against the shared page.
            samplers = build_samplers(
                self.config.services,
                self.config.test_case_group,
                page,
                endpoint_overrides=self.config.endpoint_overrides,
                exclude=self.config.exclude,
            )
            collector = SampleCollector(
                samplers,
                index,
                self.index_manager,
                self.store,
                sleep_seconds=self.config.sleep_seconds,
            )
            result = await collector.collect(paths)

        logger.info(
            "=== Sampling complete: %d succeeded, %d failed in %.1fs ===",
            result.succeeded, result.failed, result.duration_seconds,
        )
        return result

    def pending_paths(self) -> list[str]:
        """Paths a run would process, without starting a browser."""
        return self._pending_paths(self.index_manager.load())

    def _pending_paths(self, index: SampleIndex) -> list[str]:
        paths = sorted(set(extract_test_case_paths(
            self.config.test_case_files_dir, self.config.test_case_group,
        )))

        for key, colliding in find_key_collisions(paths).items():
            logger.warning("Sample key %s is shared by %s", key, ", ".join(colliding))

        if not self.config.replace:
            before = len(paths)
            paths = [p for p in paths if p not in index]
            logger.debug("Skipping %d paths already in the index", before - len(paths))

        if self.config.limit:
            paths = paths[:self.config.limit]

        return paths

    def index_summary(self) -> dict:
        """Per-service counts of the group's index."""
        return self.index_manager.summarize(self.index_manager.load())

"""Sample collector — runs every sampler for every path, one at a time."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from response_sampler.index.registry import SampleIndexManager
from response_sampler.models.index import SampleIndex
from response_sampler.models.run_result import PathResult, RunResult
from response_sampler.samplers.sampler import ServiceSampler
from response_sampler.store.sample_store import SampleStore
from response_sampler.url_utils import sample_key

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SampleCollector:
    """Collects response samples for a list of paths.

    Samplers share one browser page, so they run strictly in the order given
    and each path is finished (files written, index flushed) before the next
    one starts. A failing sampler never aborts the run.
    """

    def __init__(
        self,
        samplers: list[ServiceSampler],
        index: SampleIndex,
        index_manager: SampleIndexManager,
        store: SampleStore,
        sleep_seconds: float = 0.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.samplers = samplers
        self.index = index
        self.index_manager = index_manager
        self.store = store
        self.sleep_seconds = sleep_seconds
        self.clock = clock or _utc_now

    async def collect(self, paths: list[str]) -> RunResult:
        """Process each path in order and return a summary of the run."""
        started_at = time.strftime("%Y-%m-%dT%H:%M:%SZ")
        start_time = time.time()
        result = RunResult(
            test_case_group=self.index_manager.test_case_group,
            services=[s.service_key for s in self.samplers],
            started_at=started_at,
        )
        logger.info(
            "Sampling %d paths from %s",
            len(paths), ", ".join(s.name for s in self.samplers) or "no services",
        )

        for i, path in enumerate(paths, 1):
            logger.debug("[%d/%d] %s", i, len(paths), path)
            result.path_results.append(await self.process_path(path))
            if i < len(paths):
                await asyncio.sleep(self.sleep_seconds)

        result.completed_at = time.strftime("%Y-%m-%dT%H:%M:%SZ")
        result.duration_seconds = round(time.time() - start_time, 2)
        return result

    async def process_path(self, path: str) -> PathResult:
        key = sample_key(path)
        entry = self.index_manager.new_entry(key, self.clock())
        path_result = PathResult(path=path, key=key)

        html: dict[str, str] = {}
        for sampler in self.samplers:
            response_html = await self._fetch_response_html(sampler, path)
            if response_html is not None:
                entry.sample_files[sampler.service_key] = sampler.sample_file_path(key)
                html[sampler.service_key] = response_html
                path_result.fetched.append(sampler.service_key)
            else:
                path_result.failed.append(sampler.service_key)
                logger.error("%s: failed to fetch response for %s", path, sampler.name)
                screenshot = await self._save_screenshot(sampler, path, key)
                if screenshot:
                    entry.screenshots[sampler.service_key] = screenshot
                else:
                    path_result.screenshot_errors.append(sampler.service_key)

        for service_key, sample_file in entry.sample_files.items():
            try:
                self.store.write_sample(sample_file, html[service_key])
            except OSError as e:
                logger.error(
                    "%s: failed to write sample file %s: %s",
                    path, self.store.sample_path(sample_file), e,
                )
                path_result.write_errors.append(service_key)

        if path_result.write_errors:
            logger.error("%s: test group sample directory might be in an inconsistent state", path)

        if path_result.ok:
            logger.info(
                "%s: fetched responses: %s",
                path, ", ".join(s.name for s in self.samplers),
            )

        self.index.put(path, entry)
        try:
            self.index_manager.save(self.index)
        except OSError as e:
            logger.error("%s: failed to write index file %s: %s", path, self.index_manager.path, e)
            path_result.index_saved = False

        return path_result

    async def _fetch_response_html(self, sampler: ServiceSampler, path: str) -> str | None:
        url = sampler.url_for(path)
        try:
            return await sampler.fetch_sample_html(url)
        except Exception as e:
            logger.error("%s | %s: %s", path, url, e)
            return None

    async def _save_screenshot(self, sampler: ServiceSampler, path: str, key: str) -> str:
        """Capture the page's current state for a failed fetch.

        Returns the relative screenshot path, or "" if the capture failed.
        """
        relative_path = sampler.screenshot_file_path(key)
        screenshot_file = self.store.screenshots_dir / relative_path
        try:
            screenshot_file = self.store.screenshot_path(relative_path)
            await sampler.page.screenshot(path=str(screenshot_file))
            logger.error("%s: saved screenshot file %s", path, screenshot_file)
            return relative_path
        except Exception as e:
            logger.error("%s: error saving screenshot file %s: %s", path, screenshot_file, e)
            return ""

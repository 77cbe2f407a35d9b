"""Service sampler — drives the shared page against one backend."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Awaitable, Optional

from playwright.async_api import Page

from .profiles import PROFILES, SamplerProfile

logger = logging.getLogger(__name__)

SAMPLE_FILE_EXTENSION = ".html"
SCREENSHOT_FILE_EXTENSION = ".png"


class UnknownServiceError(ValueError):
    """Raised when a service key has no sampler profile."""

    def __init__(self, service_key: str):
        self.service_key = service_key
        super().__init__(
            f'"{service_key}" is not a recognized service. '
            f"Please select from one of the following: {', '.join(PROFILES)}"
        )


class ServiceSampler:
    """Fetches response HTML for one backend using the shared browser page.

    Backends differ only in their endpoint and the UI element that signals a
    fully loaded response, both of which come from the profile.
    """

    def __init__(
        self,
        profile: SamplerProfile,
        test_case_group: str,
        page: Page,
        endpoint_override: Optional[str] = None,
    ):
        self.profile = profile
        self.test_case_group = test_case_group
        self.page = page
        self.endpoint = endpoint_override or profile.default_endpoint

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def service_key(self) -> str:
        return self.profile.service_key

    def url_for(self, path: str) -> str:
        return self.endpoint.rstrip("/") + "/" + path.lstrip("/")

    def wait_for_ready(self) -> Awaitable[None]:
        """Resolve once the backend's ready marker is in the current document."""
        return self.page.locator(self.profile.ready_selector).wait_for()

    async def fetch_sample_html(self, url: str) -> str:
        """Navigate to ``url`` and return the rendered HTML once it is ready.

        Navigation errors and ready timeouts propagate to the caller.
        """
        logger.debug("%s: navigating to %s", self.name, url)
        await self.page.goto(url)
        await self.wait_for_ready()
        return await self.page.content()

    def sample_file_path(self, key: str) -> str:
        """Sample file location relative to the response samples directory."""
        return str(
            PurePosixPath(self.test_case_group, self.service_key, key + SAMPLE_FILE_EXTENSION)
        )

    def screenshot_file_path(self, key: str) -> str:
        """Screenshot location relative to the screenshots directory."""
        return str(PurePosixPath(self.service_key, key + SCREENSHOT_FILE_EXTENSION))

    def __repr__(self) -> str:
        return f"ServiceSampler({self.service_key!r}, endpoint={self.endpoint!r})"


def validate_service_keys(service_keys: list[str]) -> None:
    for service_key in service_keys:
        if service_key.lower() not in PROFILES:
            raise UnknownServiceError(service_key)


def build_samplers(
    service_keys: list[str],
    test_case_group: str,
    page: Page,
    endpoint_overrides: dict[str, str] | None = None,
    exclude: list[str] | None = None,
) -> list[ServiceSampler]:
    """Build samplers in the given order, skipping excluded service keys.

    Unknown keys raise ``UnknownServiceError``, whether selected or excluded.
    """
    endpoint_overrides = endpoint_overrides or {}
    validate_service_keys(exclude or [])
    excluded = {key.lower() for key in exclude or []}

    samplers: list[ServiceSampler] = []
    for service_key in service_keys:
        profile = PROFILES.get(service_key.lower())
        if profile is None:
            raise UnknownServiceError(service_key)
        if profile.service_key in excluded:
            logger.info("Excluding service %s", profile.service_key)
            continue
        samplers.append(ServiceSampler(
            profile,
            test_case_group,
            page,
            endpoint_overrides.get(profile.service_key),
        ))
    return samplers

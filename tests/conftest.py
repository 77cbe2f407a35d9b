"""Pytest configuration and shared fixtures."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from response_sampler.index.registry import SampleIndexManager
from response_sampler.models.config import RunConfig
from response_sampler.models.index import SampleIndex
from response_sampler.samplers.profiles import BOBCAT_PRIMO_CLASSIC, BOBCAT_REDIRECTS
from response_sampler.samplers.sampler import ServiceSampler
from response_sampler.store.sample_store import SampleStore

# A simple 1x1 pixel PNG
PNG_DATA = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01'
    b'\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde\x00\x00'
    b'\x00\x0cIDATx\x9cc\x00\x01\x00\x00\x05\x00\x01\r\n-'
    b'\xb4\x00\x00\x00\x00IEND\xaeB`\x82'
)

REDIRECTS_ENDPOINT = "http://redirects.test"
PRIMO_ENDPOINT = "http://primo.test"


# ============================================================================
# Fake Playwright page
# ============================================================================


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    async def wait_for(self) -> None:
        self.page.events.append(("wait_for", self.page.url, self.selector))
        await asyncio.sleep(0)
        if self.page.url in self.page.timeout_urls:
            raise PlaywrightTimeoutError(f"Timeout waiting for {self.selector}")
        self.page.events.append(("ready", self.page.url, self.selector))


class FakePage:
    """Records navigations in order, like a single shared Playwright page."""

    def __init__(
        self,
        timeout_urls: set[str] | None = None,
        goto_error_urls: set[str] | None = None,
        screenshot_error: Exception | None = None,
    ):
        self.url = "about:blank"
        self.events: list[tuple] = []
        self.timeout_urls = timeout_urls or set()
        self.goto_error_urls = goto_error_urls or set()
        self.screenshot_error = screenshot_error
        self.screenshots: list[str] = []
        self.default_timeout: int | None = None

    async def goto(self, url: str) -> None:
        self.events.append(("goto", url))
        await asyncio.sleep(0)
        if url in self.goto_error_urls:
            raise PlaywrightError(f"net::ERR_CONNECTION_REFUSED at {url}")
        self.url = url

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def content(self) -> str:
        self.events.append(("content", self.url))
        return f"<html><body>{self.url}</body></html>"

    async def screenshot(self, path: str | None = None, **kwargs) -> bytes:
        self.events.append(("screenshot", self.url))
        if self.screenshot_error:
            raise self.screenshot_error
        if path:
            Path(path).write_bytes(PNG_DATA)
            self.screenshots.append(path)
        return PNG_DATA

    def set_default_timeout(self, timeout: int) -> None:
        self.default_timeout = timeout

    def navigations(self) -> list[str]:
        return [e[1] for e in self.events if e[0] == "goto"]


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def mock_page() -> AsyncMock:
    """Create a mock Playwright page."""
    page = AsyncMock(spec=Page)
    page.url = "https://example.com"
    page.goto = AsyncMock()
    page.content = AsyncMock(return_value="<html><body>sample</body></html>")
    page.screenshot = AsyncMock()
    locator = Mock()
    locator.wait_for = AsyncMock()
    page.locator = Mock(return_value=locator)
    return page


def patched_browser(page):
    """A stand-in for open_browser_page that yields ``page``."""
    opened = []

    @asynccontextmanager
    async def _open(headed=False, timeout_ms=300_000):
        opened.append({"headed": headed, "timeout_ms": timeout_ms})
        page.set_default_timeout(timeout_ms)
        yield page

    _open.opened = opened
    return _open


# ============================================================================
# Project layout fixtures
# ============================================================================


@pytest.fixture
def fixed_clock():
    """18 Jan 2024 20:04:05 UTC, i.e. 3:04:05 PM in New York."""
    return lambda: datetime(2024, 1, 18, 20, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A project root with one test case group named ``libguides``."""
    group_dir = tmp_path / "test-case-files" / "libguides"
    group_dir.mkdir(parents=True)
    (group_dir / "links.txt").write_text(
        "https://bobcat.library.nyu.edu/permalink/f/b/A\n"
        "not a url\n"
        "https://bobcat.library.nyu.edu/permalink/f/b/B\n"
    )
    return tmp_path


def write_test_case_file(root: Path, group: str, name: str, paths: list[str]) -> Path:
    path = root / "test-case-files" / group / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "\n".join(f"https://bobcat.library.nyu.edu{p}" for p in paths) + "\n"
    )
    return path


@pytest.fixture
def run_config(project_root: Path) -> RunConfig:
    return RunConfig(
        test_case_group="libguides",
        root_dir=project_root,
        endpoint_overrides={
            "bobcat-redirects": REDIRECTS_ENDPOINT,
            "bobcat-primo-classic": PRIMO_ENDPOINT,
        },
    )


@pytest.fixture
def index_manager(tmp_path: Path) -> SampleIndexManager:
    return SampleIndexManager(
        tmp_path / "response-samples" / "libguides" / "index.json",
        test_case_group="libguides",
    )


@pytest.fixture
def sample_store(tmp_path: Path) -> SampleStore:
    return SampleStore(tmp_path / "response-samples", tmp_path / "screenshots")


@pytest.fixture
def samplers_for():
    """Build the default redirects + primo sampler pair against a page."""
    def _build(page) -> list[ServiceSampler]:
        return [
            ServiceSampler(BOBCAT_REDIRECTS, "libguides", page, REDIRECTS_ENDPOINT),
            ServiceSampler(BOBCAT_PRIMO_CLASSIC, "libguides", page, PRIMO_ENDPOINT),
        ]
    return _build


@pytest.fixture
def empty_index() -> SampleIndex:
    return SampleIndex()


@pytest.fixture
def browser_patch():
    """Fixture that provides the patched_browser factory."""
    return patched_browser


@pytest.fixture
def case_file_writer():
    """Fixture that provides the write_test_case_file function."""
    return write_test_case_file


@pytest.fixture
def page_factory():
    """Fixture that provides the FakePage class for custom failure setups."""
    return FakePage

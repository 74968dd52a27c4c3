"""Shared test fixtures.

FakePage implements the subset of the Playwright Page/Locator API the
scraper uses, so the pipeline can run end to end without a browser.
"""

import asyncio

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from exam_scraper.config import ScraperConfig


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self.page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        self.page.actions.append(("wait_for", self.selector, timeout))
        if not self.page.has_input:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def click(self, click_count: int = 1) -> None:
        self.page.actions.append(("click", click_count))
        if click_count >= 3:
            self.page.selected = True

    async def press(self, key: str) -> None:
        self.page.actions.append(("press", key))
        if key == "Backspace" and self.page.selected:
            self.page.input_value = ""
            self.page.selected = False
        elif key == "Enter":
            self.page.submitted = True

    async def press_sequentially(self, text: str, delay: float = 0) -> None:
        self.page.actions.append(("type", text, delay))
        self.page.input_value += text

    async def count(self) -> int:
        if self.page.poll_error is not None:
            raise self.page.poll_error
        self.page.polls += 1
        return len(self.page.rows) if self.page.rendered else 0

    async def inner_text(self, timeout: float | None = None) -> str:
        self.page.inner_text_timeouts.append(timeout)
        if self.page.inner_text_delay:
            await asyncio.sleep(self.page.inner_text_delay)
        return self.page.body_text if self.page.rendered else ""

    async def evaluate_all(self, expression: str) -> list[list[str]]:
        if self.page.extract_error is not None:
            raise self.page.extract_error
        self.page.rows_read = True
        if not self.page.rendered:
            return []
        return [list(row) for row in self.page.rows]


class FakePage:
    """Portal page double; results render once the query is submitted."""

    def __init__(
        self,
        rows: list[list[str]] | None = None,
        body_text: str = "",
        has_input: bool = True,
        render_after_polls: int = 1,
        goto_error: Exception | None = None,
        goto_delay: float = 0.0,
        route_error: Exception | None = None,
        poll_error: Exception | None = None,
        extract_error: Exception | None = None,
        inner_text_delay: float = 0.0,
    ) -> None:
        self.rows = rows or []
        self.body_text = body_text
        self.has_input = has_input
        self.render_after_polls = render_after_polls
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.route_error = route_error
        self.poll_error = poll_error
        self.extract_error = extract_error
        self.inner_text_delay = inner_text_delay

        self.input_value = "stale value"
        self.selected = False
        self.submitted = False
        self.polls = 0
        self.rows_read = False
        self.inner_text_timeouts: list[float | None] = []
        self.actions: list[tuple] = []
        self.goto_calls: list[tuple[str, dict]] = []
        self.routes: list[tuple[str, object]] = []

    @property
    def rendered(self) -> bool:
        return self.submitted and self.polls >= self.render_after_polls

    async def goto(self, url: str, **kwargs) -> None:
        self.goto_calls.append((url, kwargs))
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error is not None:
            raise self.goto_error

    async def route(self, pattern: str, handler) -> None:
        if self.route_error is not None:
            raise self.route_error
        self.routes.append((pattern, handler))

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)


class FakeSession:
    def __init__(self, page: FakePage, close_error: Exception | None = None) -> None:
        self.page = page
        self.close_error = close_error
        self.close_calls = 0

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeLauncher:
    """Launcher double that counts launches and hands out FakeSessions."""

    def __init__(
        self,
        page: FakePage | None = None,
        error: Exception | None = None,
        close_error: Exception | None = None,
    ) -> None:
        self.page = page or FakePage()
        self.error = error
        self.close_error = close_error
        self.calls = 0
        self.sessions: list[FakeSession] = []

    async def __call__(self, config: ScraperConfig) -> FakeSession:
        self.calls += 1
        if self.error is not None:
            raise self.error
        session = FakeSession(self.page, close_error=self.close_error)
        self.sessions.append(session)
        return session


EXAM_ROWS = [
    ["2301MC21", "Monday", "CS201", "12 Jan", "Morning", "Room 4", "Data Structures"],
    ["2301MC21", "Wednesday", "CS202", "14 Jan", "Afternoon", "Room 7", "Databases"],
]


@pytest.fixture
def fast_config() -> ScraperConfig:
    """Config with short timeouts so wait paths finish quickly."""
    return ScraperConfig(
        _env_file=None,
        exam_portal_url="https://portal.test/",
        navigation_timeout_ms=1000,
        input_timeout_ms=500,
        result_timeout_ms=50,
        poll_interval_ms=5,
        type_delay_ms=0,
        total_timeout_ms=2000,
    )


@pytest.fixture
def exam_rows() -> list[list[str]]:
    return [list(row) for row in EXAM_ROWS]

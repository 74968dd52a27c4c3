"""ExamSchedulePage - looks up a roll number on the exam schedule portal.

The portal is a single search page rendered client-side:

  input                      -> the only text input; Enter submits the search
  table tbody tr > td        -> one row per exam, columns in fixed order
  body text "No results found" -> rendered instead of rows for unknown roll numbers

Column order (the portal's implicit schema, see COLUMNS):
  0 roll number | 1 day | 2 course code | 3 date | 4 shift | 5 room | 6 title

Rows with fewer than MIN_CELLS cells are header/footer or malformed rows and
are dropped. If the portal changes its layout, rows start being dropped
rather than raising.
"""

import asyncio

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from exam_scraper.config import ScraperConfig
from exam_scraper.errors import InputNotFound, NavigationFailure
from exam_scraper.logging import get_logger
from exam_scraper.models import ExamRecord

log = get_logger(__name__)

# Cell index -> ExamRecord field
COLUMNS: tuple[tuple[int, str], ...] = (
    (0, "query_identifier"),
    (1, "day_name"),
    (2, "course_code"),
    (3, "exam_date"),
    (4, "shift"),
    (5, "room"),
    (6, "title"),
)

MIN_CELLS = 5

# innerText of each td, per row of the results table body
_READ_ROWS_JS = """rows => rows.map(
    row => Array.from(row.querySelectorAll('td')).map(td => td.innerText)
)"""


def parse_row(cells: list[str]) -> ExamRecord | None:
    """Map one table row to an ExamRecord by position.

    Returns None for rows with fewer than MIN_CELLS cells. Optional trailing
    columns (room, title) are None when absent.
    """
    if len(cells) < MIN_CELLS:
        return None

    values: dict[str, str | None] = {}
    for index, field in COLUMNS:
        values[field] = cells[index].strip() if index < len(cells) else None
    return ExamRecord(**values)


def parse_rows(rows: list[list[str]]) -> list[ExamRecord]:
    """Convert raw table rows to records, keeping source order."""
    records: list[ExamRecord] = []
    for cells in rows:
        record = parse_row(cells)
        if record is not None:
            records.append(record)

    dropped = len(rows) - len(records)
    if dropped:
        log.debug("malformed_rows_dropped", dropped=dropped, kept=len(records))
    return records


class ExamSchedulePage:
    """Search page of the exam schedule portal.

    Drives one lookup: navigate, submit the roll number, wait for the
    results to render, read the table.
    """

    INPUT = "input"
    RESULT_ROWS = "table tbody tr"
    BODY = "body"

    def __init__(self, page: Page, config: ScraperConfig) -> None:
        self.page = page
        self.config = config

    async def navigate(self) -> None:
        """Open the portal and wait for the DOM to be parsed.

        Raises:
            NavigationFailure: On timeout or network error.
        """
        url = self.config.exam_portal_url
        try:
            await self.page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.config.navigation_timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise NavigationFailure(f"Portal did not load within timeout: {url}") from e
        except PlaywrightError as e:
            raise NavigationFailure(f"Portal unreachable: {e}") from e

        log.info("exam_page_navigated", url=url)

    async def submit_query(self, query_identifier: str) -> None:
        """Type the roll number into the search input and press Enter.

        Any pre-filled value is selected and deleted first. Keys are typed one
        at a time because the portal validates on keystroke events.

        Raises:
            InputNotFound: If no input appears within the input timeout.
        """
        search_input = self.page.locator(self.INPUT).first
        try:
            await search_input.wait_for(
                state="visible", timeout=self.config.input_timeout_ms
            )
        except PlaywrightTimeoutError as e:
            raise InputNotFound("Search input not found on portal page") from e

        await search_input.click(click_count=3)
        await search_input.press("Backspace")
        await search_input.press_sequentially(
            query_identifier, delay=self.config.type_delay_ms
        )
        await search_input.press("Enter")

        log.info("query_submitted", query=query_identifier)

    async def wait_for_results(self) -> bool:
        """Poll until result rows or the "no results" marker appear.

        Returns:
            True if either signal was observed, False if the result timeout
            expired first. Expiry is not an error.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.result_timeout_ms / 1000
        interval = self.config.poll_interval_ms / 1000

        while True:
            remaining = deadline - loop.time()
            if remaining > 0 and await self._results_ready(remaining):
                return True
            remaining = deadline - loop.time()
            if remaining <= 0:
                log.warning(
                    "result_wait_timed_out",
                    timeout_ms=self.config.result_timeout_ms,
                )
                return False
            await asyncio.sleep(min(interval, remaining))

    async def _results_ready(self, remaining: float) -> bool:
        """Check once for rows or the marker, within the remaining wait time."""
        try:
            async with asyncio.timeout(remaining):
                if await self.page.locator(self.RESULT_ROWS).count() > 0:
                    return True
                return await self.has_no_results_marker(
                    timeout=max(remaining * 1000, 1)
                )
        except TimeoutError:
            log.debug("result_poll_timed_out")
            return False
        except PlaywrightError as e:
            # The page may be mid-render or mid-navigation after submit
            log.debug("result_poll_failed", error=str(e))
            return False

    async def has_no_results_marker(self, timeout: float | None = None) -> bool:
        body_text = await self.page.locator(self.BODY).inner_text(timeout=timeout)
        return self.config.no_results_marker in body_text

    async def extract(self) -> list[ExamRecord]:
        """Read the results table into records.

        Returns an empty list without reading rows when the page shows the
        "no results" marker, even if stray table markup is present.
        """
        if await self.has_no_results_marker():
            log.info("no_results_marker_found")
            return []

        rows = await self.page.locator(self.RESULT_ROWS).evaluate_all(_READ_ROWS_JS)
        records = parse_rows(rows)

        log.info("exam_schedule_extracted", rows=len(rows), records=len(records))
        return records

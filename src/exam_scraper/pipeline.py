"""Exam schedule extraction pipeline.

Sequences one lookup through its stages:

    idle -> launching -> filtering -> submitting -> awaiting -> extracting -> closed

Once the browser session exists, every exit path (success, stage failure,
overall timeout) closes it before the result or error reaches the caller.
Failures are never retried here; retry policy belongs to the caller.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

import structlog
from pydantic import ValidationError

from exam_scraper.config import ScraperConfig, get_config
from exam_scraper.errors import (
    ExtractionFailure,
    ExtractionTimeout,
    InvalidRequest,
    ScrapingError,
)
from exam_scraper.logging import get_logger
from exam_scraper.models import ExtractionRequest, ExtractionResult, ResultOutcome
from exam_scraper.pages.exam_schedule import ExamSchedulePage
from exam_scraper.session import BrowserSession, launch_session
from exam_scraper.utils import install_resource_filter

logger = get_logger(__name__)

Launcher = Callable[[ScraperConfig], Awaitable[BrowserSession]]


class Stage(str, Enum):
    IDLE = "idle"
    LAUNCHING = "launching"
    FILTERING = "filtering"
    SUBMITTING = "submitting"
    AWAITING = "awaiting"
    EXTRACTING = "extracting"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value


class _Run:
    """Per-request state: the current stage, for error attribution."""

    def __init__(self) -> None:
        self.stage = Stage.IDLE


def _validate(query_identifier: str | None) -> ExtractionRequest:
    try:
        return ExtractionRequest(query_identifier=query_identifier)
    except ValidationError as e:
        raise InvalidRequest("Roll number required", stage=Stage.IDLE) from e


async def _close_session(session: BrowserSession, log: structlog.BoundLogger) -> None:
    """Close the session without letting teardown errors replace the outcome.

    The records or the stage error already produced are what the caller gets;
    a failed close is only logged.
    """
    try:
        await session.close()
    except Exception as e:
        log.warning("session_close_failed", stage=str(Stage.CLOSED), error=str(e))


class ExamSchedulePipeline:
    """Runs exam schedule lookups, one browser session per lookup.

    Instances keep no per-request state and can serve concurrent lookups.
    """

    def __init__(
        self,
        config: ScraperConfig | None = None,
        launcher: Launcher = launch_session,
    ) -> None:
        self.config = config or get_config()
        self.launcher = launcher

    async def fetch(self, query_identifier: str | None) -> ExtractionResult:
        """Look up the exam schedule for a roll number.

        Args:
            query_identifier: Roll/registration number to search for.

        Returns:
            ExtractionResult with records in table row order. Empty (with
            outcome no_results or timed_out) when the portal shows no rows.

        Raises:
            InvalidRequest: Empty or whitespace-only roll number. No browser
                is launched.
            LaunchFailure: Browser could not start.
            NavigationFailure: Portal unreachable or too slow to load.
            InputNotFound: Portal loaded without its search input.
            ExtractionTimeout: Overall time budget exceeded.
            ExtractionFailure: Any other failure inside a stage.
        """
        request = _validate(query_identifier)
        log = logger.bind(query=request.query_identifier)
        run = _Run()

        run.stage = Stage.LAUNCHING
        try:
            session = await self.launcher(self.config)
        except ScrapingError as e:
            e.stage = run.stage
            log.error("extraction_failed", stage=str(run.stage), error=e.message)
            raise
        except Exception as e:
            log.error("extraction_failed", stage=str(run.stage), error=str(e))
            raise ExtractionFailure(str(e), stage=run.stage) from e

        budget = asyncio.timeout(self.config.total_timeout_ms / 1000)
        try:
            async with budget:
                result = await self._run_stages(session, request, run, log)
        except TimeoutError as e:
            if not budget.expired():
                # Raised by a stage itself, not by the overall budget
                log.error("extraction_failed", stage=str(run.stage), error=str(e))
                raise ExtractionFailure(str(e), stage=run.stage) from e
            log.error(
                "extraction_failed",
                stage=str(run.stage),
                error="overall timeout exceeded",
                timeout_ms=self.config.total_timeout_ms,
            )
            raise ExtractionTimeout(
                f"Extraction exceeded {self.config.total_timeout_ms} ms",
                stage=run.stage,
            ) from e
        except ScrapingError as e:
            e.stage = run.stage
            log.error("extraction_failed", stage=str(run.stage), error=e.message)
            raise
        except Exception as e:
            log.error("extraction_failed", stage=str(run.stage), error=str(e))
            raise ExtractionFailure(str(e), stage=run.stage) from e
        finally:
            await _close_session(session, log)
            run.stage = Stage.CLOSED

        log.info(
            "extraction_completed",
            records=len(result.records),
            outcome=result.outcome.value,
        )
        return result

    async def _run_stages(
        self,
        session: BrowserSession,
        request: ExtractionRequest,
        run: _Run,
        log: structlog.BoundLogger,
    ) -> ExtractionResult:
        run.stage = Stage.FILTERING
        await install_resource_filter(session.page)

        run.stage = Stage.SUBMITTING
        exam_page = ExamSchedulePage(session.page, self.config)
        await exam_page.navigate()
        await exam_page.submit_query(request.query_identifier)

        run.stage = Stage.AWAITING
        ready = await exam_page.wait_for_results()

        run.stage = Stage.EXTRACTING
        records = await exam_page.extract()

        if records:
            outcome = ResultOutcome.FOUND
        elif ready:
            outcome = ResultOutcome.NO_RESULTS
        else:
            outcome = ResultOutcome.TIMED_OUT
            log.warning("empty_result_after_timeout")

        return ExtractionResult(
            query_identifier=request.query_identifier,
            records=records,
            outcome=outcome,
        )


async def fetch_exam_schedule(
    query_identifier: str | None, config: ScraperConfig | None = None
) -> ExtractionResult:
    """Look up the exam schedule for a roll number with a fresh browser."""
    return await ExamSchedulePipeline(config).fetch(query_identifier)

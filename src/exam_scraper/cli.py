"""Get a student's exam schedule from the exam portal as JSON or table.

Run with: exam-scraper 2301MC21
Debug:    exam-scraper 2301MC21 --headed
Table:    exam-scraper 2301MC21 --table
Retry:    exam-scraper 2301MC21 --retries 3

Exit codes:
  0 = success (JSON or table on stdout, including an empty schedule)
  1 = error (message on stderr)
  2 = invalid roll number
"""

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from exam_scraper.config import ScraperConfig, get_config
from exam_scraper.errors import InvalidRequest, ScrapingError, TransientError
from exam_scraper.logging import get_logger, setup_logging
from exam_scraper.models import ExamRecord, ExtractionResult
from exam_scraper.pipeline import ExamSchedulePipeline

log = get_logger(__name__)

_TABLE_HEADERS = ["Roll No", "Day", "Code", "Date", "Shift", "Room", "Title"]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        prog="exam-scraper",
        description="Get a student's exam schedule as JSON or table.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("roll_no", help="Roll/registration number to look up.")
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table instead of JSON.",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Retry transient failures (navigation, timeout) this many times.",
    )
    parser.add_argument(
        "--retry-wait",
        type=float,
        default=5.0,
        help="Seconds to wait between retries (default: 5).",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON on stderr.",
    )
    return parser.parse_args(argv)


def _format_table(records: list[ExamRecord]) -> str:
    """Format records as a fixed-width text table."""
    if not records:
        return "No records found"

    rows = [
        [
            r.query_identifier,
            r.day_name,
            r.course_code,
            r.exam_date,
            r.shift,
            r.room or "",
            r.title or "",
        ]
        for r in records
    ]

    widths = [len(h) for h in _TABLE_HEADERS]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(_TABLE_HEADERS))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows
    ]

    return "\n".join([header_line, separator, *row_lines])


def _format_json(result: ExtractionResult) -> str:
    output = [record.model_dump(mode="json", by_alias=True) for record in result.records]
    return json.dumps(output, indent=2, ensure_ascii=False)


async def fetch_with_retries(
    pipeline: ExamSchedulePipeline,
    roll_no: str,
    retries: int = 0,
    wait_seconds: float = 5.0,
) -> ExtractionResult:
    """Run the pipeline, retrying only transient failures."""

    def _log_retry(retry_state: RetryCallState) -> None:
        log.info(
            "extraction_retry",
            attempt=retry_state.attempt_number + 1,
            roll_no=roll_no,
            error=str(retry_state.outcome.exception()),
        )

    @retry(
        stop=stop_after_attempt(retries + 1),
        wait=wait_fixed(wait_seconds),
        retry=retry_if_exception_type(TransientError),
        before_sleep=_log_retry,
        reraise=True,
    )
    async def _fetch() -> ExtractionResult:
        return await pipeline.fetch(roll_no)

    return await _fetch()


async def main(args: argparse.Namespace, config: ScraperConfig | None = None) -> str:
    """Fetch the schedule and return the rendered output."""
    config = config or get_config()
    if args.headed:
        config = config.model_copy(update={"headless": False})

    pipeline = ExamSchedulePipeline(config)
    result = await fetch_with_retries(
        pipeline, args.roll_no, retries=args.retries, wait_seconds=args.retry_wait
    )

    if args.table:
        return _format_table(result.records)
    return _format_json(result)


def run(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    load_dotenv()
    args = _parse_args(argv)
    config = get_config()
    setup_logging(json_output=args.json_logs or config.log_json, log_level=config.log_level)

    try:
        output = asyncio.run(main(args, config))
    except InvalidRequest as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 2
    except ScrapingError as e:
        print(f"ERROR: Failed to fetch schedule: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(run())

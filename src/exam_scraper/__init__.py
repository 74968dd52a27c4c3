"""Exam schedule scraper.

Looks up a student's exam schedule on a browser-only portal with a headless
Chromium session and returns the results table as typed records.
"""

from exam_scraper.models import ExamRecord, ExtractionRequest, ExtractionResult, ResultOutcome
from exam_scraper.pages.exam_schedule import COLUMNS, MIN_CELLS, ExamSchedulePage
from exam_scraper.pipeline import ExamSchedulePipeline, Stage, fetch_exam_schedule

__version__ = "0.1.0"

__all__ = [
    "COLUMNS",
    "MIN_CELLS",
    "ExamRecord",
    "ExamSchedulePage",
    "ExamSchedulePipeline",
    "ExtractionRequest",
    "ExtractionResult",
    "ResultOutcome",
    "Stage",
    "fetch_exam_schedule",
]

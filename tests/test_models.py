"""Tests for exam schedule models."""

import pytest
from pydantic import ValidationError

from exam_scraper.models import ExamRecord, ExtractionRequest, ExtractionResult, ResultOutcome


class TestExtractionRequest:
    def test_strips_whitespace(self) -> None:
        request = ExtractionRequest(query_identifier="  2301MC21 ")
        assert request.query_identifier == "2301MC21"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None])
    def test_rejects_empty(self, value) -> None:
        with pytest.raises(ValidationError):
            ExtractionRequest(query_identifier=value)


class TestExamRecord:
    def test_dumps_with_portal_wire_names(self) -> None:
        record = ExamRecord(
            query_identifier="2301MC21",
            day_name="Monday",
            course_code="CS201",
            exam_date="12 Jan",
            shift="Morning",
            room="Room 4",
            title="Data Structures",
        )

        assert record.model_dump(by_alias=True) == {
            "rollNo": "2301MC21",
            "day": "Monday",
            "code": "CS201",
            "date": "12 Jan",
            "shift": "Morning",
            "room": "Room 4",
            "title": "Data Structures",
        }

    def test_accepts_wire_names(self) -> None:
        record = ExamRecord.model_validate(
            {"rollNo": "1", "day": "Tuesday", "code": "MA101", "date": "13 Jan", "shift": "Morning"}
        )

        assert record.course_code == "MA101"
        assert record.room is None

    def test_is_immutable(self) -> None:
        record = ExamRecord(
            query_identifier="1", day_name="d", course_code="c", exam_date="x", shift="s"
        )
        with pytest.raises(ValidationError):
            record.shift = "Evening"


class TestExtractionResult:
    def test_defaults_to_empty(self) -> None:
        result = ExtractionResult(query_identifier="0000000", outcome=ResultOutcome.NO_RESULTS)

        assert result.records == []
        assert result.is_empty
        assert result.outcome.value == "no_results"

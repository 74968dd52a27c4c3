"""Pydantic models for exam schedule data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Field values are kept exactly as the portal renders them (trimmed); dates and
course codes are not parsed or normalized here.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExtractionRequest(BaseModel):
    """A single schedule lookup for one roll number."""

    query_identifier: str = Field(min_length=1)

    @field_validator("query_identifier", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class ExamRecord(BaseModel):
    """One row of the portal's exam schedule table.

    Serializes with the portal's wire names (rollNo, day, code, ...) when
    dumped with by_alias=True.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    query_identifier: str = Field(alias="rollNo")  # Roll number as echoed by the portal
    day_name: str = Field(alias="day")  # "Monday"
    course_code: str = Field(alias="code")  # "CS201"
    exam_date: str = Field(alias="date")  # "12 Jan", source format
    shift: str  # "Morning"
    room: str | None = None  # Missing on short rows
    title: str | None = None  # Course title, missing on short rows


class ResultOutcome(str, Enum):
    """How an extraction reached its (possibly empty) result."""

    FOUND = "found"
    NO_RESULTS = "no_results"  # Portal rendered the "no results" marker or no usable rows
    TIMED_OUT = "timed_out"  # Neither rows nor marker appeared before the result timeout


class ExtractionResult(BaseModel):
    """Ordered exam records for one request, in source table row order."""

    query_identifier: str
    records: list[ExamRecord] = Field(default_factory=list)
    outcome: ResultOutcome = ResultOutcome.FOUND

    @property
    def is_empty(self) -> bool:
        return not self.records

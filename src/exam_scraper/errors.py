"""Error hierarchy for exam schedule extraction.

Transient failures (should retry at the calling layer) are kept apart from
permanent failures (fix the input or the deployment first). Every error the
pipeline surfaces records the stage it came from.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    async def fetch(roll_no: str):
        ...
"""

from typing import Any


class ScrapingError(Exception):
    """Base exception for all extraction errors."""

    def __init__(self, message: str, *, stage: Any = None) -> None:
        self.message = message
        self.stage = stage
        super().__init__(message)

    def __str__(self) -> str:
        if self.stage is None:
            return self.message
        return f"[{self.stage}] {self.message}"


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry.

    Examples: portal unreachable, navigation timeout, overall budget exceeded.
    """

    pass


class NavigationFailure(TransientError):
    """Portal page unreachable or its DOM was not parsed in time."""

    pass


class ExtractionTimeout(TransientError):
    """The whole extraction exceeded its overall time budget."""

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry."""

    pass


class InvalidRequest(PermanentError, ValueError):
    """Empty or missing roll number; rejected before any browser work."""

    pass


class LaunchFailure(PermanentError):
    """Browser process could not start (missing binary, resource exhaustion)."""

    pass


class InputNotFound(PermanentError):
    """Page loaded but the search input never appeared.

    Usually means the portal markup changed or the page rendered an error state.
    """

    pass


class ExtractionFailure(ScrapingError):
    """Unexpected failure inside a pipeline stage."""

    pass

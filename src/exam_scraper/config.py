"""Scraper configuration loaded from environment variables.

Only the portal URL and the per-stage time budgets are tunable; everything
else about the extraction is fixed by the portal's page layout.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class ScraperConfig(BaseSettings):
    """Scraper configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Exam portal (browser-only — no API exists)
    exam_portal_url: str = Field(
        default="https://exam-schedule-system.vercel.app/",
        description="Exam schedule search page URL",
    )

    # Browser settings
    headless: bool = Field(
        default=True,
        description="Run Chromium without a visible window",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent sent by the browser context",
    )

    # Timeouts (milliseconds)
    launch_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Maximum time to wait for the browser process to start",
    )
    navigation_timeout_ms: int = Field(
        default=60000,
        gt=0,
        description="Maximum time for the portal DOM to be parsed",
    )
    input_timeout_ms: int = Field(
        default=15000,
        gt=0,
        description="Maximum time for the search input to appear",
    )
    result_timeout_ms: int = Field(
        default=10000,
        gt=0,
        description="Maximum time to wait for results (expiry means no results)",
    )
    total_timeout_ms: int = Field(
        default=120000,
        gt=0,
        description="Overall budget for one extraction after the browser starts",
    )
    poll_interval_ms: int = Field(
        default=250,
        gt=0,
        description="Interval between result readiness checks",
    )
    type_delay_ms: int = Field(
        default=100,
        ge=0,
        description="Delay between keystrokes when typing the roll number",
    )

    # Page contract
    no_results_marker: str = Field(
        default="No results found",
        min_length=1,
        description="Text the portal renders when a query has no rows",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ScraperConfig | None = None


def get_config() -> ScraperConfig:
    """Get the scraper configuration singleton.

    Returns:
        ScraperConfig: Scraper configuration instance
    """
    global _config
    if _config is None:
        _config = ScraperConfig()
    return _config

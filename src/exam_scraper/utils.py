"""Resource blocking for the exam portal page."""

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Route

from exam_scraper.logging import get_logger

log = get_logger(__name__)

BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset(
    {"image", "stylesheet", "font", "media"}
)


def should_allow(resource_type: str) -> bool:
    """Return True if a request of this resource type may reach the network.

    Documents, scripts and XHR/fetch calls are needed to render the results
    table; images, stylesheets, fonts and media are not.
    """
    return resource_type not in BLOCKED_RESOURCE_TYPES


async def install_resource_filter(page: Page) -> bool:
    """Abort non-essential requests issued by the page.

    Failure to install is not fatal: the page still works, only slower.

    Args:
        page: Playwright Page instance.

    Returns:
        True if the interception rule was installed.
    """

    async def _block_resources(route: Route) -> None:
        if should_allow(route.request.resource_type):
            await route.continue_()
        else:
            await route.abort()

    try:
        await page.route("**/*", _block_resources)
    except PlaywrightError as e:
        log.warning("resource_filter_not_installed", error=str(e))
        return False

    log.debug("resource_filter_installed", blocked=sorted(BLOCKED_RESOURCE_TYPES))
    return True

"""Playwright (async API) implementation of the automation surface."""

import logging
from typing import Any

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeout,
    async_playwright,
)

from redeployer.errors import ElementNotFoundError, NavigationError, UIError
from redeployer.models import RunConfig

logger = logging.getLogger(__name__)

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]


class PlaywrightPage:
    """Adapts a Playwright Page to AutomationPage."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def goto(self, url: str, *, timeout_ms: int, wait_until: str = "load") -> None:
        try:
            await self._page.goto(url, timeout=timeout_ms, wait_until=wait_until)
        except PlaywrightTimeout as e:
            raise NavigationError(f"Timed out after {timeout_ms}ms loading {url}") from e
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e.message}") from e

    async def wait_for_selector(
        self, selector: str, *, visible: bool = True, timeout_ms: int | None = None
    ) -> None:
        try:
            await self._page.wait_for_selector(
                selector,
                state="visible" if visible else "attached",
                timeout=timeout_ms,
            )
        except PlaywrightTimeout as e:
            raise ElementNotFoundError(selector, timeout_ms) from e

    async def click(self, selector: str) -> None:
        try:
            await self._page.click(selector)
        except PlaywrightTimeout as e:
            raise ElementNotFoundError(selector) from e
        except PlaywrightError as e:
            raise UIError(f"Click on {selector} failed: {e.message}") from e

    async def type_text(self, selector: str, text: str) -> None:
        try:
            await self._page.fill(selector, text)
        except PlaywrightTimeout as e:
            raise ElementNotFoundError(selector) from e
        except PlaywrightError as e:
            raise UIError(f"Typing into {selector} failed: {e.message}") from e

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        try:
            return await self._page.evaluate(script, arg)
        except PlaywrightError as e:
            raise UIError(f"Page script failed: {e.message}") from e

    async def extract_all(self, selector: str, script: str) -> list[dict[str, Any]]:
        try:
            return await self._page.eval_on_selector_all(selector, script)
        except PlaywrightError as e:
            raise UIError(f"Extracting {selector} failed: {e.message}") from e

    async def text_content(self, selector: str) -> str:
        try:
            return (await self._page.text_content(selector)) or ""
        except PlaywrightTimeout as e:
            raise ElementNotFoundError(selector) from e
        except PlaywrightError as e:
            raise UIError(f"Reading {selector} failed: {e.message}") from e


class PlaywrightSurface:
    """
    Owns one Chromium browser, one context and one page for the whole run.

    The context starts clean: cookies cleared, HTTP cache disabled, default
    timeout set from config. Everything is closed on exit, whatever happened.
    """

    def __init__(self, config: RunConfig) -> None:
        self._config = config
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def __aenter__(self) -> PlaywrightPage:
        try:
            return await self._start()
        except BaseException:
            await self.close()
            raise

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _start(self) -> PlaywrightPage:
        logger.info("Launching browser", extra={"headless": self._config.headless})
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self._config.headless,
            args=CHROMIUM_ARGS,
        )
        self._context = await self._browser.new_context()
        page = await self._context.new_page()
        page.set_default_timeout(self._config.timeout_ms)
        await self._context.clear_cookies()
        cdp = await self._context.new_cdp_session(page)
        await cdp.send("Network.setCacheDisabled", {"cacheDisabled": True})
        return PlaywrightPage(page)

    async def close(self) -> None:
        """
        Release browser resources; safe to call more than once.

        Every step runs even if an earlier one fails. Teardown errors are
        logged, never raised, so they cannot replace the error being handled.
        """
        steps = []
        if self._context is not None:
            steps.append(("context", self._context.close))
        if self._browser is not None:
            steps.append(("browser", self._browser.close))
        if self._playwright is not None:
            steps.append(("playwright", self._playwright.stop))
        self._context = None
        self._browser = None
        self._playwright = None

        for name, step in steps:
            try:
                await step()
            except Exception as e:
                logger.warning("Failed to close %s: %s", name, e, exc_info=True)
        if steps:
            logger.info("Browser closed")

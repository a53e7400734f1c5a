"""Headless browser sandbox hosting the Babylon.js conversion routine."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from playwright.async_api import Browser, ConsoleMessage, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from hdr_to_env.application.options import SandboxOptions
from hdr_to_env.application.results import SourceRecord
from hdr_to_env.errors import ConversionError, HdrToEnvError, SandboxBootstrapError
from hdr_to_env.infrastructure.browser_scripts import CONVERT_ONE, INSTALL_CONVERTER

logger = logging.getLogger(__name__)


class BrowserSandbox:
    """Chromium page with the rendering engine loaded; implements ``ConversionOracle``.

    Use as an async context manager. The browser is closed on every exit
    path, including failed bootstrap.

    Parameters
    ----------
    options : SandboxOptions
        Engine source, headless flag and bootstrap timeout.
    """

    def __init__(self, options: SandboxOptions | None = None) -> None:
        self.options = options or SandboxOptions()
        self.engine_version: str | None = None
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None
        # One scene and one GL context per page: a single conversion at a time.
        self._render_lock = asyncio.Lock()

    async def __aenter__(self) -> BrowserSandbox:
        try:
            await asyncio.wait_for(self._bootstrap(), timeout=self.options.bootstrap_timeout)
        except BaseException as exc:
            await self.close()
            if isinstance(exc, TimeoutError):
                raise SandboxBootstrapError(
                    f"Sandbox bootstrap timed out after {self.options.bootstrap_timeout}s"
                ) from exc
            if isinstance(exc, Exception) and not isinstance(exc, HdrToEnvError):
                raise SandboxBootstrapError(f"Sandbox bootstrap failed: {exc}") from exc
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _bootstrap(self) -> None:
        logger.info("launching headless browser")
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.options.headless)
        self._page = await self._browser.new_page()
        self._page.on("console", _forward_console)
        self._page.on("pageerror", lambda error: logger.warning("page error: %s", error))

        logger.info("loading rendering engine from %s", self.options.engine_source)
        try:
            if self.options.engine_path is not None:
                await self._page.add_script_tag(path=self.options.engine_path)
            else:
                await self._page.add_script_tag(url=self.options.engine_url)
        except PlaywrightError as exc:
            raise SandboxBootstrapError(
                f"Cannot load rendering engine from {self.options.engine_source}: {exc}"
            ) from exc

        try:
            self.engine_version = await self._page.evaluate(INSTALL_CONVERTER)
        except PlaywrightError as exc:
            raise SandboxBootstrapError(f"Cannot initialise rendering scene: {exc}") from exc
        logger.info("rendering engine ready (Babylon.js %s)", self.engine_version)

    async def convert(self, source: SourceRecord, resolution: int) -> str:
        """Convert one HDR source to an ENV binary string.

        Raises
        ------
        ConversionError
            If the sandbox is not running or the in-page conversion rejects.
        """
        if self._page is None:
            raise ConversionError("Sandbox is not running.", source_name=source.name)
        async with self._render_lock:
            try:
                result = await self._page.evaluate(CONVERT_ONE, [source.payload, resolution])
            except PlaywrightError as exc:
                raise ConversionError(
                    f"Conversion of {source.name} failed: {exc}", source_name=source.name
                ) from exc
        if not isinstance(result, str):
            raise ConversionError(
                f"Conversion of {source.name} returned no data.", source_name=source.name
            )
        return result

    async def close(self) -> None:
        """Release page, browser and Playwright driver; safe to call twice."""
        browser, playwright = self._browser, self._playwright
        self._page = None
        self._browser = None
        self._playwright = None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("error while closing browser: %s", exc)
        if playwright is not None:
            await playwright.stop()
            logger.debug("browser sandbox closed")


def _forward_console(message: ConsoleMessage) -> None:
    logger.debug("browser console [%s] %s", message.type, message.text)


def open_browser_sandbox(options: SandboxOptions) -> BrowserSandbox:
    """Default ``SandboxFactory``."""
    return BrowserSandbox(options)

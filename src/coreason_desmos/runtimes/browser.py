# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_desmos

from typing import Any, Literal

from loguru import logger
from playwright.async_api import Browser, ConsoleMessage, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from coreason_desmos.config import DEFAULT_CALCULATOR_URL
from coreason_desmos.exceptions import SandboxLaunchError
from coreason_desmos.runtime import SandboxRuntime

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


class BrowserRuntime(SandboxRuntime):
    """Playwright-based implementation of the SandboxRuntime.

    Each instance owns one browser with a single page on the calculator.
    """

    def __init__(
        self,
        executable_path: str | None = None,
        headless: bool = True,
        browser_type: Literal["chromium", "firefox", "webkit"] = "chromium",
        calculator_url: str = DEFAULT_CALCULATOR_URL,
        navigation_timeout_ms: float = 60_000.0,
        launch_args: list[str] | None = None,
    ):
        """Initializes the BrowserRuntime.

        Args:
            executable_path: Browser executable override. Defaults to Playwright's bundled browser.
            headless: Whether to hide the browser window.
            browser_type: Playwright browser engine to launch.
            calculator_url: Page hosting the calculator (`window.Calc`).
            navigation_timeout_ms: Deadline for the page to reach network idle.
            launch_args: Extra browser arguments. Defaults to CHROMIUM_ARGS for chromium.
        """
        self.executable_path = executable_path
        self.headless = headless
        self.browser_type = browser_type
        self.calculator_url = calculator_url
        self.navigation_timeout_ms = navigation_timeout_ms
        if launch_args is None:
            launch_args = list(CHROMIUM_ARGS) if browser_type == "chromium" else []
        self.launch_args = launch_args
        self._playwright: Playwright | None = None
        self.browser: Browser | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Sandbox not started")
        return self._page

    async def start(self) -> None:
        """Boot the environment.

        Launches the browser and navigates to the calculator.
        If an instance is already running, it is terminated first.

        Raises:
            SandboxLaunchError: If the browser fails to launch or the calculator does not load.
        """
        if self.browser:
            logger.warning("Browser sandbox already running. Terminating old instance before restart.")
            await self.terminate()

        logger.info(f"Starting {self.browser_type} sandbox (headless={self.headless})")
        try:
            self._playwright = await async_playwright().start()
            launcher = getattr(self._playwright, self.browser_type)
            self.browser = await launcher.launch(
                executable_path=self.executable_path,
                headless=self.headless,
                args=self.launch_args,
            )
            page = await self.browser.new_page()
            page.on("pageerror", self._on_page_error)
            page.on("console", self._on_console)
            await page.goto(
                self.calculator_url,
                wait_until="networkidle",
                timeout=self.navigation_timeout_ms,
            )
            if not await page.evaluate("() => typeof window.Calc !== 'undefined'"):
                raise SandboxLaunchError(f"Calculator API not found at {self.calculator_url}")
            self._page = page
        except Exception as e:
            logger.error(f"Failed to start browser sandbox: {e}")
            await self.terminate()
            if isinstance(e, SandboxLaunchError):
                raise
            raise SandboxLaunchError(f"Failed to start browser sandbox: {e}") from e

        logger.info(f"Browser sandbox ready: {self.calculator_url}")

    async def load_state(self, state: dict[str, Any]) -> None:
        """Replace the calculator state through `Calc.setState`."""
        expressions = state.get("expressions", {}).get("list", [])
        logger.info(f"Loading program state ({len(expressions)} expressions)")
        await self.page.evaluate("(state) => window.Calc.setState(state)", state)

    async def terminate(self) -> None:
        """
        Close the browser and stop Playwright.
        """
        if self.browser is None and self._playwright is None:
            logger.warning("Attempted to terminate non-existent browser sandbox")
            return

        logger.info("Terminating browser sandbox")
        if self.browser:
            try:
                await self.browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            finally:
                self.browser = None
                self._page = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            finally:
                self._playwright = None

    def _on_page_error(self, error: PlaywrightError) -> None:
        logger.warning(f"Calculator page error: {error}")

    def _on_console(self, message: ConsoleMessage) -> None:
        if message.type == "error":
            logger.debug(f"Calculator console error: {message.text}")

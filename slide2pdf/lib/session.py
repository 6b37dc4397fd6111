"""
Rendering Session

Headless Chromium page, driven through Playwright, that exposes the
operations the traversal controller consumes.
"""

import os
import logging
from typing import Optional

from playwright.sync_api import sync_playwright, Page, Error as PlaywrightError

from .exceptions import RenderingError, SlideContentUnreachable

logger = logging.getLogger('slide2pdf')

ANIMATION_PLAYBACK_RATE = 320


def normalize_url(url: str) -> str:
    """Turn a local file path into a file:// URL; leave real URLs alone."""
    if "://" in url:
        return url
    path = os.path.abspath(os.path.expanduser(url))
    if os.path.exists(path):
        return "file://" + path
    return url


class RenderingSession:
    def __init__(self, url: str, width: int = 1025, height: int = 768,
                 headless: bool = True, timeout: int = 30000):
        self.url = normalize_url(url)
        self.width = width
        self.height = height
        self.headless = headless
        self.timeout = timeout

        self.playwright = None
        self.browser = None
        self.page: Optional[Page] = None
        self._cdp = None

    def open(self) -> "RenderingSession":
        """Launch the browser and load the deck."""
        logger.debug("Launching browser")
        try:
            self.playwright = sync_playwright().start()
            self.browser = self.playwright.chromium.launch(headless=self.headless)
            self.page = self.browser.new_page(viewport={"width": self.width, "height": self.height})
        except PlaywrightError as e:
            raise RenderingError("Could not launch the browser", original=e)

        logger.debug(f"Accessing URL: {self.url}")
        try:
            self.page.goto(self.url, wait_until="load", timeout=self.timeout)
        except PlaywrightError as e:
            raise SlideContentUnreachable(self.url, e)

        try:
            self._cdp = self.page.context.new_cdp_session(self.page)
        except PlaywrightError as e:
            logger.debug(f"DevTools session unavailable, animations stay enabled: {e}")
        return self

    def close(self) -> None:
        """Release the page, browser and Playwright driver; never raises."""
        for closer in (
            lambda: self.browser and self.browser.close(),
            lambda: self.playwright and self.playwright.stop(),
        ):
            try:
                closer()
            except Exception as e:
                logger.debug(f"Error while closing rendering session: {e}")
        self.page = None
        self.browser = None
        self.playwright = None
        self._cdp = None

    def stop_animations(self) -> None:
        """Disable CSS animations and speed up the remaining transitions."""
        if self._cdp is None:
            return
        self._cdp.send("Animation.disable")
        self._cdp.send("Animation.setPlaybackRate", {"playbackRate": ANIMATION_PLAYBACK_RATE})

    def get_markup(self) -> str:
        return self.page.content()

    def issue_navigation(self, action: str) -> None:
        self.page.keyboard.press(action)

    def wait(self, ms: int) -> None:
        if ms > 0:
            self.page.wait_for_timeout(ms)

    def capture(self, path: str) -> str:
        """Screenshot the viewport to ``path``."""
        self.stop_animations()
        self.page.screenshot(path=path, type="png")
        return path

    def __enter__(self) -> "RenderingSession":
        try:
            return self.open()
        except BaseException:
            self.close()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

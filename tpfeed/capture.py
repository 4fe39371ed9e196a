from __future__ import annotations

import logging
from typing import Any, Callable

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Response
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from .config import AccountCredentials, Settings


logger = logging.getLogger(__name__)

LOGIN_URL = "https://home.trainingpeaks.com/login"
APP_URL_PATTERN = "**/app.trainingpeaks.com/**"
USERNAME_SELECTOR = 'input[name="Username"], input[type="email"]'
PASSWORD_SELECTOR = 'input[name="Password"], input[type="password"]'
SUBMIT_SELECTOR = 'button[type="submit"]'
CALENDAR_LINK_SELECTOR = "text=Calendar"
ACTIVITY_URL_MARKERS = ("/workouts", "/activities")
LOGIN_FORM_TIMEOUT_MS = 15000
CALENDAR_CLICK_TIMEOUT_MS = 5000
FINAL_SETTLE_MS = 2000

CaptureFn = Callable[[str, AccountCredentials], list[dict[str, Any]]]


class CaptureError(RuntimeError):
    pass


def is_activity_url(url: str) -> bool:
    return any(marker in url for marker in ACTIVITY_URL_MARKERS)


def extract_activity_payloads(body: Any) -> list[dict[str, Any]]:
    """Pull raw workout objects out of one intercepted JSON body.

    The calendar API answers either with a bare list or with
    ``{"workouts": [...]}``; anything else contributes nothing.
    """
    if isinstance(body, list):
        items = body
    elif isinstance(body, dict) and isinstance(body.get("workouts"), list):
        items = body["workouts"]
    else:
        return []
    return [item for item in items if isinstance(item, dict)]


class TrainingPeaksCapture:
    """Log in to the TrainingPeaks web app and collect the calendar's workout payloads."""

    def __init__(self, settings: Settings):
        self.headless = settings.capture_headless
        self.login_timeout_ms = settings.capture_login_timeout_seconds * 1000
        self.settle_ms = settings.capture_settle_seconds * 1000

    def __call__(self, account: str, credentials: AccountCredentials) -> list[dict[str, Any]]:
        return self.capture(account, credentials)

    def capture(self, account: str, credentials: AccountCredentials) -> list[dict[str, Any]]:
        logger.info("Capturing workouts for %s...", account)
        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(headless=self.headless)
                try:
                    responses = self._browse(browser.new_context().new_page(), credentials)
                    payloads = self._read_payloads(responses)
                finally:
                    browser.close()
        except PlaywrightError as exc:
            raise CaptureError(f"Capture failed for {account}: {exc}") from exc
        logger.info("Intercepted %s workout payload(s) for %s.", len(payloads), account)
        return payloads

    def _browse(self, page: Any, credentials: AccountCredentials) -> list[Response]:
        responses: list[Response] = []

        def on_response(response: Response) -> None:
            if is_activity_url(response.url):
                responses.append(response)

        page.on("response", on_response)

        page.goto(LOGIN_URL)
        page.wait_for_selector(USERNAME_SELECTOR, timeout=LOGIN_FORM_TIMEOUT_MS)
        page.fill(USERNAME_SELECTOR, credentials.username)
        page.fill(PASSWORD_SELECTOR, credentials.password)
        page.click(SUBMIT_SELECTOR)

        try:
            page.wait_for_url(APP_URL_PATTERN, timeout=self.login_timeout_ms)
        except PlaywrightTimeoutError:
            logger.warning("Timed out waiting for the app URL; continuing with the current page.")
        page.wait_for_timeout(self.settle_ms)

        logger.info("Navigating to calendar...")
        try:
            page.click(CALENDAR_LINK_SELECTOR, timeout=CALENDAR_CLICK_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            page.evaluate("() => { window.location.hash = '/calendar'; }")
        page.wait_for_timeout(self.settle_ms)
        page.wait_for_timeout(FINAL_SETTLE_MS)
        return responses

    def _read_payloads(self, responses: list[Response]) -> list[dict[str, Any]]:
        payloads: list[dict[str, Any]] = []
        for response in responses:
            try:
                body = response.json()
            except (PlaywrightError, ValueError):
                logger.debug("Ignoring non-JSON response from %s", response.url)
                continue
            payloads.extend(extract_activity_payloads(body))
        return payloads

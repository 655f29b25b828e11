from __future__ import annotations

import logging
import time
import typing

import urllib3
from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from duskbench.configurations.configuration_constants import Defaults
from duskbench.errors import SessionConnectionError

logger = logging.getLogger(__name__)

DriverFactory = typing.Callable[[], WebDriver]

BROWSER_OPTIONS = {
    "chrome": webdriver.ChromeOptions,
    "firefox": webdriver.FirefoxOptions,
    "edge": webdriver.EdgeOptions,
}

# Errors a remote session raises when the endpoint is gone or refuses to talk.
TRANSPORT_ERRORS = (WebDriverException, urllib3.exceptions.HTTPError, OSError)

# Only connection failures are retried; anything else is a setup error.
RETRYABLE_ERRORS = (SessionConnectionError,) + TRANSPORT_ERRORS


def validate_browser_name(browser_name: str) -> None:
    if browser_name not in BROWSER_OPTIONS:
        raise ValueError(
            f"Unsupported browser {browser_name!r}, expected one of {sorted(BROWSER_OPTIONS)}"
        )


def connect(
    url: str = Defaults.WebDriverUrl,
    browser_name: str = Defaults.BrowserName,
) -> WebDriver:
    """Open one remote browser session against a WebDriver endpoint."""
    validate_browser_name(browser_name)

    options = BROWSER_OPTIONS[browser_name]()
    if browser_name == "chrome":
        options.set_capability("goog:loggingPrefs", {"browser": "ALL"})

    try:
        return webdriver.Remote(command_executor=url, options=options)
    except TRANSPORT_ERRORS as e:
        raise SessionConnectionError(
            f"Could not open a {browser_name} session at {url}: {e}"
        ) from e


def create_webdriver(
    factory: DriverFactory,
    attempts: int = Defaults.ConnectionAttempts,
    delay_ms: int = Defaults.ConnectionDelayMs,
) -> WebDriver:
    """
    Call ``factory`` until it returns a driver.

    Makes up to ``attempts`` calls with ``delay_ms`` between them when the
    factory fails to connect. The error of the last attempt propagates
    unchanged; any other error propagates on the first attempt.
    """
    for attempt in range(1, attempts + 1):
        try:
            return factory()
        except RETRYABLE_ERRORS as e:
            if attempt >= attempts:
                logger.error(f"[Driver] Giving up after {attempts} attempts: {e}")
                raise
            logger.debug(f"[Driver] Attempt {attempt}/{attempts} failed: {e}")
            time.sleep(delay_ms / 1000)

    raise ValueError("attempts must be at least 1")

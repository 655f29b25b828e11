"""Unit tests for opening remote WebDriver sessions (selenium mocked)."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import urllib3
from selenium.common.exceptions import WebDriverException

from duskbench.browser import driver
from duskbench.errors import SessionConnectionError


def test_connect_uses_chrome_profile_on_local_endpoint():
    with patch("duskbench.browser.driver.webdriver.Remote") as remote:
        driver.connect()

    _, kwargs = remote.call_args
    assert kwargs["command_executor"] == "http://localhost:9515"
    assert kwargs["options"].capabilities["browserName"] == "chrome"


@pytest.mark.parametrize(
    "error",
    [
        WebDriverException("session not created"),
        urllib3.exceptions.MaxRetryError(None, "/session"),
        ConnectionRefusedError(),
    ],
)
def test_connect_wraps_connection_failures(error):
    with patch("duskbench.browser.driver.webdriver.Remote", side_effect=error):
        with pytest.raises(SessionConnectionError) as excinfo:
            driver.connect()

    assert excinfo.value.__cause__ is error


def test_unknown_browser():
    with pytest.raises(ValueError, match="Unsupported browser"):
        driver.connect(browser_name="netscape")


def test_create_webdriver_returns_first_success():
    calls = []

    def factory():
        calls.append(1)
        return "driver"

    with patch("duskbench.browser.driver.time.sleep") as sleep:
        assert driver.create_webdriver(factory) == "driver"

    assert len(calls) == 1
    sleep.assert_not_called()

"""Thin wrapper around one selenium WebDriver session."""

from __future__ import annotations

import json
import logging
import pathlib
import typing
from enum import Enum, auto
from urllib.parse import urljoin

from selenium.webdriver.remote.command import Command
from selenium.webdriver.remote.webdriver import WebDriver

from duskbench.errors import DiagnosticCaptureError, DuskError

logger = logging.getLogger(__name__)

# Browsers whose drivers answer the "browser" log type.
SUPPORTS_REMOTE_LOGS = ("chrome", "chrome-headless-shell", "MicrosoftEdge")


class SessionState(Enum):
    """Browser session lifecycle states.

    - ACTIVE: Connected and usable
    - QUIT: Remote session closed (terminal)
    """
    ACTIVE = auto()
    QUIT = auto()


def _unresolved_user():
    raise DuskError("User resolver has not been set.")


class Browser:
    def __init__(
        self,
        driver: WebDriver,
        base_url: str = "",
        screenshots_dir: pathlib.Path | None = None,
        console_dir: pathlib.Path | None = None,
        user_resolver: typing.Callable[[], typing.Any] | None = None,
    ):
        self.driver = driver
        self.base_url = base_url
        self.screenshots_dir = screenshots_dir
        self.console_dir = console_dir
        self.user_resolver = user_resolver or _unresolved_user
        self.state = SessionState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def visit(self, url: str) -> Browser:
        """Navigate to ``url``, resolved against the base URL when relative."""
        if self.base_url and "://" not in url:
            url = urljoin(self.base_url.rstrip("/") + "/", url.lstrip("/"))
        self.driver.get(url)
        return self

    def user(self) -> typing.Any:
        return self.user_resolver()

    def screenshot(self, name: str) -> pathlib.Path:
        path = self._diagnostic_path(self.screenshots_dir, f"{name}.png")
        if not self.driver.save_screenshot(str(path)):
            raise DiagnosticCaptureError(f"Could not write screenshot {path}")

        logger.debug(f"[Browser] Saved screenshot {path}")
        return path

    def store_console_log(self, name: str) -> pathlib.Path | None:
        """Write the browser console to ``{console_dir}/{name}.log``.

        Returns the written path, or None when the browser keeps no remote
        logs or the console was empty.
        """
        if not self.supports_remote_logs():
            return None

        # Remote drivers carry no get_log(); only the chromium subclasses do.
        entries = self.driver.execute(Command.GET_LOG, {"type": "browser"})["value"]
        if not entries:
            return None

        path = self._diagnostic_path(self.console_dir, f"{name}.log")
        path.write_text(json.dumps(entries, indent=4), encoding="utf-8")
        logger.debug(f"[Browser] Stored {len(entries)} console entries in {path}")
        return path

    def supports_remote_logs(self) -> bool:
        capabilities = self.driver.capabilities or {}
        return capabilities.get("browserName") in SUPPORTS_REMOTE_LOGS

    def quit(self) -> None:
        if self.state == SessionState.QUIT:
            return
        try:
            self.driver.quit()
        finally:
            self.state = SessionState.QUIT

    def _diagnostic_path(self, directory: pathlib.Path | None, filename: str) -> pathlib.Path:
        if directory is None:
            raise DiagnosticCaptureError(
                f"No diagnostics directory configured for {filename}"
            )
        return pathlib.Path(directory) / filename

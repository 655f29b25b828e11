"""Pool of browser sessions shared by the tests of one test class.

The pool always holds a primary session (index 0) once a test has browsed.
A ``browse`` callback that needs more than one browser grows the pool; the
extra sessions are quit as soon as the callback returns or raises, so the
primary is the only session carried over to the next callback.
"""

from __future__ import annotations

import functools
import inspect
import logging
import pathlib
import typing

from duskbench.browser import driver
from duskbench.browser.browser import Browser
from duskbench.configurations.configuration_constants import Defaults
from duskbench.errors import DiagnosticCaptureError

if typing.TYPE_CHECKING:
    from duskbench.configurations.dusk_config import DuskConfig

logger = logging.getLogger(__name__)

BrowserFactory = typing.Callable[[typing.Any], Browser]

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class BrowserSessionPool:
    def __init__(
        self,
        driver_factory: driver.DriverFactory | None = None,
        browser_factory: BrowserFactory | None = None,
        connection_attempts: int = Defaults.ConnectionAttempts,
        connection_delay_ms: int = Defaults.ConnectionDelayMs,
    ):
        """
        Args:
            driver_factory: Opens one WebDriver session. Defaults to a chrome
                session on the local chromedriver endpoint.
            browser_factory: Wraps a driver into a Browser.
            connection_attempts: Calls made to driver_factory before its error propagates.
            connection_delay_ms: Pause between two connection attempts.
        """
        self.driver_factory = driver_factory or driver.connect
        self.browser_factory = browser_factory or Browser
        self.connection_attempts = connection_attempts
        self.connection_delay_ms = connection_delay_ms

        self._browsers: list[Browser] = []

    @classmethod
    def from_config(
        cls,
        config: DuskConfig,
        driver_factory: driver.DriverFactory | None = None,
        screenshots_dir: pathlib.Path | None = None,
        console_dir: pathlib.Path | None = None,
        user_resolver: typing.Callable[[], typing.Any] | None = None,
    ) -> BrowserSessionPool:
        if driver_factory is None:
            driver.validate_browser_name(config.browser_name)
            driver_factory = functools.partial(
                driver.connect, config.webdriver_url, config.browser_name
            )

        return cls(
            driver_factory=driver_factory,
            browser_factory=functools.partial(
                Browser,
                base_url=config.get_base_url(),
                screenshots_dir=screenshots_dir,
                console_dir=console_dir,
                user_resolver=user_resolver,
            ),
            connection_attempts=config.connection_attempts,
            connection_delay_ms=config.connection_delay_ms,
        )

    @property
    def browsers(self) -> list[Browser]:
        return list(self._browsers)

    def __len__(self) -> int:
        return len(self._browsers)

    # ------------------------------------------------------------------
    # Session creation
    # ------------------------------------------------------------------

    def ensure_sessions_for(self, required_count: int) -> list[Browser]:
        """Grow the pool to at least ``required_count`` sessions, never shrinking it.

        An empty pool always gets its primary session, even for a count of 0.
        """
        if not self._browsers:
            self._browsers.append(self.new_browser())

        while len(self._browsers) < required_count:
            self._browsers.append(self.new_browser())

        return list(self._browsers)

    def new_browser(self) -> Browser:
        browser = self.browser_factory(self.create_webdriver())
        logger.info(f"[SessionPool] Opened session {len(self._browsers)}")
        return browser

    def create_webdriver(self):
        return driver.create_webdriver(
            self.driver_factory,
            attempts=self.connection_attempts,
            delay_ms=self.connection_delay_ms,
        )

    @staticmethod
    def required_session_count(callback: typing.Callable) -> int:
        """The number of browsers ``callback`` takes as positional parameters."""
        parameters = inspect.signature(callback).parameters.values()
        count = sum(1 for p in parameters if p.kind in _POSITIONAL)
        if _takes_varargs(callback):
            count = max(count, 1)
        return count

    # ------------------------------------------------------------------
    # Running callbacks
    # ------------------------------------------------------------------

    def run_with_sessions(
        self,
        callback: typing.Callable,
        test_name: str,
        sessions: int | None = None,
    ) -> None:
        """
        Run ``callback`` with live browsers, primary first.

        On failure every held session is screenshotted before the original
        error is re-raised. Console logs are stored and the non-primary
        sessions are closed whether or not the callback succeeded.

        Args:
            callback: Test body taking one Browser per positional parameter.
            test_name: Used to name screenshots and console logs.
            sessions: Number of browsers to provide instead of the callback's arity.
        """
        count = sessions if sessions is not None else self.required_session_count(callback)
        try:
            browsers = self.ensure_sessions_for(count)
        except BaseException:
            # Sessions opened before the failing one must not outlive this call.
            self.close_all_but_primary()
            raise
        arguments = browsers if _takes_varargs(callback) else browsers[:count]

        log_failures = []
        try:
            callback(*arguments)
        # pytest.fail() and friends raise BaseException subclasses.
        except BaseException:
            self.capture_failures_for(browsers, test_name)
            raise
        finally:
            try:
                log_failures = self.store_console_logs_for(browsers, test_name)
            finally:
                self.close_all_but_primary()

        if log_failures:
            raise DiagnosticCaptureError(
                f"Could not store console logs for {test_name}: {log_failures[0]}"
            ) from log_failures[0]

    def capture_failures_for(self, browsers: list[Browser], test_name: str) -> None:
        for index, browser in enumerate(browsers):
            try:
                browser.screenshot(f"failure-{test_name}-{index}")
            except Exception as e:
                logger.warning(
                    f"[SessionPool] Failed to capture screenshot for session {index}: {e}",
                    exc_info=True,
                )

    def store_console_logs_for(
        self, browsers: list[Browser], test_name: str
    ) -> list[Exception]:
        """Store every session's console log; returns the errors that occurred."""
        failures = []
        for index, browser in enumerate(browsers):
            try:
                browser.store_console_log(f"{test_name}-{index}")
            except Exception as e:
                logger.warning(
                    f"[SessionPool] Failed to store console log for session {index}: {e}"
                )
                failures.append(e)
        return failures

    # ------------------------------------------------------------------
    # Closing
    # ------------------------------------------------------------------

    def close_all_but_primary(self) -> None:
        extras = self._browsers[1:]
        self._browsers = self._browsers[:1]

        for browser in extras:
            self._quit(browser)

        if extras:
            logger.info(f"[SessionPool] Closed {len(extras)} non-primary session(s)")

    def close_all(self) -> None:
        browsers, self._browsers = self._browsers, []

        for browser in browsers:
            self._quit(browser)

        logger.info(f"[SessionPool] Closed all {len(browsers)} session(s)")

    def _quit(self, browser: Browser) -> None:
        try:
            browser.quit()
        except driver.TRANSPORT_ERRORS as e:
            logger.warning(f"[SessionPool] Error quitting session: {e}")


def _takes_varargs(callback: typing.Callable) -> bool:
    return any(
        p.kind == inspect.Parameter.VAR_POSITIONAL
        for p in inspect.signature(callback).parameters.values()
    )

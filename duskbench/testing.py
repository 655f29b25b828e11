"""Class-scoped browser testing context.

One DuskContext lives for the duration of a test class. It owns the session
pool shared by the class's tests and the callbacks to run once the class is
done.
"""

from __future__ import annotations

import logging
import pathlib
import typing

from duskbench.browser.session_pool import BrowserSessionPool
from duskbench.configurations.configuration_constants import DiagnosticDirs

if typing.TYPE_CHECKING:
    from duskbench.configurations.dusk_config import DuskConfig

logger = logging.getLogger(__name__)


class DuskContext:
    def __init__(self, pool: BrowserSessionPool, tests_path: pathlib.Path | None = None):
        self.pool = pool
        self.tests_path = pathlib.Path(tests_path) if tests_path else None
        self._after_class_callbacks: list[typing.Callable[[], typing.Any]] = []

    @classmethod
    def from_config(
        cls,
        config: DuskConfig,
        user_resolver: typing.Callable[[], typing.Any] | None = None,
        driver_factory: typing.Callable[[], typing.Any] | None = None,
    ) -> DuskContext:
        tests_path = config.resolve_tests_path()
        pool = BrowserSessionPool.from_config(
            config,
            driver_factory=driver_factory,
            screenshots_dir=tests_path / DiagnosticDirs.Screenshots,
            console_dir=tests_path / DiagnosticDirs.Console,
            user_resolver=user_resolver,
        )
        return cls(pool, tests_path=tests_path)

    def prepare_directories(self) -> None:
        """Create the screenshot and console directories if they are missing."""
        if self.tests_path is None:
            return

        for name in (DiagnosticDirs.Screenshots, DiagnosticDirs.Console):
            (self.tests_path / name).mkdir(parents=True, exist_ok=True)

    def browse(
        self,
        callback: typing.Callable,
        test_name: str,
        sessions: int | None = None,
    ) -> None:
        self.pool.run_with_sessions(callback, test_name, sessions=sessions)

    def after_class(self, callback: typing.Callable[[], typing.Any]) -> None:
        """Register a callback to run when the test class tears down."""
        self._after_class_callbacks.append(callback)

    def tear_down(self) -> None:
        """Close every session, then run the after-class callbacks in registration order."""
        try:
            self.pool.close_all()
        finally:
            logger.debug(
                f"[DuskContext] Running {len(self._after_class_callbacks)} after-class callback(s)"
            )
            for callback in self._after_class_callbacks:
                callback()

from __future__ import annotations

import logging
import os
import pathlib

from duskbench.configurations import paths
from duskbench.configurations.configuration_constants import Defaults, EnvVars
from duskbench.utils.sentinels import NotProvided

logger = logging.getLogger(__name__)


class DuskConfig:
    def __init__(self):

        # Hosting
        self.host: str = Defaults.Host
        self.port: int = Defaults.Port
        self.php_binary: str | None = None

        # WebDriver
        self.webdriver_url: str = Defaults.WebDriverUrl
        self.browser_name: str = Defaults.BrowserName
        self.connection_attempts: int = Defaults.ConnectionAttempts
        self.connection_delay_ms: int = Defaults.ConnectionDelayMs

        # Paths
        self.public_path: paths.PathStrategy = paths.from_env(
            EnvVars.PublicPath, paths.nested_dependency_public_path
        )
        self.tests_path: paths.PathStrategy = paths.from_env(
            EnvVars.TestsPath, paths.nested_dependency_tests_path
        )
        self.stash_dir: pathlib.Path = paths.DEFAULT_STASH_DIR

        # Application
        self.base_url: str | None = None

    def hosting(
        self,
        host: str = NotProvided,
        port: int = NotProvided,
        php_binary: str | None = NotProvided,
    ) -> DuskConfig:
        if host is not NotProvided:
            self.host = host

        if port is not NotProvided:
            self.port = int(port)

        if php_binary is not NotProvided:
            self.php_binary = php_binary

        return self

    def webdriver(
        self,
        url: str = NotProvided,
        browser_name: str = NotProvided,
        connection_attempts: int = NotProvided,
        connection_delay_ms: int = NotProvided,
    ) -> DuskConfig:
        """
        Configure how browser sessions are opened.

        Args:
            url: Address of the WebDriver endpoint (chromedriver by default).
            browser_name: Capability profile to request, e.g. "chrome".
            connection_attempts: Attempts made before a connection error propagates.
            connection_delay_ms: Delay between two connection attempts.
        """
        if url is not NotProvided:
            self.webdriver_url = url

        if browser_name is not NotProvided:
            self.browser_name = browser_name

        if connection_attempts is not NotProvided:
            assert connection_attempts >= 1, "At least one connection attempt is required."
            self.connection_attempts = connection_attempts

        if connection_delay_ms is not NotProvided:
            self.connection_delay_ms = connection_delay_ms

        return self

    def paths(
        self,
        public_path: str | os.PathLike | paths.PathStrategy = NotProvided,
        tests_path: str | os.PathLike | paths.PathStrategy = NotProvided,
        stash_dir: str | os.PathLike = NotProvided,
    ) -> DuskConfig:
        """
        Configure where files live.

        ``public_path`` and ``tests_path`` take either a concrete path or a
        zero-argument strategy returning one.
        """
        if public_path is not NotProvided:
            self.public_path = _as_strategy(public_path)

        if tests_path is not NotProvided:
            self.tests_path = _as_strategy(tests_path)

        if stash_dir is not NotProvided:
            self.stash_dir = pathlib.Path(stash_dir)

        return self

    def application(self, base_url: str | None = NotProvided) -> DuskConfig:
        if base_url is not NotProvided:
            self.base_url = base_url

        return self

    def get_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"http://{self.host}:{self.port}"

    def resolve_public_path(self) -> pathlib.Path:
        return self.public_path()

    def resolve_tests_path(self) -> pathlib.Path:
        return self.tests_path()

    @classmethod
    def from_env(cls) -> DuskConfig:
        """Build a config from ``DUSKBENCH_*`` environment variables.

        Unset variables keep their defaults.
        """
        config = cls()
        env = os.environ

        if env.get(EnvVars.Host):
            config.hosting(host=env[EnvVars.Host])
        if env.get(EnvVars.Port):
            config.hosting(port=int(env[EnvVars.Port]))
        if env.get(EnvVars.PhpBinary):
            config.hosting(php_binary=env[EnvVars.PhpBinary])
        if env.get(EnvVars.WebDriverUrl):
            config.webdriver(url=env[EnvVars.WebDriverUrl])
        if env.get(EnvVars.BaseUrl):
            config.application(base_url=env[EnvVars.BaseUrl])
        if env.get(EnvVars.StashDir):
            config.paths(stash_dir=env[EnvVars.StashDir])

        logger.debug(
            f"Loaded config from environment: host={config.host}, port={config.port}, "
            f"webdriver={config.webdriver_url}"
        )
        return config


def _as_strategy(value) -> paths.PathStrategy:
    if callable(value):
        return value
    return paths.explicit(value)

"""PHP built-in web server lifecycle.

DuskServer spawns ``php -S host:port server.php`` inside the application's
public directory so browser sessions have something to talk to, and keeps a
small JSON stash file that the served application and the test process can
both read and write.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import shutil
import signal
import subprocess
import typing

from duskbench.configurations import paths
from duskbench.configurations.configuration_constants import Defaults, EnvVars
from duskbench.errors import ProcessSpawnError, StashIOError
from duskbench.server.shell import escape_argument

if typing.TYPE_CHECKING:
    from duskbench.configurations.dusk_config import DuskConfig

logger = logging.getLogger(__name__)

ROUTER_SCRIPT = pathlib.Path(__file__).resolve().parent / "server.php"

IS_WINDOWS = os.name == "nt"


class DuskServer:
    """Owns at most one running PHP server process for a host:port pair."""

    def __init__(
        self,
        host: str = Defaults.Host,
        port: int = Defaults.Port,
        public_path: paths.PathStrategy | None = None,
        stash_dir: str | os.PathLike | None = None,
        php_binary: str | None = None,
    ):
        self.host = host
        self.port = port
        self.php_binary = php_binary
        self.stash_dir = pathlib.Path(stash_dir) if stash_dir else paths.DEFAULT_STASH_DIR
        self.public_path = public_path or paths.from_env(
            EnvVars.PublicPath, paths.nested_dependency_public_path
        )

        self._process: subprocess.Popen | None = None

    @classmethod
    def from_config(cls, config: DuskConfig) -> DuskServer:
        return cls(
            host=config.host,
            port=config.port,
            public_path=config.public_path,
            stash_dir=config.stash_dir,
            php_binary=config.php_binary,
        )

    def __enter__(self) -> DuskServer:
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Stash
    # ------------------------------------------------------------------

    def stash_path(self) -> pathlib.Path:
        return self.stash_dir / f"{self.host}__{self.port}"

    def stash(self, content: typing.Any) -> None:
        """Overwrite the stash file with ``content`` encoded as JSON."""
        path = self.stash_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(content), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise StashIOError(f"Could not write stash file {path}: {e}") from e

        logger.debug(f"[DuskServer] Stashed content to {path}")

    def get_stash(self, key: str | None = None) -> typing.Any:
        """Read the stash file back.

        Args:
            key: When given, return only this entry (or None if it is missing).

        Raises:
            StashIOError: If the file does not exist or is not valid JSON.
        """
        path = self.stash_path()
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StashIOError(f"Could not read stash file {path}: {e}") from e
        except ValueError as e:
            raise StashIOError(f"Stash file {path} is not valid JSON: {e}") from e

        if not key:
            return content

        if not isinstance(content, dict):
            return None
        return content.get(key)

    # ------------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the PHP server, replacing any process this instance already runs."""
        self.stop()
        self._start_server()

    def stop(self) -> None:
        """Signal the server process to terminate. Does not wait for it to exit."""
        if self._process is None:
            return

        process, self._process = self._process, None
        if process.poll() is not None:
            logger.debug(
                f"[DuskServer] Process {process.pid} already exited "
                f"(code {process.returncode})"
            )
            return

        logger.info(f"[DuskServer] Stopping server on {self.host}:{self.port} (pid {process.pid})")
        try:
            if IS_WINDOWS:
                process.terminate()
            else:
                os.killpg(os.getpgid(process.pid), signal.SIGTERM)
        except ProcessLookupError:
            # Exited between poll() and the signal.
            pass

    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    @property
    def process(self) -> subprocess.Popen | None:
        return self._process

    def _start_server(self) -> None:
        """
        Spawn the server in its own session with output discarded.

        Nothing reads the server's output during a test run, and an undrained
        pipe would eventually block the server.
        """
        cwd = self.laravel_public_path()
        if not cwd.is_dir():
            raise ProcessSpawnError(f"Document root {cwd} does not exist")

        command = self.prepare_command()
        if not IS_WINDOWS:
            # Let the shell hand its pid over to php so signals reach the server.
            command = f"exec {command}"

        try:
            self._process = subprocess.Popen(
                command,
                # CreateProcess takes the command line as is; no cmd.exe in between.
                shell=not IS_WINDOWS,
                cwd=cwd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=not IS_WINDOWS,
            )
        except OSError as e:
            raise ProcessSpawnError(f"Could not start PHP server: {e}") from e

        logger.info(
            f"[DuskServer] Serving {cwd} on {self.host}:{self.port} (pid {self._process.pid})"
        )

    def prepare_command(self) -> str:
        return "{} -S {}:{} {}".format(
            escape_argument(self.find_php_binary(), windows=IS_WINDOWS),
            self.host,
            self.port,
            escape_argument(str(ROUTER_SCRIPT), windows=IS_WINDOWS),
        )

    def find_php_binary(self) -> str:
        binary = self.php_binary or shutil.which("php")
        if not binary:
            raise ProcessSpawnError(
                "Could not find a PHP executable. Put php on PATH or set "
                f"{EnvVars.PhpBinary}."
            )
        return binary

    def laravel_public_path(self) -> pathlib.Path:
        """The directory the server serves files from."""
        return pathlib.Path(self.public_path())

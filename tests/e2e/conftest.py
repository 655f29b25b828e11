"""
E2E test configuration.

These tests need a php binary on PATH and a WebDriver endpoint (chromedriver
on port 9515 by default). They are skipped when either is missing:

    chromedriver --port=9515 &
    pytest tests/e2e/
"""

from __future__ import annotations

import shutil
import socket
import time
from http.client import HTTPConnection
from urllib.parse import urlparse

import pytest

from duskbench.configurations import paths
from duskbench.server.dusk_server import DuskServer

E2E_PORT = 8791

INDEX_PHP = """<!doctype html>
<html>
  <head><title>duskbench e2e</title></head>
  <body>
    <h1 id="greeting">Hello from PHP</h1>
    <script>console.error("e2e console entry");</script>
  </body>
</html>
"""


def _is_reachable(url):
    parsed = urlparse(url)
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(1)
        return s.connect_ex((parsed.hostname, parsed.port or 80)) == 0


@pytest.fixture(scope="session")
def dusk_config(dusk_config, tmp_path_factory):
    """Point the session config at the e2e server and a throwaway tests dir."""
    return dusk_config.hosting(host="127.0.0.1", port=E2E_PORT).paths(
        tests_path=tmp_path_factory.mktemp("Browser"),
        stash_dir=tmp_path_factory.mktemp("stash"),
    ).application(base_url=f"http://127.0.0.1:{E2E_PORT}")


@pytest.fixture(scope="session")
def php_site(dusk_config, tmp_path_factory):
    """
    Serve a one-page PHP site for the whole e2e run.

    Yields: the running DuskServer
    """
    if shutil.which("php") is None:
        pytest.skip("php is not installed")
    if not _is_reachable(dusk_config.webdriver_url):
        pytest.skip(f"no WebDriver endpoint at {dusk_config.webdriver_url}")

    public = tmp_path_factory.mktemp("public")
    (public / "index.php").write_text(INDEX_PHP)

    server = DuskServer(
        host=dusk_config.host,
        port=dusk_config.port,
        public_path=paths.explicit(public),
        stash_dir=dusk_config.stash_dir,
    )
    server.start()

    # Wait for the server to answer
    max_retries = 30
    for attempt in range(max_retries):
        try:
            conn = HTTPConnection(dusk_config.host, dusk_config.port, timeout=1)
            conn.request("GET", "/")
            response = conn.getresponse()
            conn.close()
            if response.status < 500:
                break
        except OSError:
            pass

        if not server.is_running():
            raise RuntimeError("PHP server exited unexpectedly")

        time.sleep(0.2)
    else:
        server.stop()
        raise RuntimeError(f"PHP server failed to start after {max_retries} retries")

    yield server

    server.stop()

"""
pytest fixtures for browser tests.

Provides:
- dusk_config: Session-scoped DuskConfig built from DUSKBENCH_* variables and --dusk-* options
- dusk_server: Session-scoped PHP server, started before the first test that asks for it
- dusk_context: Class-scoped DuskContext; closes every browser when the class is done
- dusk_driver_factory, dusk_user_resolver: Class-scoped hooks to override in a conftest
- browse: Function-scoped callable running a callback with as many browsers as it takes

Usage::

    class TestLogin:
        def test_two_users(self, dusk_server, browse):
            def scenario(first, second):
                first.visit("/login")
                second.visit("/login")

            browse(scenario)
"""

from __future__ import annotations

import logging
import os
import re

import pytest

from duskbench.configurations.configuration_constants import EnvVars, LayoutNames
from duskbench.configurations.dusk_config import DuskConfig
from duskbench.server.dusk_server import DuskServer
from duskbench.testing import DuskContext

logger = logging.getLogger(__name__)


def pytest_addoption(parser):
    group = parser.getgroup("duskbench", "browser tests against a PHP server")
    group.addoption("--dusk-host", default=None, help="Host the PHP server binds to.")
    group.addoption("--dusk-port", default=None, type=int, help="Port the PHP server binds to.")
    group.addoption(
        "--dusk-webdriver-url", default=None, help="WebDriver endpoint to open sessions on."
    )
    group.addoption(
        "--dusk-base-url", default=None, help="Base URL relative visits are resolved against."
    )
    group.addoption(
        "--dusk-tests-path",
        default=None,
        help="Directory holding screenshots/ and console/ (default: <rootdir>/tests/Browser).",
    )


@pytest.fixture(scope="session")
def dusk_config(pytestconfig) -> DuskConfig:
    config = DuskConfig.from_env()

    host = pytestconfig.getoption("dusk_host")
    port = pytestconfig.getoption("dusk_port")
    config.hosting(
        host=host if host else config.host,
        port=port if port else config.port,
    )

    webdriver_url = pytestconfig.getoption("dusk_webdriver_url")
    if webdriver_url:
        config.webdriver(url=webdriver_url)

    base_url = pytestconfig.getoption("dusk_base_url")
    if base_url:
        config.application(base_url=base_url)

    tests_path = pytestconfig.getoption("dusk_tests_path")
    if tests_path:
        config.paths(tests_path=tests_path)
    elif not os.environ.get(EnvVars.TestsPath):
        config.paths(tests_path=pytestconfig.rootpath / LayoutNames.BrowserTests)

    return config


@pytest.fixture(scope="session")
def dusk_server(dusk_config):
    """
    Start the PHP server once for the whole run, stop it at the end.

    Yields: the running DuskServer
    """
    server = DuskServer.from_config(dusk_config)
    server.start()

    yield server

    server.stop()


@pytest.fixture(scope="class")
def dusk_user_resolver():
    """Override to return a callable giving the user browsers log in as."""
    return None


@pytest.fixture(scope="class")
def dusk_driver_factory():
    """Override to open WebDriver sessions another way; None uses the configured endpoint."""
    return None


@pytest.fixture(scope="class")
def dusk_context(dusk_config, dusk_user_resolver, dusk_driver_factory):
    context = DuskContext.from_config(
        dusk_config,
        user_resolver=dusk_user_resolver,
        driver_factory=dusk_driver_factory,
    )
    context.prepare_directories()

    yield context

    context.tear_down()


@pytest.fixture
def browse(request, dusk_context):
    """
    Return ``browse(callback, sessions=None)`` bound to the current test.

    Screenshots and console logs are named after the test.
    """
    dusk_context.prepare_directories()
    test_name = _artifact_name(request.node.name)

    def _browse(callback, sessions=None):
        dusk_context.browse(callback, test_name, sessions=sessions)

    return _browse


def _artifact_name(node_name: str) -> str:
    return re.sub(r"[^\w.\-\[\]]", "_", node_name)

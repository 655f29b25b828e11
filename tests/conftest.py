"""
Shared pytest fixtures for duskbench tests.

Provides:
- diagnostics_dirs: screenshot and console directories under tmp_path
- driver_factory: FakeDriverFactory producing chrome-like fake drivers
- pool: BrowserSessionPool wired to the fake factory and tmp directories
"""

from __future__ import annotations

import functools

import pytest

from duskbench.browser.browser import Browser
from duskbench.browser.session_pool import BrowserSessionPool
from tests.fixtures.driver_helpers import FakeDriverFactory

pytest_plugins = ["duskbench.pytest_plugin", "pytester"]


@pytest.fixture
def diagnostics_dirs(tmp_path):
    screenshots = tmp_path / "screenshots"
    console = tmp_path / "console"
    screenshots.mkdir()
    console.mkdir()
    return screenshots, console


@pytest.fixture
def driver_factory():
    return FakeDriverFactory(console_entries=[{"level": "SEVERE", "message": "boom"}])


@pytest.fixture
def pool(driver_factory, diagnostics_dirs):
    screenshots, console = diagnostics_dirs
    return BrowserSessionPool(
        driver_factory=driver_factory,
        browser_factory=functools.partial(
            Browser,
            base_url="http://127.0.0.1:8000",
            screenshots_dir=screenshots,
            console_dir=console,
        ),
        connection_delay_ms=0,
    )

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class Defaults:
    Host = "127.0.0.1"
    Port = 8000
    WebDriverUrl = "http://localhost:9515"
    BrowserName = "chrome"
    ConnectionAttempts = 5
    ConnectionDelayMs = 50


@dataclasses.dataclass(frozen=True)
class EnvVars:
    Host = "DUSKBENCH_HOST"
    Port = "DUSKBENCH_PORT"
    PhpBinary = "DUSKBENCH_PHP_BINARY"
    WebDriverUrl = "DUSKBENCH_WEBDRIVER_URL"
    BaseUrl = "DUSKBENCH_BASE_URL"
    PublicPath = "DUSKBENCH_PUBLIC_PATH"
    TestsPath = "DUSKBENCH_TESTS_PATH"
    StashDir = "DUSKBENCH_STASH_DIR"


@dataclasses.dataclass(frozen=True)
class DiagnosticDirs:
    Screenshots = "screenshots"
    Console = "console"


@dataclasses.dataclass(frozen=True)
class LayoutNames:
    """Directory names used by the nested-dependency path heuristics."""

    DependencyDir = "vendor"
    StandaloneSegment = "testbench-dusk/vendor/orchestra"
    PublicSuffix = "testbench-core/laravel/public"
    BrowserTests = "tests/Browser"

from duskbench.browser.browser import Browser
from duskbench.browser.session_pool import BrowserSessionPool
from duskbench.configurations.dusk_config import DuskConfig
from duskbench.errors import (
    DiagnosticCaptureError,
    DuskError,
    ProcessSpawnError,
    SessionConnectionError,
    StashIOError,
)
from duskbench.server.dusk_server import DuskServer
from duskbench.testing import DuskContext

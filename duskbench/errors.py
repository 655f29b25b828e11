"""Exception types raised by duskbench.

Errors raised by a test's own browse callback are never wrapped in any of
these; they reach the caller unchanged.
"""

from __future__ import annotations


class DuskError(Exception):
    """Base class for duskbench errors."""


class ProcessSpawnError(DuskError):
    """The PHP server process could not be started."""


class SessionConnectionError(DuskError):
    """The WebDriver endpoint could not be reached."""


class StashIOError(DuskError):
    """The stash file could not be written, read or decoded."""


class DiagnosticCaptureError(DuskError):
    """Storing a screenshot or console log failed."""

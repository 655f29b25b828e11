"""Base path strategies for the document root and the browser tests root.

A strategy is a zero-argument callable returning a ``pathlib.Path``. The
configuration resolves one of each once, at startup. An explicit path always
wins; the nested-dependency heuristics below only apply when nothing was
configured.
"""

from __future__ import annotations

import logging
import os
import pathlib
import typing

from duskbench.configurations.configuration_constants import LayoutNames

logger = logging.getLogger(__name__)

PathStrategy = typing.Callable[[], pathlib.Path]

# The directory the server package is installed in; the heuristics walk up from here.
INSTALL_DIR = pathlib.Path(__file__).resolve().parent.parent / "server"

DEFAULT_STASH_DIR = INSTALL_DIR.parent / "tmp"


def nested_dependency_public_path(
    root: str | os.PathLike | None = None,
    dependency_dir: str = LayoutNames.DependencyDir,
    standalone_segment: str = LayoutNames.StandaloneSegment,
    public_suffix: str = LayoutNames.PublicSuffix,
) -> pathlib.Path:
    """Locate the servable ``public`` directory relative to an install location.

    Walks up two levels from ``root``. When the parent of that directory is
    not named ``dependency_dir`` the package is being worked on standalone, so
    the path is re-targeted into its own nested dependency tree before the
    public suffix is appended.
    """
    path = pathlib.Path(root or INSTALL_DIR).parent.parent

    if path.parent.name != dependency_dir:
        path = path / standalone_segment

    return path / public_suffix


def nested_dependency_tests_path(
    path: str | os.PathLike | None = None,
    dependency_dir: str = LayoutNames.DependencyDir,
    tests_suffix: str = LayoutNames.BrowserTests,
) -> pathlib.Path:
    """Locate the browser tests directory, escaping a dependency tree if needed."""
    path = pathlib.Path(path or INSTALL_DIR).parent

    # Installed inside a dependency directory: drop back to the consuming project.
    if path.parent.parent.name == dependency_dir:
        path = path.parent.parent.parent

    return path / tests_suffix


def explicit(path: str | os.PathLike) -> PathStrategy:
    resolved = pathlib.Path(path).expanduser().resolve()
    return lambda: resolved


def from_env(env_var: str, fallback: PathStrategy) -> PathStrategy:
    """Use the path in ``env_var`` when it is set, otherwise ``fallback``."""

    def _resolve() -> pathlib.Path:
        value = os.environ.get(env_var)
        if value:
            logger.debug(f"Resolved {env_var}={value}")
            return pathlib.Path(value).expanduser().resolve()
        return fallback()

    return _resolve

from __future__ import annotations

import os
import re

_WINDOWS_SPECIAL = re.compile(r'[/()%!^"<>&|\s]')
_TRAILING_BACKSLASHES = re.compile(r"(\\+)$")
_WINDOWS_REPLACEMENTS = (
    ('"', '""'),
    ("^", '"^^"'),
    ("%", '"^%"'),
    ("!", '"^!"'),
    ("\n", "!LF!"),
)


def escape_argument(argument: str, windows: bool | None = None) -> str:
    """Escape a string so the platform shell reads it back as one argument.

    Args:
        argument: The raw argument. Empty strings and embedded NUL bytes are allowed.
        windows: Force cmd.exe quoting (True) or POSIX quoting (False). Defaults
            to the quoting of the running platform.
    """
    if windows is None:
        windows = os.name == "nt"

    if not windows:
        return "'" + argument.replace("'", "'\\''") + "'"

    if argument == "":
        return '""'

    # cmd.exe cannot carry NUL bytes.
    argument = argument.replace("\0", "?")

    if not _WINDOWS_SPECIAL.search(argument):
        return argument

    argument = _TRAILING_BACKSLASHES.sub(r"\1\1", argument)
    for search, replacement in _WINDOWS_REPLACEMENTS:
        argument = argument.replace(search, replacement)

    return f'"{argument}"'

# get_it_going/exceptions.py
"""
Custom exception hierarchy for get-it-going.

All launcher-specific exceptions inherit from GetItGoingError so the entry
point can turn any of them into a single log line and a non-zero exit,
while still distinguishing "your config is broken" from "you're not in the
right directory" from "the program failed to start".
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from .command_spec import CommandSpec


class GetItGoingError(Exception):
    """
    Base exception for all get-it-going errors.

    Catch this to handle any launcher-specific error.
    """

    pass


class IdentityError(GetItGoingError):
    """Raised when the launcher cannot work out which tool it is acting as."""

    pass


class ConfigNotFoundError(GetItGoingError):
    """
    Raised when no `<identity>.toml` exists in any candidate directory.

    Attributes:
        config_name: File name that was searched for
        searched: Directories that were probed, in order
    """

    def __init__(self, config_name: str, searched: list[Path]):
        self.config_name = config_name
        self.searched = searched
        dirs = ", ".join(str(d) for d in searched)
        super().__init__(f"unable to find config file {config_name} (searched: {dirs})")


class ConfigValidationError(GetItGoingError):
    """
    Raised when a config file can't be read, isn't valid TOML, or violates
    the schema.

    Example:
        >>> parse_config('[before_run]\\nshell = "make"\\n[run]\\npath = "x"')
        ConfigValidationError: unrecognised key "shell" in before_run, expected "command" or "script_path"
    """

    pass


class RootNotFoundError(GetItGoingError):
    """
    Raised when the required files can't be found and no fallback is set.

    Attributes:
        required_files: The marker files that were looked for
    """

    def __init__(self, required_files: list[str]):
        self.required_files = required_files
        super().__init__(f"couldn't find required files ({', '.join(required_files)})")


class SpawnError(GetItGoingError):
    """
    Raised when a child process could not be started at all.

    This is distinct from a child that starts and exits non-zero. The
    underlying OSError is chained as __cause__.

    Attributes:
        spec: The command that was being started
    """

    def __init__(self, spec: CommandSpec, reason: str):
        self.spec = spec
        super().__init__(f"failed to invoke {spec}: {reason}")


class BeforeRunFailedError(GetItGoingError):
    """
    Raised when the before_run step exits with a non-zero status.

    Attributes:
        returncode: Raw return code of the before_run process
    """

    def __init__(self, returncode: int):
        self.returncode = returncode
        super().__init__(f"before_run returned a non-zero status ({returncode})")

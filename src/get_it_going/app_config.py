# get_it_going/app_config.py
from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from .exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# before_run variants
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Command:
    """`before_run = { command = "..." }` - a shell-like string split into argv."""

    command: str

    argv: list[str] = field(init=False, repr=False, compare=False)
    """Program followed by its arguments, split with POSIX shell quoting rules."""

    def __post_init__(self) -> None:
        if not self.command:
            raise ConfigValidationError("command can't be empty")
        try:
            tokens = shlex.split(self.command)
        except ValueError as e:
            raise ConfigValidationError(f"can't split command {self.command!r}: {e}") from None
        if not tokens:
            raise ConfigValidationError(f"command {self.command!r} contains no program to run")
        object.__setattr__(self, "argv", tokens)


@dataclass(frozen=True)
class ScriptPath:
    """`before_run = { script_path = "..." }` - an existing file executed directly."""

    script_path: Path

    def __post_init__(self) -> None:
        if not self.script_path.is_file():
            raise ConfigValidationError(f"invalid path (not a file): {self.script_path}")


BeforeRun = Union[Command, ScriptPath]


# ─────────────────────────────────────────────────────────────────────────────
# run variants
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class SubcommandOf:
    """`run = { subcommand_of = "outer" }` runs `outer <identity> ARGS...`."""

    program: str


@dataclass(frozen=True)
class PrependFolder:
    """`run = { path = "dir/" }` runs `dir/<identity>[.exe] ARGS...`."""

    folder: Path


@dataclass(frozen=True)
class Executable:
    """`run = { path = "some/program" }` runs `some/program ARGS...`."""

    path: Path


Run = Union[SubcommandOf, PrependFolder, Executable]


def is_folder_path(value: str) -> bool:
    """A trailing separator marks a folder; anything else is an executable."""
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    return value[-1:] in separators


def _single_entry(table: Any, section: str, expected: tuple[str, str]) -> tuple[str, str]:
    """Unpack a one-key string table, rejecting anything ambiguous."""
    alternatives = f'"{expected[0]}" or "{expected[1]}"'
    if not isinstance(table, dict):
        raise ConfigValidationError(f"{section} must be a table with {alternatives}")
    if not table:
        raise ConfigValidationError(f"empty {section} table, expected {alternatives}")

    unknown = [key for key in table if key not in expected]
    if unknown:
        raise ConfigValidationError(
            f'unrecognised key "{unknown[0]}" in {section}, expected {alternatives}'
        )
    if len(table) > 1:
        raise ConfigValidationError(f"{section} must contain exactly one of {alternatives}")

    ((key, value),) = table.items()
    if not isinstance(value, str):
        raise ConfigValidationError(f"{section}.{key} must be a string")
    return key, value


def before_run_from_table(table: Any, base_dir: Path) -> BeforeRun:
    """
    Decode the [before_run] table into one of its two variants.

    Relative script paths are resolved against base_dir (the directory the
    config file lives in), so the stored path stays valid whatever cwd the
    script is later run from.
    """
    key, value = _single_entry(table, "before_run", ("command", "script_path"))
    if key == "command":
        return Command(value)

    if not value:
        raise ConfigValidationError("script_path can't be empty")
    path = Path(value)
    if not path.is_absolute():
        path = base_dir / path
    return ScriptPath(path.resolve())


def run_from_table(table: Any) -> Run:
    """Decode the [run] table into one of its three variants."""
    key, value = _single_entry(table, "run", ("subcommand_of", "path"))
    if key == "subcommand_of":
        return SubcommandOf(value)
    if not value:
        raise ConfigValidationError("run.path can't be empty")
    if is_folder_path(value):
        return PrependFolder(Path(value))
    return Executable(Path(value))


# ─────────────────────────────────────────────────────────────────────────────
# Top-level configuration
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Fallback:
    """
    What to run when the required files can't be found.

    With no path, the identity itself is re-run with the launcher's own
    directory removed from PATH, so a same-named tool installed elsewhere
    takes over.
    """

    path: str | None = None

    def __post_init__(self) -> None:
        if self.path is not None and (not isinstance(self.path, str) or not self.path):
            raise ConfigValidationError("fallback.path must be a non-empty string")


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable launcher configuration, parsed once per run from `<identity>.toml`.
    """

    before_run: BeforeRun
    """Setup step run (and waited for) before the main program."""

    run: Run
    """How to find the main program."""

    required_files: list[str] = field(default_factory=list)
    """
    Marker paths, relative to a candidate root, that must all exist.
    Empty means the working directory is always the root.
    """

    search_parents: bool = False
    """If True, walk up from the working directory looking for required_files."""

    fallback: Fallback | None = None
    """Optional program to run instead of failing when no root is found."""

    detach: bool = False
    """
    If True, the main program (or fallback) is started in its own session and
    the launcher exits immediately. Default is to wait and mirror its status.
    """

    def __post_init__(self) -> None:
        if not isinstance(self.required_files, list) or not all(
            isinstance(f, str) for f in self.required_files
        ):
            raise ConfigValidationError("required_files must be an array of strings")
        if not isinstance(self.search_parents, bool):
            raise ConfigValidationError("search_parents must be a boolean")
        if not isinstance(self.detach, bool):
            raise ConfigValidationError("detach must be a boolean")

    def lint(self) -> list[str]:
        """
        Warn about settings that can't have any effect.

        Never raises; returns the warnings so callers can inspect them.
        """
        warnings = []
        if not self.required_files and self.search_parents:
            warnings.append("search_parents has no effect if there are no required files")
        if not self.required_files and self.fallback is not None:
            warnings.append("fallback has no effect if there are no required files")
        for message in warnings:
            logger.warning(message)
        return warnings

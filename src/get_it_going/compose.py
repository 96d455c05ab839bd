# get_it_going/compose.py
"""
Turns the parsed config plus the resolved root into CommandSpecs.

These functions do no I/O beyond path joins, reading PATH (which can be
passed in explicitly) and the fallback's PATH lookup, so they can be
tested without touching processes.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from .app_config import AppConfig, Command, Executable, PrependFolder, ScriptPath, SubcommandOf
from .command_spec import CommandSpec
from .exceptions import SpawnError

logger = logging.getLogger(__name__)


def executable_name(identity: str, platform: str | None = None) -> str:
    """File name of the real program for identity (`.exe` suffix on Windows)."""
    platform = sys.platform if platform is None else platform
    return f"{identity}.exe" if platform.startswith("win") else identity


def compose_before_run(config: AppConfig, root: Path) -> CommandSpec:
    """Setup step; never receives the forwarded arguments."""
    before_run = config.before_run
    if isinstance(before_run, Command):
        program, *args = before_run.argv
        return CommandSpec(program=program, args=args, cwd=root)
    if isinstance(before_run, ScriptPath):
        return CommandSpec(program=str(before_run.script_path), cwd=root)
    raise TypeError(f"unknown before_run variant: {before_run!r}")


def compose_run(
    config: AppConfig,
    root: Path,
    identity: str,
    forwarded_args: Sequence[str],
) -> CommandSpec:
    """
    Main step.

    - SubcommandOf(outer): `outer <identity> ARGS...`
    - PrependFolder(dir):  `dir/<identity>[.exe] ARGS...`
    - Executable(path):    `path ARGS...`
    """
    run = config.run
    args = list(forwarded_args)
    if isinstance(run, SubcommandOf):
        return CommandSpec(program=run.program, args=[identity, *args], cwd=root)
    if isinstance(run, PrependFolder):
        program = run.folder / executable_name(identity)
        return CommandSpec(program=str(program), args=args, cwd=root)
    if isinstance(run, Executable):
        return CommandSpec(program=str(run.path), args=args, cwd=root)
    raise TypeError(f"unknown run variant: {run!r}")


def strip_search_path(
    search_path: str,
    excluded_dirs: Sequence[str],
    separator: str = os.pathsep,
) -> str:
    """
    Remove excluded_dirs from a PATH-style list, keeping everything else
    (empty entries included) in order.

    Entries are compared as strings after os.path normalisation only; their
    encoding is never touched, so undecodable bytes carried through
    os.environ's surrogateescape round-trip unchanged.
    """

    def normalise(entry: str) -> str:
        return os.path.normcase(os.path.normpath(entry))

    excluded = {normalise(d) for d in excluded_dirs if d}
    kept = [
        entry
        for entry in search_path.split(separator)
        if not entry or normalise(entry) not in excluded
    ]
    return separator.join(kept)


def compose_fallback(
    config: AppConfig,
    identity: str,
    forwarded_args: Sequence[str],
    *,
    launcher_dirs: Sequence[str] = (),
    search_path: str | None = None,
) -> CommandSpec | None:
    """
    Alternate program to run when no root was found, or None if no
    [fallback] is configured.

    Without an explicit path the identity is looked up on PATH with the
    launcher's own directories removed, so a same-named tool installed
    elsewhere is found instead of this launcher. The lookup happens here
    rather than in the OS because Windows searches the parent's PATH, not
    the child's.

    Raises:
        SpawnError: If no other program by that name is on PATH
    """
    if config.fallback is None:
        return None

    args = list(forwarded_args)
    if config.fallback.path is not None:
        return CommandSpec(program=config.fallback.path, args=args)

    if search_path is None:
        search_path = os.environ.get("PATH", os.defpath)
    new_path = strip_search_path(search_path, launcher_dirs)
    logger.debug(f"$PATH before:\n{search_path}\n$PATH after:\n{new_path}")
    spec = CommandSpec(program=identity, args=args, env={"PATH": new_path})

    program = shutil.which(identity, path=new_path)
    if program is None:
        raise SpawnError(spec, f"no other {identity} found on PATH")
    return replace(spec, program=program)

# get_it_going/identity.py
"""
Works out who the launcher is pretending to be, once, at startup.

The identity comes from GIG_OVERRIDE if set, otherwise from the name the
launcher was invoked as (so a symlink or copy called `npm` acts as npm).
Everything that would otherwise be process-wide state (identity, working
directory, forwarded arguments) is captured in a LaunchContext and passed
explicitly to the rest of the package.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import IdentityError

logger = logging.getLogger(__name__)

OVERRIDE_ENV_VAR = "GIG_OVERRIDE"

# Identity when run as `python -m get_it_going`, where argv[0] is __main__.py
DEFAULT_IDENTITY = "get-it-going"


def resolve_identity(
    executable: str | os.PathLike[str] | None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """
    Return the identity the launcher is running as.

    Args:
        executable: Path the launcher was invoked through (usually sys.argv[0])
        environ: Environment to read the override from (default: os.environ)

    Raises:
        IdentityError: If there is no override and no usable executable name
    """
    environ = os.environ if environ is None else environ
    override = environ.get(OVERRIDE_ENV_VAR)
    if override:
        logger.debug(f"Identity overridden by {OVERRIDE_ENV_VAR}: {override}")
        return override

    if not executable:
        raise IdentityError("can't access own path to work out which tool to run as")
    stem = Path(executable).stem
    if not stem:
        raise IdentityError(f"can't derive a name from own path {executable!r}")
    if stem == "__main__":
        return DEFAULT_IDENTITY
    return stem


def launcher_directories(executable: str | os.PathLike[str]) -> list[str]:
    """
    Directories the launcher lives in, as they may appear on PATH.

    Both the invoked location and, when the launcher is reached through a
    symlink, the real one are returned (without duplicates).
    """
    invoked = Path(os.path.abspath(executable))
    dirs = [str(invoked.parent)]
    real_dir = str(invoked.resolve().parent)
    if real_dir not in dirs:
        dirs.append(real_dir)
    return dirs


@dataclass(frozen=True)
class LaunchContext:
    """Everything about this invocation that is decided once, at startup."""

    identity: str
    """Name the launcher is acting as; drives config lookup and program names."""

    cwd: Path
    """Working directory the launcher was started in."""

    args: list[str] = field(default_factory=list)
    """Arguments to forward, i.e. the original argv minus the program name."""

    launcher_dirs: list[str] = field(default_factory=list)
    """Directories to strip from PATH when deferring to a same-named tool."""

    @classmethod
    def from_environment(
        cls,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> LaunchContext:
        argv = sys.argv if argv is None else argv
        executable = argv[0] if argv else None
        identity = resolve_identity(executable, environ)
        try:
            cwd = Path.cwd()
        except OSError as e:
            raise IdentityError(f"can't access current working directory: {e}") from e
        context = cls(
            identity=identity,
            cwd=cwd,
            args=list(argv[1:]),
            launcher_dirs=launcher_directories(executable) if executable else [],
        )
        logger.debug(
            f"Launching as '{identity}' from {context.cwd} with {len(context.args)} forwarded args"
        )
        return context

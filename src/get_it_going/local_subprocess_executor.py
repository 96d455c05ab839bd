# get_it_going/local_subprocess_executor.py
"""
LocalSubprocessExecutor - Default executor using asyncio subprocesses.

Executes CommandSpecs as local child processes with:
- Inherited stdin/stdout/stderr (the child owns the terminal)
- Exit status returned to the caller
- Graceful cancellation (SIGTERM → SIGKILL)
- Detached launch for fire-and-forget mode
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from pathlib import Path

from .command_executor import CommandExecutor
from .command_spec import CommandSpec
from .exceptions import SpawnError

logger = logging.getLogger(__name__)


class LocalSubprocessExecutor(CommandExecutor):
    """
    Runs one child at a time and reports its return code.

    Every execution is logged at INFO with the program, its arguments and,
    if it differs from the launcher's, the working directory.
    """

    def __init__(
        self,
        identity: str,
        launcher_cwd: Path | None = None,
        cancel_grace_period: float = 3.0,
    ):
        """
        Initialize the executor.

        Args:
            identity: Name the launcher is running as (used in log lines)
            launcher_cwd: The launcher's own working directory
            cancel_grace_period: Seconds to wait for SIGTERM before SIGKILL
        """
        self._identity = identity
        self._launcher_cwd = launcher_cwd
        self._cancel_grace_period = cancel_grace_period

    def _log_spawn(self, spec: CommandSpec) -> None:
        logger.info(f"spawning {self._identity} by running: {spec.describe(self._launcher_cwd)}")

    async def run(self, spec: CommandSpec) -> int:
        """
        Start spec, wait for it to finish and return its raw return code.

        Raises:
            SpawnError: If the process couldn't be started
        """
        self._log_spawn(spec)
        try:
            process = await asyncio.create_subprocess_exec(
                spec.program,
                *spec.args,
                cwd=spec.cwd,
                env=spec.child_env(),
            )
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL in the program or an argument
            raise SpawnError(spec, getattr(e, "strerror", None) or str(e)) from e

        logger.debug(f"started pid {process.pid}")
        try:
            returncode = await process.wait()
        except asyncio.CancelledError:
            logger.debug(f"wait for pid {process.pid} was cancelled")
            if process.returncode is None:
                await self._terminate(process)
            raise

        logger.debug(f"pid {process.pid} exited with {returncode}")
        return returncode

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Send SIGTERM, then SIGKILL if the grace period runs out."""
        try:
            process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=self._cancel_grace_period)
            except asyncio.TimeoutError:
                logger.warning(f"pid {process.pid} didn't terminate, sending SIGKILL")
                process.kill()
                await process.wait()
        except ProcessLookupError:
            # Already dead
            pass

    def spawn_detached(self, spec: CommandSpec) -> int:
        """
        Start spec in its own session without waiting for it.

        Returns:
            The child's pid

        Raises:
            SpawnError: If the process couldn't be started
        """
        self._log_spawn(spec)
        try:
            process = subprocess.Popen(
                spec.argv,
                cwd=spec.cwd,
                env=spec.child_env(),
                start_new_session=os.name != "nt",
            )
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL in the program or an argument
            raise SpawnError(spec, getattr(e, "strerror", None) or str(e)) from e
        logger.debug(f"detached from pid {process.pid}")
        return process.pid

    def __repr__(self) -> str:
        return (
            f"LocalSubprocessExecutor("
            f"identity={self._identity!r}, "
            f"cancel_grace_period={self._cancel_grace_period}s)"
        )

# get_it_going/dispatcher.py
"""
Top-level control flow of the launcher.

    LOAD_CONFIG → RESOLVE_ROOT → RUN_BEFORE_STEP → RUN_MAIN_STEP → DONE
                              ↘ RUN_FALLBACK ───────────────────↗

At most two children are ever started (before_run then run, or the
fallback alone), one at a time. Anything that goes wrong before a child
runs is raised as a GetItGoingError for the entry point to report.
"""

from __future__ import annotations

import logging
from enum import Enum

from .app_config import AppConfig
from .command_executor import CommandExecutor
from .command_spec import CommandSpec
from .compose import compose_before_run, compose_fallback, compose_run
from .exceptions import BeforeRunFailedError, RootNotFoundError
from .identity import LaunchContext
from .load_config import find_and_load
from .local_subprocess_executor import LocalSubprocessExecutor
from .root import resolve_root

logger = logging.getLogger(__name__)


class DispatchState(Enum):
    """Steps of a single launcher run."""
    LOAD_CONFIG = "load_config"
    RESOLVE_ROOT = "resolve_root"
    RUN_BEFORE_STEP = "run_before_step"
    RUN_MAIN_STEP = "run_main_step"
    RUN_FALLBACK = "run_fallback"
    DONE = "done"


def exit_code_from_returncode(returncode: int) -> int:
    """
    Squash a child's return code into a single-byte exit status.

    - 0 stays 0
    - negative (POSIX: killed by signal N) becomes 128 + N, like a shell
    - anything else keeps its low byte, except that a failure never
      wraps round to 0
    """
    if returncode == 0:
        return 0
    if returncode < 0:
        code = (128 - returncode) & 0xFF
    else:
        code = returncode & 0xFF
    return code or 1


class Dispatcher:
    """
    Runs the load → resolve → before_run → run (or fallback) sequence.

    Args:
        context: Identity, cwd and forwarded args for this invocation
        executor: Runs the composed commands (default: LocalSubprocessExecutor)
    """

    def __init__(self, context: LaunchContext, executor: CommandExecutor | None = None):
        self.context = context
        self.executor = executor or LocalSubprocessExecutor(
            context.identity, launcher_cwd=context.cwd
        )
        self.state: DispatchState | None = None
        self.history: list[DispatchState] = []

    def _enter(self, state: DispatchState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug(f"entering {state.value}")

    async def dispatch(self, config: AppConfig | None = None) -> int:
        """
        Run the whole sequence and return the launcher's exit code.

        Args:
            config: Already-parsed configuration; when given, the config file
                isn't looked up.

        Raises:
            ConfigNotFoundError, ConfigValidationError: Config problems
            RootNotFoundError: No root and no fallback
            BeforeRunFailedError: before_run exited non-zero
            SpawnError: A child couldn't be started
        """
        ctx = self.context

        # Step 1: read config
        self._enter(DispatchState.LOAD_CONFIG)
        if config is None:
            config = find_and_load(ctx.identity, ctx.cwd)

        # Step 2: work out if we're good to go, and where to run from
        self._enter(DispatchState.RESOLVE_ROOT)
        root = resolve_root(config, ctx.cwd)
        if root is None:
            fallback = compose_fallback(
                config, ctx.identity, ctx.args, launcher_dirs=ctx.launcher_dirs
            )
            if fallback is None:
                raise RootNotFoundError(config.required_files)
            self._enter(DispatchState.RUN_FALLBACK)
            logger.info("unable to locate required files, running fallback")
            return await self._launch(fallback, config.detach)

        # Step 3: run before_run task/script
        self._enter(DispatchState.RUN_BEFORE_STEP)
        returncode = await self.executor.run(compose_before_run(config, root))
        if returncode != 0:
            raise BeforeRunFailedError(returncode)

        # Step 4: run the real thing
        self._enter(DispatchState.RUN_MAIN_STEP)
        return await self._launch(compose_run(config, root, ctx.identity, ctx.args), config.detach)

    async def _launch(self, spec: CommandSpec, detach: bool) -> int:
        if detach:
            self.executor.spawn_detached(spec)
            self._enter(DispatchState.DONE)
            return 0

        returncode = await self.executor.run(spec)
        self._enter(DispatchState.DONE)
        exit_code = exit_code_from_returncode(returncode)
        logger.debug(f"exited with status {returncode}, converted to {exit_code}")
        return exit_code

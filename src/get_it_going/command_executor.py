# get_it_going/command_executor.py
from __future__ import annotations

from abc import ABC, abstractmethod

from .command_spec import CommandSpec


class CommandExecutor(ABC):
    """
    Abstract interface for running CommandSpecs.

    The Dispatcher only talks to this interface, so tests (or alternative
    launch strategies) can swap in their own implementation.
    """

    @abstractmethod
    async def run(self, spec: CommandSpec) -> int:
        """
        Run spec to completion and return its raw return code.

        Implementations raise SpawnError if the process can't be started.
        A non-zero return code is not an error at this level.
        """

    @abstractmethod
    def spawn_detached(self, spec: CommandSpec) -> int:
        """Start spec without waiting for it; return an identifier (pid)."""

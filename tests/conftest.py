# tests/conftest.py
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from pathlib import Path

import pytest

from get_it_going.command_executor import CommandExecutor
from get_it_going.command_spec import CommandSpec
from get_it_going.identity import LaunchContext
from get_it_going.logging_config import disable_logging


class RecordingExecutor(CommandExecutor):
    """Records every CommandSpec instead of running it."""

    def __init__(self, returncodes=None):
        self.returncodes = list(returncodes or [])
        self.ran: list[CommandSpec] = []
        self.detached: list[CommandSpec] = []

    async def run(self, spec: CommandSpec) -> int:
        self.ran.append(spec)
        return self.returncodes.pop(0) if self.returncodes else 0

    def spawn_detached(self, spec: CommandSpec) -> int:
        self.detached.append(spec)
        return 4242


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    disable_logging()


@pytest.fixture
def recording_executor():
    return RecordingExecutor()


@pytest.fixture
def make_context(tmp_path: Path):
    def _make(identity="mytool", cwd=None, args=None, launcher_dirs=None):
        return LaunchContext(
            identity=identity,
            cwd=cwd or tmp_path,
            args=list(args or []),
            launcher_dirs=list(launcher_dirs or []),
        )

    return _make


@pytest.fixture
def write_config(tmp_path: Path):
    """Write `<name>.toml` into a directory (tmp_path by default) and return its path."""

    def _write(text: str, name="mytool", directory=None):
        path = (directory or tmp_path) / f"{name}.toml"
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def fake_tool():
    """Create an executable called `name` in directory; return the directory as a str."""
    from get_it_going.compose import executable_name

    def _make(directory: Path, name="npm"):
        directory.mkdir(parents=True, exist_ok=True)
        tool = directory / executable_name(name)
        tool.write_text("#!/bin/sh\nexit 0\n")
        tool.chmod(0o755)
        return str(directory)

    return _make

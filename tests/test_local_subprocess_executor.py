# tests/test_local_subprocess_executor.py
import asyncio
import logging
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from get_it_going.command_spec import CommandSpec
from get_it_going.exceptions import SpawnError
from get_it_going.local_subprocess_executor import LocalSubprocessExecutor

logging.getLogger("get_it_going").setLevel(logging.DEBUG)

posix_only = pytest.mark.skipif(os.name == "nt", reason="needs a POSIX shell")


def make_proc(returncode=0):
    proc = AsyncMock()
    proc.pid = 1234
    proc.returncode = returncode
    proc.wait = AsyncMock(return_value=returncode)
    return proc


@pytest.mark.asyncio
async def test_run_passes_spec_through(tmp_path: Path):
    executor = LocalSubprocessExecutor("mytool", launcher_cwd=tmp_path)
    spec = CommandSpec(program="outer", args=["mytool", "build"], cwd=tmp_path / "root")
    proc = make_proc(returncode=3)

    with patch("asyncio.create_subprocess_exec", return_value=proc) as create:
        returncode = await executor.run(spec)

    assert returncode == 3
    create.assert_called_once_with("outer", "mytool", "build", cwd=tmp_path / "root", env=None)


@pytest.mark.asyncio
async def test_run_applies_env_overrides(monkeypatch):
    monkeypatch.setenv("GIG_TEST_KEEP", "1")
    executor = LocalSubprocessExecutor("npm")
    spec = CommandSpec(program="npm", env={"PATH": "/usr/bin"})

    with patch("asyncio.create_subprocess_exec", return_value=make_proc()) as create:
        await executor.run(spec)

    env = create.call_args.kwargs["env"]
    assert env["PATH"] == "/usr/bin"
    assert env["GIG_TEST_KEEP"] == "1"


@pytest.mark.asyncio
async def test_run_logs_spawn(tmp_path: Path, caplog):
    caplog.set_level(logging.INFO)
    executor = LocalSubprocessExecutor("mytool", launcher_cwd=tmp_path / "sub")
    spec = CommandSpec(program="make", args=["all"], cwd=tmp_path)

    with patch("asyncio.create_subprocess_exec", return_value=make_proc()):
        await executor.run(spec)

    assert f"spawning mytool by running: `make all` in {tmp_path}" in caplog.text


@pytest.mark.asyncio
async def test_run_spawn_failure():
    executor = LocalSubprocessExecutor("mytool")
    spec = CommandSpec(program="definitely-not-a-real-program")

    with patch(
        "asyncio.create_subprocess_exec",
        side_effect=FileNotFoundError(2, "No such file or directory"),
    ):
        with pytest.raises(SpawnError, match="failed to invoke `definitely-not-a-real-program`") as exc:
            await executor.run(spec)

    assert isinstance(exc.value.__cause__, FileNotFoundError)
    assert exc.value.spec is spec


@pytest.mark.asyncio
async def test_cancel_terminates_child():
    executor = LocalSubprocessExecutor("mytool", cancel_grace_period=0.1)
    proc = make_proc(returncode=None)
    waited = asyncio.Event()

    async def wait_forever():
        waited.set()
        await asyncio.sleep(3600)

    def terminate():
        proc.returncode = -15
        proc.wait = AsyncMock(return_value=-15)

    proc.wait = wait_forever
    proc.terminate = Mock(side_effect=terminate)
    proc.kill = Mock()

    with patch("asyncio.create_subprocess_exec", return_value=proc):
        task = asyncio.create_task(executor.run(CommandSpec(program="sleep", args=["100"])))
        await waited.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    proc.terminate.assert_called_once()
    proc.kill.assert_not_called()


def test_spawn_detached(tmp_path: Path):
    executor = LocalSubprocessExecutor("mytool")
    spec = CommandSpec(program="server", args=["--port", "8000"], cwd=tmp_path)
    proc = Mock(pid=999)

    with patch("subprocess.Popen", return_value=proc) as popen:
        assert executor.spawn_detached(spec) == 999

    popen.assert_called_once_with(
        ["server", "--port", "8000"],
        cwd=tmp_path,
        env=None,
        start_new_session=os.name != "nt",
    )


def test_spawn_detached_failure():
    executor = LocalSubprocessExecutor("mytool")
    with patch("subprocess.Popen", side_effect=PermissionError(13, "Permission denied")):
        with pytest.raises(SpawnError, match="Permission denied"):
            executor.spawn_detached(CommandSpec(program="/etc/passwd"))


# ─────────────────────────────────────────────────────────────────────────────
# Real processes
# ─────────────────────────────────────────────────────────────────────────────
@posix_only
@pytest.mark.asyncio
async def test_real_exit_code(tmp_path: Path):
    executor = LocalSubprocessExecutor("mytool")
    spec = CommandSpec(program=sys.executable, args=["-c", "import sys; sys.exit(7)"], cwd=tmp_path)
    assert await executor.run(spec) == 7


@posix_only
@pytest.mark.asyncio
async def test_real_cwd_and_env(tmp_path: Path):
    executor = LocalSubprocessExecutor("mytool")
    out = tmp_path / "out.txt"
    spec = CommandSpec(
        program="sh",
        args=["-c", f'pwd > "{out}"; echo "$GIG_TEST_VALUE" >> "{out}"'],
        cwd=tmp_path,
        env={"GIG_TEST_VALUE": "hello"},
    )
    assert await executor.run(spec) == 0
    lines = out.read_text().splitlines()
    assert Path(lines[0]).resolve() == tmp_path.resolve()
    assert lines[1] == "hello"


@pytest.mark.asyncio
async def test_real_missing_program(tmp_path: Path):
    executor = LocalSubprocessExecutor("mytool")
    spec = CommandSpec(program=str(tmp_path / "missing-program"))
    with pytest.raises(SpawnError):
        await executor.run(spec)


@pytest.mark.asyncio
async def test_run_nul_in_program():
    executor = LocalSubprocessExecutor("mytool")
    spec = CommandSpec(program="/bin/tr\x00ue")
    with pytest.raises(SpawnError, match="embedded null") as exc:
        await executor.run(spec)
    assert isinstance(exc.value.__cause__, ValueError)


def test_spawn_detached_nul_in_argument():
    executor = LocalSubprocessExecutor("mytool")
    spec = CommandSpec(program=sys.executable, args=["-c", "pass\x00"])
    with pytest.raises(SpawnError, match="embedded null"):
        executor.spawn_detached(spec)

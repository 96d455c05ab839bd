# tests/test_command_spec.py
from pathlib import Path

from get_it_going.command_spec import CommandSpec


def test_argv():
    spec = CommandSpec(program="outer", args=["mytool", "build"])
    assert spec.argv == ["outer", "mytool", "build"]


def test_describe_mentions_cwd_only_when_different():
    spec = CommandSpec(program="make", args=["all"], cwd=Path("/a/b"))
    assert spec.describe(launcher_cwd=Path("/a/b/c")) == "`make all` in /a/b"
    assert spec.describe(launcher_cwd=Path("/a/b")) == "`make all`"


def test_describe_without_cwd():
    assert str(CommandSpec(program="npm", args=["install"])) == "`npm install`"


def test_child_env_inherits_when_no_overrides():
    assert CommandSpec(program="x").child_env({"A": "1"}) is None


def test_child_env_merges_overrides():
    spec = CommandSpec(program="x", env={"PATH": "/usr/bin"})
    env = spec.child_env({"PATH": "/gig:/usr/bin", "HOME": "/home/me"})
    assert env == {"PATH": "/usr/bin", "HOME": "/home/me"}


def test_to_dict():
    spec = CommandSpec(program="make", args=["all"], cwd=Path("/tmp"), env={"A": "1"})
    d = spec.to_dict()
    assert d["program"] == "make"
    assert d["args"] == ["all"]
    assert d["cwd"] == str(Path("/tmp"))
    assert d["env"] == {"A": "1"}

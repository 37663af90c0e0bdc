"""Pytest configuration and shared fixtures."""

import json
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from tests.helpers.fake_channel import FakeChannel

# ============================================================================
# Fake cm executable
# ============================================================================
# A small Python script standing in for the Plastic SCM command line tool.
# In "shell" mode it reads one command per line and answers each with the
# canned output of the first matching rule followed by "CommandResult <code>".
# Every command received is appended to a log file for assertions.

FAKE_CM_TEMPLATE = '''#!{python}
import json
import os
import shlex
import sys

RULES = json.loads({rules!r})
LOG_PATH = {log_path!r}


def reply(text, code):
    out = sys.stdout.buffer
    if text:
        out.write(text.encode("utf-8"))
        if not text.endswith("\\n"):
            out.write(b"\\n")
    out.write(("CommandResult %d\\n" % code).encode("utf-8"))
    out.flush()


def shell():
    while True:
        raw = sys.stdin.buffer.readline()
        if not raw:
            return 0
        line = raw.decode("utf-8").strip()
        with open(LOG_PATH, "a", encoding="utf-8") as log:
            log.write(line + "\\n")
        args = shlex.split(line)
        if not args:
            continue
        if args[0] == "exit":
            return 0
        if args[0] == "crash":
            # Optional number of error lines written right before dying
            count = int(args[1]) if len(args) > 1 else 0
            for i in range(count):
                sys.stdout.buffer.write(
                    ("Error %04d: connection to server lost\\n" % i).encode("utf-8")
                )
            sys.stdout.buffer.flush()
            os._exit(3)
        for command, contains, code, text in RULES:
            if args[0] == command and contains in line:
                reply(text, code)
                break
        else:
            reply("Unknown command: " + args[0], 1)


def cat(args):
    revspec = args[0]
    dest = [a for a in args if a.startswith("--file=")][0][len("--file="):]
    if revspec.startswith("bad"):
        sys.stderr.write("The revision does not exist\\n")
        return 1
    with open(dest, "w", encoding="utf-8") as f:
        f.write("content of " + revspec)
    return 0


if __name__ == "__main__":
    if sys.argv[1] == "shell":
        sys.exit(shell())
    if sys.argv[1] == "cat":
        sys.exit(cat(sys.argv[2:]))
    sys.exit(2)
'''


# (command, substring of the line, result code, output)
FakeCmRule = tuple[str, str, int, str]


@pytest.fixture
def make_fake_cm(tmp_path: Path) -> Callable[[list[FakeCmRule]], Path]:
    """Factory writing an executable fake cm with the given reply rules.

    The first rule whose command matches and whose substring is found in
    the command line wins. Received commands are logged to
    "<binary>.log" next to the binary.
    """
    if sys.platform == "win32":
        pytest.skip("Fake cm script relies on a shebang")

    def _make(rules: list[FakeCmRule]) -> Path:
        binary = tmp_path / "bin" / "cm"
        binary.parent.mkdir(exist_ok=True)
        log_path = binary.with_suffix(".log")
        binary.write_text(
            FAKE_CM_TEMPLATE.format(
                python=sys.executable,
                rules=json.dumps(rules),
                log_path=str(log_path),
            ),
            encoding="utf-8",
        )
        binary.chmod(binary.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return binary

    return _make


# ============================================================================
# Workspace helpers
# ============================================================================


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a Plastic workspace with a couple of files.

    Returns:
        Path to the workspace root (holding a .plastic directory).
    """
    root = tmp_path / "ws"
    (root / ".plastic").mkdir(parents=True)
    (root / "Content").mkdir()
    (root / "Content" / "Hero.uasset").write_text("hero", encoding="utf-8")
    (root / "Content" / "Map.umap").write_text("map", encoding="utf-8")
    (root / "Source").mkdir()
    (root / "Source" / "Game.cpp").write_text("int main() {}", encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config to an empty temp directory."""
    config_home = tmp_path / "config_home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("APPDATA", str(config_home))
    return config_home / "plastic-shell" / "config.toml"


# ============================================================================
# Fake command channel
# ============================================================================


@pytest.fixture
def fake_channel() -> FakeChannel:
    """Create an empty scripted channel."""
    return FakeChannel()

"""Unit tests for the command channel over a scripted session."""

import itertools
import logging
from collections import deque
from types import SimpleNamespace

import pytest

from plastic_shell.adapters.shell.channel import CommandChannel, shell_not_running_message

# Marks the point where the scripted process dies
DIE = object()


class ScriptedSession:
    """Session double replaying output chunks, one per read."""

    def __init__(self, chunks: list | None = None, alive: bool = True) -> None:
        self.process = True
        self.alive = alive
        self.write_ok = True
        self.restart_ok = True
        self.written: list[str] = []
        self.restarts: list[tuple[str, str]] = []
        self.chunks = deque(chunks or [])

    def has_process(self) -> bool:
        return self.process

    def is_alive(self) -> bool:
        return self.alive

    def write(self, text: str) -> bool:
        self.written.append(text)
        return self.write_ok

    def read(self, timeout: float = 0.01) -> str:
        if not self.chunks:
            return ""
        chunk = self.chunks.popleft()
        if chunk is DIE:
            self.alive = False
            return ""
        return chunk

    def drain(self) -> str:
        rest = "".join(chunk for chunk in self.chunks if chunk is not DIE)
        self.chunks.clear()
        return rest

    def restart(self, binary_path: str, working_directory: str) -> bool:
        self.restarts.append((binary_path, working_directory))
        self.alive = self.restart_ok
        return self.restart_ok


@pytest.fixture
def settings() -> SimpleNamespace:
    return SimpleNamespace(binary_path="/opt/plastic/cm", workspace_root="/ws")


def make_channel(session: ScriptedSession, settings, **kwargs) -> CommandChannel:
    return CommandChannel(session, settings, **kwargs)


class TestExecute:
    """Tests for running one command."""

    def test_success_returns_output(self, settings) -> None:
        session = ScriptedSession(["11.0.16.7608\n", "CommandResult 0\n"])
        reply = make_channel(session, settings).execute("version")

        assert reply.success
        assert reply.output == "11.0.16.7608\n"
        assert reply.errors == ""
        assert session.written == ["version\n"]

    def test_failure_output_becomes_errors(self, settings) -> None:
        session = ScriptedSession(["/ws/x is not in a workspace.\nCommandResult 1\n"])
        reply = make_channel(session, settings).execute("status", ["--nochanges"], ["/ws/x"])

        assert not reply.success
        assert reply.output == ""
        assert reply.errors == "/ws/x is not in a workspace.\n"
        assert session.written == ['status --nochanges "/ws/x"\n']

    def test_never_launched_fails_without_writing(self, settings) -> None:
        session = ScriptedSession()
        session.process = False
        reply = make_channel(session, settings).execute("whoami")

        assert not reply.success
        assert reply.errors == shell_not_running_message("whoami")
        assert reply.errors == "whoami: Plastic SCM shell not running!"
        assert session.written == []

    def test_dead_process_restarted_before_command(self, settings) -> None:
        session = ScriptedSession(["alice\n", "CommandResult 0\n"], alive=False)
        reply = make_channel(session, settings).execute("whoami")

        assert session.restarts == [("/opt/plastic/cm", "/ws")]
        assert reply.success
        assert reply.output == "alice\n"

    def test_restart_uses_current_settings(self, settings) -> None:
        session = ScriptedSession(["CommandResult 0\n"], alive=False)
        channel = make_channel(session, settings)
        settings.workspace_root = "/other_ws"

        channel.execute("version")

        assert session.restarts == [("/opt/plastic/cm", "/other_ws")]

    def test_exit_does_not_restart(self, settings) -> None:
        session = ScriptedSession(alive=False)
        reply = make_channel(session, settings).execute("exit")

        assert session.restarts == []
        assert not reply.success
        assert reply.errors == shell_not_running_message("exit")

    def test_failed_restart(self, settings) -> None:
        session = ScriptedSession(alive=False)
        session.restart_ok = False
        reply = make_channel(session, settings).execute("version")

        assert not reply.success
        assert reply.errors == shell_not_running_message("version")
        assert session.written == []

    def test_write_failure(self, settings) -> None:
        session = ScriptedSession()
        session.write_ok = False
        reply = make_channel(session, settings).execute("version")

        assert not reply.success
        assert reply.errors == shell_not_running_message("version")

    def test_process_dying_mid_command(
        self, settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        session = ScriptedSession(["partial output\n", DIE])
        with caplog.at_level(logging.ERROR):
            reply = make_channel(session, settings).execute("update")

        assert not reply.success
        assert reply.errors == "partial output\n"
        assert "stopped" in caplog.text
        assert session.restarts == []

    def test_output_queued_before_exit_is_drained(self, settings) -> None:
        session = ScriptedSession(["out\n", DIE, "CommandResult 0\n"])
        reply = make_channel(session, settings).execute("version")

        assert reply.success
        assert reply.output == "out\n"

    def test_output_left_in_pipe_after_crash_becomes_errors(self, settings) -> None:
        session = ScriptedSession(["Error 1\n", DIE, "Error 2\n", "Error 3\n"])
        reply = make_channel(session, settings).execute("update")

        assert not reply.success
        assert reply.errors == "Error 1\nError 2\nError 3\n"

    def test_silence_logs_timeout_but_keeps_waiting(
        self, settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        counter = itertools.count(step=25)
        session = ScriptedSession(["progress 10%\n", *[""] * 12, "CommandResult 0\n"])
        channel = make_channel(
            session, settings, activity_timeout=60.0, clock=lambda: next(counter)
        )

        with caplog.at_level(logging.WARNING):
            reply = channel.execute("update")

        assert reply.success
        assert reply.output == "progress 10%\n"
        warnings = [r for r in caplog.records if "TIMEOUT" in r.getMessage()]
        assert len(warnings) >= 2
        assert "progress 10%" in warnings[0].getMessage()
        # Output already reported is not repeated
        assert "progress 10%" not in warnings[1].getMessage()


class TestRunCommand:
    """Tests for the line-split variant."""

    def test_splits_results(self, settings) -> None:
        session = ScriptedSession(["CH /ws/a\n\nCO /ws/b\n", "CommandResult 0\n"])
        reply = make_channel(session, settings).run_command("status")

        assert reply.success
        assert reply.results == ["CH /ws/a", "CO /ws/b"]
        assert reply.errors == []

    def test_splits_errors(self, settings) -> None:
        session = ScriptedSession(["error one\nerror two\nCommandResult 1\n"])
        reply = make_channel(session, settings).run_command("checkin")

        assert not reply.success
        assert reply.results == []
        assert reply.errors == ["error one", "error two"]

"""Background 'cm shell' process and its command protocol.

This package keeps one cm process alive and talks to it through a line
protocol, saving the launch cost of the tool on every operation.

Architecture:
- protocol.py: command framing and sentinel reader
- session.py: process lifecycle (launch/terminate/restart)
- channel.py: request/response with timeout and crash recovery
- dump.py: one-shot 'cm cat' outside of the shell
"""

from plastic_shell.adapters.shell.channel import CommandChannel, CommandLines, CommandOutput
from plastic_shell.adapters.shell.session import ShellSession

__all__ = ["CommandChannel", "CommandLines", "CommandOutput", "ShellSession"]

"""Test helper utilities for the plastic-shell test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_output_contains,
)
from tests.helpers.fake_channel import FakeChannel, read_fake_cm_log
from tests.helpers.fake_cm_rules import workspace_rules

__all__ = [
    "assert_command_success",
    "assert_command_failed",
    "assert_output_contains",
    "FakeChannel",
    "read_fake_cm_log",
    "workspace_rules",
]

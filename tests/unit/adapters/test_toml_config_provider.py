"""Unit tests for TomlConfigProvider."""

import logging
from pathlib import Path

import pytest

from plastic_shell.adapters.config.toml_config_provider import TomlConfigProvider
from plastic_shell.domain.config import PlasticConfig


@pytest.fixture
def global_config(isolated_global_config: Path) -> Path:
    isolated_global_config.parent.mkdir(parents=True, exist_ok=True)
    return isolated_global_config


class TestTomlConfigProvider:
    """Tests for the global/local config cascade."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        assert TomlConfigProvider().load(tmp_path) == PlasticConfig.default()

    def test_global_only(self, global_config: Path) -> None:
        global_config.write_text('[shell]\nbinary_path = "/opt/plastic/cm"\n')

        config = TomlConfigProvider().load(None)

        assert config.shell.binary_path == "/opt/plastic/cm"
        assert config.shell.activity_timeout == 60.0

    def test_local_overrides_global_key_by_key(
        self, global_config: Path, workspace: Path
    ) -> None:
        global_config.write_text(
            '[shell]\nbinary_path = "/opt/plastic/cm"\nactivity_timeout = 120.0\n'
        )
        (workspace / "plastic-shell.toml").write_text("[shell]\nactivity_timeout = 30.0\n")

        config = TomlConfigProvider().load(workspace)

        assert config.shell.binary_path == "/opt/plastic/cm"
        assert config.shell.activity_timeout == 30.0

    def test_invalid_toml_is_ignored(
        self, workspace: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (workspace / "plastic-shell.toml").write_text("[shell\nbroken")

        with caplog.at_level(logging.WARNING):
            config = TomlConfigProvider().load(workspace)

        assert config == PlasticConfig.default()
        assert "Failed to parse local config" in caplog.text

    def test_invalid_value_is_ignored(
        self, global_config: Path, workspace: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        global_config.write_text('[shell]\nbinary_path = "/opt/plastic/cm"\n')
        (workspace / "plastic-shell.toml").write_text("[shell]\nexit_wait = -1\n")

        config = TomlConfigProvider().load(workspace)

        assert config.shell.binary_path == "/opt/plastic/cm"
        assert config.shell.exit_wait == 1.0
        assert "Ignoring it" in caplog.text

"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from plastic_shell.domain.config import PlasticConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, workspace_root: Path | None = None) -> PlasticConfig:
        """Load configuration, optionally including a workspace's own file.

        Args:
            workspace_root: Workspace whose local config file applies.

        Returns:
            PlasticConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config files are missing or invalid.
        """
        ...

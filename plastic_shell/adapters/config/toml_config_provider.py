"""TOML-based configuration provider.

Config loading priority (highest to lowest):
1. Local: <workspace>/plastic-shell.toml
2. Global: ~/.config/plastic-shell/config.toml (user defaults)
3. Built-in defaults
"""

import logging
from pathlib import Path

from plastic_shell.domain.config import PlasticConfig
from plastic_shell.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Local values override global values key by key within a section.
    Missing or invalid files are skipped with a warning.
    """

    def load(self, workspace_root: Path | None = None) -> PlasticConfig:
        """Load configuration with global fallback.

        Args:
            workspace_root: Directory holding the local config file, if any.

        Returns:
            PlasticConfig with merged global/local values or defaults
        """
        config = PlasticConfig.default()

        paths = [("global", get_global_config_path())]
        if workspace_root is not None:
            paths.append(("local", get_local_config_path(workspace_root)))

        for scope, path in paths:
            if not path.exists():
                continue
            try:
                config = PlasticConfig.from_partial(config, load_config_data(path))
                logger.debug("Loaded %s config from %s", scope, path)
            except (FileNotFoundError, ValueError) as e:
                logger.warning(
                    "Failed to parse %s config at %s: %s. Ignoring it.",
                    scope,
                    path,
                    e,
                )

        return config

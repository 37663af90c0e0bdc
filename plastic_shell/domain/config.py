"""Config domain models for plastic-shell.

Configuration is stored in TOML files (global and per-workspace) and
describes how to reach the cm tool and which workspace to operate on.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShellConfig:
    """Configuration for the background 'cm shell' process.

    Attributes:
        binary_path: Path to the cm binary ("" = platform default)
        activity_timeout: Seconds without output before a timeout warning
        exit_wait: Seconds to wait for the shell to exit on terminate

    Raises:
        ValueError: If activity_timeout or exit_wait is not positive.
    """

    binary_path: str = ""
    activity_timeout: float = 60.0
    exit_wait: float = 1.0

    def __post_init__(self) -> None:
        """Validate shell config after initialization."""
        if self.activity_timeout <= 0:
            raise ValueError(
                f"activity_timeout must be positive, got {self.activity_timeout}"
            )
        if self.exit_wait <= 0:
            raise ValueError(f"exit_wait must be positive, got {self.exit_wait}")


@dataclass(frozen=True)
class WorkspaceConfig:
    """Configuration for the workspace location.

    Attributes:
        root: Directory to start the workspace root search from ("" = CWD)
    """

    root: str = ""


@dataclass(frozen=True)
class PlasticConfig:
    """Complete plastic-shell configuration.

    Attributes:
        shell: cm shell process configuration
        workspace: Workspace location configuration
    """

    shell: ShellConfig = field(default_factory=ShellConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)

    @staticmethod
    def default() -> "PlasticConfig":
        """Create a config with all default values."""
        return PlasticConfig(shell=ShellConfig(), workspace=WorkspaceConfig())

    @staticmethod
    def from_partial(base: "PlasticConfig", data: dict) -> "PlasticConfig":
        """Overlay raw TOML data on top of an existing config.

        Keys present in a section override the base values of that section,
        missing keys keep the base values.

        Args:
            base: Config to start from.
            data: Raw TOML data, e.g. {"shell": {"binary_path": "cm"}}.

        Returns:
            New validated PlasticConfig.

        Raises:
            ValueError: If a section is not a table or a value is invalid.
        """
        shell_data = data.get("shell", {})
        workspace_data = data.get("workspace", {})
        if not isinstance(shell_data, dict) or not isinstance(workspace_data, dict):
            raise ValueError("Config sections must be tables")

        try:
            shell = ShellConfig(**{**base.shell.__dict__, **shell_data})
            workspace = WorkspaceConfig(**{**base.workspace.__dict__, **workspace_data})
        except TypeError as e:
            raise ValueError(f"Unknown config key: {e}") from e

        return PlasticConfig(shell=shell, workspace=workspace)

"""Version information for plastic-shell.

Reads the package version from the installed package metadata
(pyproject.toml).
"""

from importlib.metadata import version

__version__ = version("plastic-shell")

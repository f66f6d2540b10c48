# mobilectl/cli/commands/__init__.py

"""CLI commands"""

from . import build
from . import deploy
from . import version
from . import changelog
from . import info

__all__ = [
    "build",
    "deploy",
    "version",
    "changelog",
    "info",
]

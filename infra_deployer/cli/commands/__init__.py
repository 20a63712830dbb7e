# infra_deployer/cli/commands/__init__.py
"""CLI commands"""

from . import deploy
from . import bootstrap
from . import delegates

__all__ = [
    "deploy",
    "bootstrap",
    "delegates",
]

"""Phaser runtime collaborator.

Describes captured phaser runtime state and extracts the WaitOn and
ImpededBy relations from it.

Python 3.13+.
"""

from .dependencies import check_runtime_state, extract_dependencies
from .phaser import Phaser, PhaserEvent, RuntimeState

__all__ = [
    "Phaser",
    "PhaserEvent",
    "RuntimeState",
    "check_runtime_state",
    "extract_dependencies",
]

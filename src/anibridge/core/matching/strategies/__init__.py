"""Resolution strategies, in the order the engine applies them.

Each strategy only chooses a search label; searching and ranking are
shared by the engine.
"""

from __future__ import annotations

from .alternate_label import AlternateLabelStrategy
from .base import ResolutionStrategy
from .direct import DirectStrategy
from .simplified_title import SimplifiedTitleStrategy


def default_strategies() -> list[ResolutionStrategy]:
    """Direct, then alternate label, then simplified title."""
    return [DirectStrategy(), AlternateLabelStrategy(), SimplifiedTitleStrategy()]


__all__ = [
    "AlternateLabelStrategy",
    "DirectStrategy",
    "ResolutionStrategy",
    "SimplifiedTitleStrategy",
    "default_strategies",
]

from __future__ import annotations

from enum import Enum
from typing import Callable


class GameEvent(str, Enum):
    """Notifications fired once per successful engine action."""

    MOVE = "move"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"
    ROTATE = "rotate"
    SPAWN = "spawn"
    LOCK = "lock"
    LINE_CLEAR = "line_clear"
    GAME_OVER = "game_over"


EventListener = Callable[[GameEvent], None]

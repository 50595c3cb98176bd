from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .events import EventListener, GameEvent
from .grid import COLUMNS, ROWS, GameGrid
from .pieces import GridPoint, Piece, TetrominoKind, random_kind
from .rules import ScoringRules, format_interval, gravity_interval, level_for_lines
from .scheduler import GravityScheduler, ManualGravityClock


logger = logging.getLogger(__name__)

# Simplified wall kicks, tried in this order after rotating in place
DEFAULT_KICKS: Tuple[Tuple[int, int], ...] = ((0, 0), (1, 0), (-1, 0), (2, 0), (-2, 0), (0, -1))


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    GAME_OVER = "game_over"


class CellKind(Enum):
    EMPTY = "empty"
    LOCKED = "locked"
    ACTIVE = "active"
    GHOST = "ghost"


@dataclass(frozen=True)
class CellState:
    state: CellKind = CellKind.EMPTY
    kind: Optional[TetrominoKind] = None


EMPTY_CELL = CellState()
Snapshot = Tuple[Tuple[CellState, ...], ...]


@dataclass
class GameConfig:
    random_seed: Optional[int] = None
    spawn_y: int = 0
    kicks: Tuple[Tuple[int, int], ...] = DEFAULT_KICKS

    def __post_init__(self) -> None:
        if not 0 <= self.spawn_y < ROWS:
            raise ValueError(f"spawn_y must lie in [0, {ROWS}), got {self.spawn_y}")
        self.kicks = tuple((int(dx), int(dy)) for dx, dy in self.kicks)
        if not self.kicks or self.kicks[0] != (0, 0):
            raise ValueError("kicks must start with the in-place offset (0, 0)")


class TetrisGame:
    """Falling-block game state machine.

    Every public command and `snapshot()` run under one re-entrant lock, so
    scheduler ticks and player commands never interleave. Commands issued
    before `start()` or after game over are ignored.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[GravityScheduler] = None,
        listeners: Iterable[EventListener] = (),
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler: GravityScheduler = scheduler if scheduler is not None else ManualGravityClock()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(COLUMNS, ROWS)
        self._lock = threading.RLock()
        self._listeners: List[EventListener] = list(listeners)
        self._events: List[GameEvent] = []
        self._gravity_token = 0
        self._gravity_armed = False

        self.phase = Phase.IDLE
        self.current_piece: Optional[Piece] = None
        self.origin = self.spawn_origin
        self.next_kind = random_kind(self.rng)
        self.score = 0
        self.lines_cleared = 0
        self.level = 1

    @property
    def spawn_origin(self) -> GridPoint:
        return GridPoint(COLUMNS // 2 - 2, self.config.spawn_y)

    @property
    def is_game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def has_active_piece(self) -> bool:
        return self.current_piece is not None and self.phase is Phase.RUNNING

    @property
    def fall_interval(self) -> float:
        return gravity_interval(self.level)

    @property
    def fall_interval_text(self) -> str:
        return format_interval(self.fall_interval)

    def start(self) -> None:
        """Begin a new game, or resume gravity after `stop()`."""
        with self._lock:
            if self.phase is not Phase.RUNNING:
                self.restart()
            elif not self._gravity_armed:
                self._arm_gravity()

    def stop(self) -> None:
        with self._lock:
            self._disarm_gravity()

    def restart(self) -> None:
        with self._lock:
            self._disarm_gravity()
            self.grid.reset()
            self.score = 0
            self.lines_cleared = 0
            self.level = 1
            self.phase = Phase.RUNNING
            self.current_piece = None
            self.next_kind = random_kind(self.rng)
            logger.debug("Game restarted")
            self._spawn_piece()
            if self.phase is Phase.RUNNING:
                self._arm_gravity()

    def move_left(self) -> bool:
        return self._move_horizontal(-1)

    def move_right(self) -> bool:
        return self._move_horizontal(1)

    def soft_drop(self) -> bool:
        """Advance one row for points, locking the piece when it cannot move.

        Returns True when the piece moved down.
        """
        with self._lock:
            if not self.has_active_piece:
                return False
            if self._shift(0, 1):
                self.score += self.rules.soft_drop_points
                self._emit(GameEvent.SOFT_DROP)
                return True
            self._lock_piece()
            return False

    def hard_drop(self) -> bool:
        with self._lock:
            if not self.has_active_piece:
                return False
            distance = 0
            while self._shift(0, 1):
                distance += 1
            if distance > 0:
                self.score += distance * self.rules.hard_drop_points
                self._emit(GameEvent.HARD_DROP)
            self._lock_piece()
            return True

    def rotate(self) -> bool:
        with self._lock:
            if not self.has_active_piece:
                return False
            assert self.current_piece is not None
            rotated = self.current_piece.rotated()
            for dx, dy in self.config.kicks:
                candidate = self.origin.offset(dx, dy)
                if self.grid.can_place(rotated, candidate):
                    self.current_piece = rotated
                    self.origin = candidate
                    self._emit(GameEvent.ROTATE)
                    return True
            return False

    def tick(self) -> bool:
        """Apply one gravity step; returns True when the piece moved down."""
        with self._lock:
            if not self.has_active_piece:
                return False
            if self._shift(0, 1):
                return True
            self._lock_piece()
            return False

    def step(self, action: Action) -> bool:
        handlers: Dict[Action, Callable[[], bool]] = {
            Action.LEFT: self.move_left,
            Action.RIGHT: self.move_right,
            Action.ROTATE: self.rotate,
            Action.SOFT_DROP: self.soft_drop,
            Action.HARD_DROP: self.hard_drop,
        }
        handler = handlers.get(Action(action))
        if handler is None:
            return False
        return handler()

    def add_listener(self, listener: EventListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def drain_events(self) -> List[GameEvent]:
        """Events fired since the previous call, oldest first."""
        with self._lock:
            events, self._events = self._events, []
            return events

    def landing_origin(self) -> Optional[GridPoint]:
        """Origin the active piece would hard-drop to, without moving it."""
        with self._lock:
            if self.current_piece is None:
                return None
            origin = self.origin
            while self.grid.can_place(self.current_piece, origin.offset(0, 1)):
                origin = origin.offset(0, 1)
            return origin

    def snapshot(self) -> Snapshot:
        with self._lock:
            cells = [[EMPTY_CELL] * COLUMNS for _ in range(ROWS)]
            for y, x in zip(*np.nonzero(self.grid.grid)):
                cells[y][x] = CellState(CellKind.LOCKED, TetrominoKind(int(self.grid.grid[y, x])))
            piece = self.current_piece
            if piece is not None and self.phase is Phase.RUNNING:
                landing = self.landing_origin()
                assert landing is not None
                for x, y in piece.cells_at(landing):
                    if self.grid.is_inside(x, y) and cells[y][x] is EMPTY_CELL:
                        cells[y][x] = CellState(CellKind.GHOST, piece.kind)
                for x, y in piece.cells_at(self.origin):
                    if self.grid.is_inside(x, y):
                        cells[y][x] = CellState(CellKind.ACTIVE, piece.kind)
            return tuple(tuple(row) for row in cells)

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        with self._lock:
            state = self.grid.clone_state()
            if self.current_piece is not None and self.phase is Phase.RUNNING:
                for x, y in self.current_piece.cells_at(self.origin):
                    if self.grid.is_inside(x, y):
                        # Use negative to indicate falling piece overlay
                        state[y, x] = -int(self.current_piece.kind)
            return state

    def _move_horizontal(self, dx: int) -> bool:
        with self._lock:
            if not self.has_active_piece:
                return False
            if self._shift(dx, 0):
                self._emit(GameEvent.MOVE)
                return True
            return False

    def _shift(self, dx: int, dy: int) -> bool:
        if self.current_piece is None:
            return False
        new_origin = self.origin.offset(dx, dy)
        if self.grid.can_place(self.current_piece, new_origin):
            self.origin = new_origin
            return True
        return False

    def _lock_piece(self) -> None:
        assert self.current_piece is not None
        overflow = self.grid.lock(self.current_piece, self.origin)
        self.current_piece = None
        if overflow:
            self._set_game_over("piece locked above the board")
            return
        self._emit(GameEvent.LOCK)
        cleared = self.grid.clear_completed_rows()
        if cleared:
            self._apply_line_clear(cleared)
        self._spawn_piece()

    def _apply_line_clear(self, cleared: int) -> None:
        self.lines_cleared += cleared
        self.score += self.rules.score_for_lines(cleared, self.level)
        self._emit(GameEvent.LINE_CLEAR)
        new_level = level_for_lines(self.lines_cleared)
        if new_level != self.level:
            self.level = new_level
            logger.debug("Level %d, gravity %s", self.level, self.fall_interval_text)
            # A suspended game picks up the new interval on start()
            if self._gravity_armed:
                self._arm_gravity()

    def _spawn_piece(self) -> None:
        piece = Piece(self.next_kind, 0)
        self.origin = self.spawn_origin
        self.next_kind = random_kind(self.rng)
        if not self.grid.can_place(piece, self.origin):
            self._set_game_over(f"spawn of {piece.kind.name} blocked")
            return
        self.current_piece = piece
        self._emit(GameEvent.SPAWN)

    def _set_game_over(self, reason: str) -> None:
        self.phase = Phase.GAME_OVER
        self.current_piece = None
        self._disarm_gravity()
        logger.debug("Game over (%s): score=%d lines=%d", reason, self.score, self.lines_cleared)
        self._emit(GameEvent.GAME_OVER)

    def _arm_gravity(self) -> None:
        self._gravity_token += 1
        token = self._gravity_token
        self.scheduler.schedule(self.fall_interval, lambda: self._on_gravity(token))
        self._gravity_armed = True

    def _disarm_gravity(self) -> None:
        self._gravity_token += 1
        self.scheduler.cancel()
        self._gravity_armed = False

    def _on_gravity(self, token: int) -> None:
        with self._lock:
            # Ticks from a superseded arming are dropped
            if token != self._gravity_token:
                return
            self.tick()

    def _emit(self, event: GameEvent) -> None:
        self._events.append(event)
        for listener in list(self._listeners):
            # A failing listener must not abort the transition in progress
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, event.value)

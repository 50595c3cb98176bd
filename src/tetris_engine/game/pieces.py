from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, NamedTuple, Tuple


class TetrominoKind(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


class GridPoint(NamedTuple):
    x: int
    y: int

    def offset(self, dx: int = 0, dy: int = 0) -> "GridPoint":
        return GridPoint(self.x + dx, self.y + dy)


RotationState = Tuple[GridPoint, ...]


def _state(*cells: Tuple[int, int]) -> RotationState:
    return tuple(GridPoint(x, y) for x, y in cells)


# Local 4x4 frames, clockwise order. O has a single state, I/S/Z two.
ROTATIONS: Dict[TetrominoKind, Tuple[RotationState, ...]] = {
    TetrominoKind.I: (
        _state((0, 1), (1, 1), (2, 1), (3, 1)),
        _state((2, 0), (2, 1), (2, 2), (2, 3)),
    ),
    TetrominoKind.O: (
        _state((1, 0), (2, 0), (1, 1), (2, 1)),
    ),
    TetrominoKind.T: (
        _state((1, 0), (0, 1), (1, 1), (2, 1)),
        _state((1, 0), (1, 1), (2, 1), (1, 2)),
        _state((0, 1), (1, 1), (2, 1), (1, 2)),
        _state((1, 0), (0, 1), (1, 1), (1, 2)),
    ),
    TetrominoKind.S: (
        _state((1, 0), (2, 0), (0, 1), (1, 1)),
        _state((1, 0), (1, 1), (2, 1), (2, 2)),
    ),
    TetrominoKind.Z: (
        _state((0, 0), (1, 0), (1, 1), (2, 1)),
        _state((2, 0), (1, 1), (2, 1), (1, 2)),
    ),
    TetrominoKind.J: (
        _state((0, 0), (0, 1), (1, 1), (2, 1)),
        _state((1, 0), (2, 0), (1, 1), (1, 2)),
        _state((0, 1), (1, 1), (2, 1), (2, 2)),
        _state((1, 0), (1, 1), (0, 2), (1, 2)),
    ),
    TetrominoKind.L: (
        _state((2, 0), (0, 1), (1, 1), (2, 1)),
        _state((1, 0), (1, 1), (1, 2), (2, 2)),
        _state((0, 1), (1, 1), (2, 1), (0, 2)),
        _state((0, 0), (1, 0), (1, 1), (1, 2)),
    ),
}

# Render hint only
KIND_COLORS: Dict[TetrominoKind, Tuple[int, int, int]] = {
    TetrominoKind.I: (77, 217, 255),
    TetrominoKind.O: (252, 227, 71),
    TetrominoKind.T: (176, 122, 255),
    TetrominoKind.S: (84, 227, 135),
    TetrominoKind.Z: (250, 115, 138),
    TetrominoKind.J: (84, 166, 255),
    TetrominoKind.L: (255, 156, 92),
}

def check_catalog(rotations: Dict[TetrominoKind, Tuple[RotationState, ...]],
                  colors: Dict[TetrominoKind, Tuple[int, int, int]]) -> None:
    for table_name, table in (("ROTATIONS", rotations), ("KIND_COLORS", colors)):
        missing = set(TetrominoKind) - set(table)
        if missing:
            raise RuntimeError(f"{table_name} missing kinds: {sorted(k.name for k in missing)}")
    for kind, states in rotations.items():
        if not states or any(len(state) != 4 for state in states):
            raise RuntimeError(f"Every rotation state of {kind.name} must hold exactly 4 cells")


check_catalog(ROTATIONS, KIND_COLORS)


def random_kind(rng: random.Random) -> TetrominoKind:
    return rng.choice(list(TetrominoKind))


@dataclass(frozen=True)
class Piece:
    kind: TetrominoKind
    rotation: int = 0

    @property
    def rotation_count(self) -> int:
        return len(ROTATIONS[self.kind])

    def cells(self) -> RotationState:
        states = ROTATIONS[self.kind]
        return states[self.rotation % len(states)]

    def rotated(self, delta: int = 1) -> "Piece":
        return Piece(self.kind, (self.rotation + delta) % self.rotation_count)

    def cells_at(self, origin: GridPoint) -> List[GridPoint]:
        return [GridPoint(origin.x + c.x, origin.y + c.y) for c in self.cells()]

# lockstep/replay/grid.py
"""
Level grid loader.

Level text is kept as two layers: the static tile characters, and a phase
overlay holding the integer value of every numeric tile. Enemy patrols
rewrite the overlay while a replay runs; the tiles never change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .errors import MalformedLevel

WALL = "#"
EMPTY = " "
GOAL = "!"
HAZARD = "x"
PLAYER_SPAWN = "P"

ENEMY_SPAWN_PHASE = 1
MAX_WALKABLE_PHASE = 18

_DIGITS = frozenset("0123456789")

Position = Tuple[int, int]
PhaseOverlay = List[List[Optional[int]]]


def tile_phase(tile: str) -> Optional[int]:
    """Integer value of a numeric tile, None for everything else."""
    return int(tile) if tile in _DIGITS else None


@dataclass
class LevelGrid:
    """A parsed level. Treat as read-only; simulations copy the overlay."""

    tiles: List[List[str]]
    phases: PhaseOverlay
    player_spawns: List[Position] = field(default_factory=list)
    enemy_spawns: List[Position] = field(default_factory=list)

    @property
    def width(self) -> int:
        return len(self.tiles[0])

    @property
    def height(self) -> int:
        return len(self.tiles)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def tile_at(self, x: int, y: int) -> Optional[str]:
        if not self.in_bounds(x, y):
            return None
        return self.tiles[y][x]

    def copy_phases(self) -> PhaseOverlay:
        return [row[:] for row in self.phases]

    def to_text(self) -> str:
        return "\n".join("".join(row) for row in self.tiles)


def split_rows(text: str) -> List[str]:
    """Split level text into rows, dropping one trailing blank row."""
    rows = text.replace("\r", "").split("\n")
    if rows and rows[-1] == "":
        rows.pop()
    return rows


def load_level(text) -> LevelGrid:
    """
    Parse *text* into a LevelGrid.

    Players get ids in row-major scan order from every spawn tile; enemies
    are created only from tiles whose value is exactly 1. Other digits stay
    ordinary walkable terrain.
    """
    if not isinstance(text, str):
        raise MalformedLevel("Level data is invalid.")

    rows = split_rows(text)
    if not rows:
        raise MalformedLevel("Level data is empty.")

    width = len(rows[0])
    if width <= 0:
        raise MalformedLevel("Level width is invalid.")

    tiles: List[List[str]] = []
    phases: PhaseOverlay = []
    players: List[Position] = []
    enemies: List[Position] = []

    for y, line in enumerate(rows):
        if len(line) != width:
            raise MalformedLevel(
                f"Level is ragged at row {y + 1}. Expected width {width}, got {len(line)}."
            )
        tile_row = list(line)
        phase_row = [tile_phase(tile) for tile in tile_row]
        for x, tile in enumerate(tile_row):
            if tile == PLAYER_SPAWN:
                players.append((x, y))
            elif phase_row[x] == ENEMY_SPAWN_PHASE:
                enemies.append((x, y))
        tiles.append(tile_row)
        phases.append(phase_row)

    if not players:
        raise MalformedLevel("Level has no players.")

    return LevelGrid(tiles=tiles, phases=phases, player_spawns=players, enemy_spawns=enemies)

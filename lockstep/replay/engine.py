# lockstep/replay/engine.py
"""
Replay verification engine.

Re-simulates a decoded move sequence against a level, one tick per move:
every live player steps in creation order, then every enemy advances one
cell along its patrol. The first decisive tick produces the verdict.

Enemy patrols are written into the terrain. An enemy standing on phase
value v moves to the first cell of its 3x3 neighbourhood holding v + 1 and
leaves the mirror value 18 - v behind, which is what lets a 1..9 path be
walked back the other way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .decoder import decode_replay
from .grid import (
    EMPTY,
    GOAL,
    HAZARD,
    MAX_WALKABLE_PHASE,
    PLAYER_SPAWN,
    LevelGrid,
    PhaseOverlay,
    load_level,
)

logger = logging.getLogger(__name__)

PATROL_LENGTH = 17
MIRROR_BASE = 18

DIRECTION_VECTORS: Dict[str, Tuple[int, int]] = {
    "u": (0, -1),
    "d": (0, 1),
    "l": (-1, 0),
    "r": (1, 0),
}

# Row-major 3x3 scan around an enemy, its own cell included.
NEIGHBOUR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)
)


class Outcome(str, Enum):
    PLAYING = "playing"
    CLEARED = "cleared"
    RESET = "reset"
    INVALID = "invalid"
    EXHAUSTED = "exhausted"


@dataclass
class Player:
    id: int
    x: int
    y: int
    active: bool = True


@dataclass
class Enemy:
    id: int
    x: int
    y: int


@dataclass(frozen=True)
class TickResult:
    outcome: Outcome
    move: int = 0

    @property
    def terminal(self) -> bool:
        return self.outcome is not Outcome.PLAYING


@dataclass(frozen=True)
class Verdict:
    ok: bool
    moves: int
    outcome: Outcome

    def to_dict(self) -> Dict[str, object]:
        return {"ok": self.ok, "moves": self.moves}


@dataclass
class SimulationState:
    level: LevelGrid
    phases: PhaseOverlay
    players: List[Player] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    total_players: int = 0
    players_done: int = 0

    @classmethod
    def from_level(cls, level: LevelGrid) -> "SimulationState":
        players = [Player(id=i, x=x, y=y) for i, (x, y) in enumerate(level.player_spawns)]
        enemies = [Enemy(id=i, x=x, y=y) for i, (x, y) in enumerate(level.enemy_spawns)]
        return cls(
            level=level,
            phases=level.copy_phases(),
            players=players,
            enemies=enemies,
            total_players=len(players),
        )

    def phase_at(self, x: int, y: int) -> Optional[int]:
        if not self.level.in_bounds(x, y):
            return None
        return self.phases[y][x]

    def is_walkable(self, x: int, y: int) -> bool:
        tile = self.level.tile_at(x, y)
        if tile == EMPTY or tile == PLAYER_SPAWN:
            return True
        phase = self.phase_at(x, y)
        return phase is not None and 1 <= phase <= MAX_WALKABLE_PHASE

    def active_players(self) -> List[Player]:
        return [p for p in self.players if p.active]

    def player_occupies(self, x: int, y: int, ignore_id: int) -> bool:
        return any(p.active and p.id != ignore_id and p.x == x and p.y == y for p in self.players)

    def enemy_at(self, x: int, y: int) -> bool:
        return any(e.x == x and e.y == y for e in self.enemies)

    def has_enemy_touch(self) -> bool:
        return any(self.enemy_at(p.x, p.y) for p in self.players if p.active)


# ---------------------------------------------------------------------
# Tick phases
# ---------------------------------------------------------------------

def enemy_step(state: SimulationState, enemy: Enemy) -> bool:
    """
    Advance *enemy* at most one cell along its patrol. Returns True if it moved.

    Phase 17 wraps to 1, but only for the comparisons that follow the first
    one in this scan; cells already compared are not revisited.
    """
    phase = state.phase_at(enemy.x, enemy.y)
    if phase is None:
        return False

    for dx, dy in NEIGHBOUR_OFFSETS:
        col, row = enemy.x + dx, enemy.y + dy
        candidate = state.phase_at(col, row)
        if candidate is not None and candidate - 1 == phase:
            state.phases[enemy.y][enemy.x] = MIRROR_BASE - phase
            enemy.x, enemy.y = col, row
            return True
        if phase == PATROL_LENGTH:
            phase = 1
    return False


def run_player_phase(state: SimulationState, move: str, move_number: int) -> TickResult:
    vector = DIRECTION_VECTORS.get(move)
    if vector is None:
        return TickResult(Outcome.INVALID, move_number)
    dx, dy = vector

    for player in state.players:
        if not player.active:
            continue

        tx, ty = player.x + dx, player.y + dy
        target = state.level.tile_at(tx, ty)
        if target is None:
            player.active = False
            continue

        if state.is_walkable(tx, ty) and not state.player_occupies(tx, ty, player.id):
            player.x, player.y = tx, ty
        elif target == GOAL:
            player.active = False
            state.players_done += 1
            if state.players_done >= state.total_players:
                return TickResult(Outcome.CLEARED, move_number)
            continue
        elif target == HAZARD:
            return TickResult(Outcome.RESET, move_number)

        if state.enemy_at(player.x, player.y):
            return TickResult(Outcome.RESET, move_number)

    return TickResult(Outcome.PLAYING, move_number)


def run_enemy_phase(state: SimulationState, move_number: int) -> TickResult:
    if state.has_enemy_touch():
        return TickResult(Outcome.RESET, move_number)

    for enemy in state.enemies:
        enemy_step(state, enemy)
        if state.has_enemy_touch():
            return TickResult(Outcome.RESET, move_number)

    if state.has_enemy_touch():
        return TickResult(Outcome.RESET, move_number)

    return TickResult(Outcome.PLAYING, move_number)


def run_tick(state: SimulationState, move: str, index: int) -> TickResult:
    """Resolve move *index* (0-based); reported move numbers are 1-based."""
    move_number = index + 1
    if state.has_enemy_touch():
        return TickResult(Outcome.RESET, move_number)

    result = run_player_phase(state, move, move_number)
    if result.terminal:
        return result

    return run_enemy_phase(state, move_number)


# ---------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------

def simulate(level: LevelGrid, moves: str) -> Verdict:
    """Replay already-decoded *moves* against a fresh state built from *level*."""
    state = SimulationState.from_level(level)
    for index, move in enumerate(moves):
        result = run_tick(state, move, index)
        if result.terminal:
            return Verdict(
                ok=result.outcome is Outcome.CLEARED,
                moves=result.move,
                outcome=result.outcome,
            )
    return Verdict(ok=False, moves=len(moves), outcome=Outcome.EXHAUSTED)


def verify_replay(level_text, replay_text) -> Verdict:
    """
    Decide whether *replay_text* clears the level described by *level_text*.

    Raises MalformedReplay or MalformedLevel before simulating; after that a
    Verdict is always returned.
    """
    moves = decode_replay(replay_text)
    level = load_level(level_text)
    verdict = simulate(level, moves)
    logger.debug(
        "replay verdict outcome=%s ok=%s moves=%d of %d",
        verdict.outcome.value, verdict.ok, verdict.moves, len(moves),
    )
    return verdict

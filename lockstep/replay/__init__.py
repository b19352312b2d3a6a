# lockstep/replay/__init__.py
"""Server-side replay verification: decode, load, re-simulate, verdict."""

from .decoder import REPLAY_MAX_MOVES, decode_replay, encode_replay
from .engine import Outcome, SimulationState, Verdict, enemy_step, run_tick, simulate, verify_replay
from .errors import MalformedLevel, MalformedReplay, ReplayError
from .grid import LevelGrid, load_level

__all__ = [
    "REPLAY_MAX_MOVES",
    "LevelGrid",
    "MalformedLevel",
    "MalformedReplay",
    "Outcome",
    "ReplayError",
    "SimulationState",
    "Verdict",
    "decode_replay",
    "encode_replay",
    "enemy_step",
    "load_level",
    "run_tick",
    "simulate",
    "verify_replay",
]

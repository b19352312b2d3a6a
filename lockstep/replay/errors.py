# lockstep/replay/errors.py
from __future__ import annotations


class ReplayError(ValueError):
    """Base class for inputs rejected before any simulation tick runs."""


class MalformedReplay(ReplayError):
    pass


class MalformedLevel(ReplayError):
    pass

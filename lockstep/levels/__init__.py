# lockstep/levels/__init__.py
"""
Built-in levels shipped with the backend.

Level files live next to this module and are listed, in play order, by
manifest.json. Built-ins are read-only: the publish endpoint refuses their ids.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

LEVELS_DIR = Path(__file__).resolve().parent

BUILT_IN_LEVEL_NAMES = {
    "map0": "Relay Threshold",
    "map1": "Mirror Lift",
    "map2": "Twin Ramps",
}


def normalize_level_text(raw: str) -> str:
    return raw.replace("\r", "").rstrip("\n")


@lru_cache(maxsize=1)
def builtin_levels() -> Dict[str, Dict[str, Any]]:
    try:
        manifest = json.loads((LEVELS_DIR / "manifest.json").read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("built-in level manifest unreadable: %s", exc)
        return {}
    if not isinstance(manifest, list):
        return {}

    levels: Dict[str, Dict[str, Any]] = {}
    for entry in manifest:
        if not isinstance(entry, str) or not entry.endswith(".txt"):
            continue
        level_id = entry[:-4]
        text = normalize_level_text((LEVELS_DIR / entry).read_text(encoding="utf-8"))
        levels[level_id] = {
            "id": level_id,
            "name": BUILT_IN_LEVEL_NAMES.get(level_id, level_id),
            "text": text,
            "updatedAt": None,
            "isBuiltIn": True,
        }
    return levels


def builtin_level_list() -> List[Dict[str, Any]]:
    return [dict(level) for level in builtin_levels().values()]


def get_builtin_level(level_id: str) -> Optional[Dict[str, Any]]:
    level = builtin_levels().get(level_id)
    return dict(level) if level else None


def is_builtin(level_id: str) -> bool:
    return level_id in builtin_levels()

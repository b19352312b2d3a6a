# lockstep/routes/__init__.py
"""Shared helpers for the JSON API blueprints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import abort, jsonify, request

from lockstep.extensions import db
from lockstep.levels import get_builtin_level


def _abort_json(status: int, message: str, **extra):
    resp = jsonify({"ok": False, "error": message, **extra})
    resp.status_code = status
    return resp


def _bad(message: str):
    abort(_abort_json(400, message))


def _json_body() -> Dict[str, Any]:
    if not request.data:
        return {}
    data = request.get_json(silent=True)
    if data is None:
        _bad("Invalid JSON")
    return data


def find_level(level_id: str) -> Optional[Dict[str, Any]]:
    """Built-in levels win over stored ones with the same id."""
    from lockstep.models import Level

    builtin = get_builtin_level(level_id)
    if builtin:
        return builtin
    stored = db.session.get(Level, level_id)
    return stored.to_dict() if stored else None

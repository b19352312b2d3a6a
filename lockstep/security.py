import secrets
import threading
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from flask import abort, current_app, jsonify, request, session

CSRF_SESSION_KEY = "_csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def generate_csrf_token() -> str:
    """
    Simple session-backed CSRF token helper.
    Returns the existing token or creates one if missing.
    """
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(18)
        session[CSRF_SESSION_KEY] = token
        session.permanent = True
    return token


def session_id() -> str:
    """Stable per-session id used to key rate limits."""
    sid = session.get("_sid")
    if not sid:
        sid = secrets.token_urlsafe(18)
        session["_sid"] = sid
    return sid


def _abort_json(status: int, message: str):
    resp = jsonify({"ok": False, "error": message})
    resp.status_code = status
    return resp


def is_trusted_origin() -> bool:
    origin = request.headers.get("Origin") or ""
    allowed = {current_app.config.get("PUBLIC_ORIGIN")}
    allowed.update(current_app.config.get("DEV_ALLOWED_ORIGINS") or ())
    return origin in allowed


def require_trusted_origin() -> None:
    if not is_trusted_origin():
        abort(_abort_json(403, "Request origin is not allowed."))


def require_csrf() -> None:
    """
    Validate the CSRF header against the session token.
    Aborts with 403 on failure.
    """
    require_trusted_origin()
    session_token = session.get(CSRF_SESSION_KEY)
    supplied = request.headers.get(CSRF_HEADER)
    if not session_token or not supplied or not secrets.compare_digest(supplied, session_token):
        abort(_abort_json(403, "Invalid CSRF token."))


def client_ip() -> str:
    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or request.remote_addr or "unknown"


class RateLimiter:
    """Sliding-window limiter; in-memory and per-process."""

    def __init__(self, window_s: float, max_hits: int):
        self.window_s = window_s
        self.max_hits = max_hits
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._last_sweep = None

    def __len__(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        # Drop keys whose newest hit has left the window; caller holds the lock.
        stale = [key for key, hits in self._hits.items() if not hits or now - hits[-1] > self.window_s]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str, now: float = None) -> bool:
        """Record a hit for *key*; returns True if the caller is over the limit."""
        now = time.monotonic() if now is None else now
        with self._lock:
            if self._last_sweep is None or now - self._last_sweep > self.window_s:
                self._sweep(now)
            hits = self._hits[key]
            while hits and now - hits[0] > self.window_s:
                hits.popleft()
            if len(hits) >= self.max_hits:
                return True
            hits.append(now)
            return False


def apply_security_headers(resp):
    resp.headers.setdefault("X-Content-Type-Options", "nosniff")
    resp.headers.setdefault("X-Frame-Options", "DENY")
    resp.headers.setdefault("Referrer-Policy", "same-origin")
    if not current_app.debug and not current_app.testing:
        resp.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains; preload")
    return resp

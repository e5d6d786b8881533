# ==============================================================================
# SESSION STORES
# ==============================================================================
# Implementations of the single-key session contract (ISessionStore).
#
#   MemorySessionStore → plain dict, for scripts and unit tests
#   FlaskSessionStore  → Flask's signed cookie session (per request)
# ==============================================================================

from typing import Any, Dict, Optional

from flask import session


class MemorySessionStore:
    """Dict-backed store."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._data.get(key)
        return dict(value) if value is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self._data[key] = dict(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FlaskSessionStore:
    """
    Store backed by flask.session.

    Only usable inside a request context; the container keeps a single
    instance because flask.session resolves to the current request.
    """

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return session.get(key)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        session[key] = value
        session.permanent = True
        session.modified = True

    def remove(self, key: str) -> None:
        session.pop(key, None)
        session.modified = True

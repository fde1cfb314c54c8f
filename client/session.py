"""Authentication state shared by every consumer of the client."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(frozen=True)
class AuthSnapshot:
    token: str | None = None
    user: dict[str, Any] | None = field(default=None)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "user": self.user}


Listener = Callable[[AuthSnapshot], None]


class AuthState:
    """Single source of truth for the bearer token and signed-in user.

    Consumers subscribe instead of polling. ``sync_from`` applies a change that
    originated elsewhere (another tab or process writing the shared store) and
    only notifies when the value differs from what is already held.
    """

    def __init__(self, token: str | None = None, user: dict[str, Any] | None = None):
        self._lock = threading.Lock()
        self._snapshot = AuthSnapshot(token=token, user=user)
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> AuthSnapshot:
        return self._snapshot

    @property
    def token(self) -> str | None:
        return self._snapshot.token

    @property
    def user(self) -> dict[str, Any] | None:
        return self._snapshot.user

    @property
    def is_authenticated(self) -> bool:
        return self._snapshot.is_authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set(self, token: str | None, user: dict[str, Any] | None = None) -> None:
        self._replace(AuthSnapshot(token=token, user=user))

    def update_user(self, user: dict[str, Any]) -> None:
        self._replace(AuthSnapshot(token=self._snapshot.token, user=user))

    def clear(self) -> None:
        self._replace(AuthSnapshot())

    def sync_from(self, payload: dict[str, Any] | None) -> bool:
        """Adopt state written by another tab. Returns True if anything changed."""

        payload = payload or {}
        return self._replace(AuthSnapshot(token=payload.get("token"), user=payload.get("user")))

    def _replace(self, snapshot: AuthSnapshot) -> bool:
        with self._lock:
            if snapshot == self._snapshot:
                return False
            self._snapshot = snapshot
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)
        return True

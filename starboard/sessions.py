"""In-memory workspaces backing each browser session."""

from __future__ import annotations

import logging
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, Tuple

from .modals import ModalController
from .store import RecordStore

logger = logging.getLogger("starboard.sessions")


@dataclass
class Workspace:
    """The store and modal state owned by a single browser session."""

    store: RecordStore
    modals: ModalController


@dataclass
class _Slot:
    workspace: Workspace
    last_seen: float


class WorkspaceRegistry:
    """Hand out one workspace per session token.

    Workspaces idle for longer than ``ttl`` are dropped, and once ``capacity``
    is reached the least recently used workspace makes room for a new one.
    """

    def __init__(
        self,
        store_factory: Callable[[], RecordStore],
        *,
        ttl: timedelta = timedelta(hours=8),
        capacity: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("Workspace capacity must be at least 1")
        self._store_factory = store_factory
        self._ttl = ttl
        self._capacity = capacity
        self._clock = clock
        self._slots: "OrderedDict[str, _Slot]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._slots

    def acquire(self, token: Optional[str]) -> Tuple[str, Workspace]:
        """Return the workspace for ``token``, starting a fresh one when it is unknown or idle too long."""

        now = self._clock()
        with self._lock:
            self._evict_idle(now)
            slot = self._slots.get(token) if token else None
            if slot is not None:
                slot.last_seen = now
                self._slots.move_to_end(token)
                return token, slot.workspace

            while len(self._slots) >= self._capacity:
                self._slots.popitem(last=False)
                logger.info("Evicted least recently used workspace to make room")

            token = secrets.token_urlsafe(32)
            store = self._store_factory()
            workspace = Workspace(store=store, modals=ModalController(store))
            self._slots[token] = _Slot(workspace=workspace, last_seen=now)
            return token, workspace

    def _evict_idle(self, now: float) -> None:
        limit = self._ttl.total_seconds()
        # Slots are ordered by last use, so the idle ones sit at the front.
        while self._slots:
            token, slot = next(iter(self._slots.items()))
            if now - slot.last_seen < limit:
                break
            del self._slots[token]


__all__ = ["Workspace", "WorkspaceRegistry"]

"""Thread-safe bookkeeping of connected clients and their nicknames."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

PORT = 6667
MAX_PENDING_CONNECTIONS = 5
BUFFER_SIZE = 1024
MAX_NICK_LENGTH = 32
MAX_CLIENTS = 100

log = logging.getLogger(__name__)


def _clip(nickname: str) -> str:
    return nickname[: MAX_NICK_LENGTH - 1]


@dataclass
class ClientInfo:
    """A registered client: its connection and current nickname."""

    conn: Any
    nickname: str


class ServerFullError(Exception):
    """Raised when every client slot is already in use."""


class ClientRegistry:
    """A fixed number of client slots guarded by a lock."""

    def __init__(self, capacity: int = MAX_CLIENTS) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._slots: list[ClientInfo | None] = [None] * capacity
        self._lock = threading.Lock()
        log.info("Clients array initialized. Max clients: %d", capacity)

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def add(self, conn: Any, nickname: str) -> int:
        """Store a client in the first free slot and return the slot index."""
        info = ClientInfo(conn, _clip(nickname))
        with self._lock:
            index = next(
                (i for i, slot in enumerate(self._slots) if slot is None), None
            )
            if index is not None:
                self._slots[index] = info
        if index is None:
            log.info("Failed to add client with nickname: %s. Max clients reached.", nickname)
            raise ServerFullError(f"no free slot for {nickname!r}")
        log.info("Client added with nickname: %s", info.nickname)
        return index

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._slots):
            raise IndexError(f"invalid client index: {index}")

    def remove(self, index: int) -> ClientInfo | None:
        """Free a slot; return what it held, or None if it was already free."""
        self._check_index(index)
        with self._lock:
            info = self._slots[index]
            self._slots[index] = None
        if info is None:
            log.warning(
                "Attempted to remove client from slot %d, but it was already inactive.",
                index,
            )
            return None
        log.info("Client (idx %d) with nickname %s removed.", index, info.nickname)
        return info

    def is_nickname_taken(self, nickname: str) -> bool:
        with self._lock:
            return any(
                slot is not None and slot.nickname == nickname for slot in self._slots
            )

    def rename(self, index: int, nickname: str) -> str:
        """Change the nickname held in an active slot and return the stored name."""
        self._check_index(index)
        with self._lock:
            info = self._slots[index]
            if info is None:
                raise KeyError(index)
            info.nickname = _clip(nickname)
            return info.nickname

    def active_clients(self) -> list[tuple[int, ClientInfo]]:
        """A snapshot of the active slots as (index, info) pairs."""
        with self._lock:
            return [
                (i, ClientInfo(slot.conn, slot.nickname))
                for i, slot in enumerate(self._slots)
                if slot is not None
            ]

    def __len__(self) -> int:
        with self._lock:
            return sum(slot is not None for slot in self._slots)
"""Gossip validation state: which voting rounds are still live."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

log = logging.getLogger(__name__)

MAX_LIVE_GOSSIP_ROUNDS = 3
REBROADCAST_AFTER = 60 * 5.0


class GossipValidator:
    """Keeps the most recent voting rounds live and remembers seen votes.

    Only the ``MAX_LIVE_GOSSIP_ROUNDS`` most recent noted rounds are kept;
    any round newer than all of them is also treated as live.
    """

    def __init__(self, now: Optional[float] = None) -> None:
        start = time.monotonic() if now is None else now
        self._known_votes: dict[int, set[bytes]] = {}
        self._lock = threading.Lock()
        self._next_rebroadcast = start + REBROADCAST_AFTER

    def note_round(self, round: int) -> None:
        """Keep ``round`` live, dropping the oldest round beyond the limit."""
        log.debug("About to note round #%s", round)
        with self._lock:
            self._known_votes.setdefault(round, set())
            if len(self._known_votes) > MAX_LIVE_GOSSIP_ROUNDS:
                del self._known_votes[min(self._known_votes)]

    def is_live(self, round: int) -> bool:
        """Return True if messages for ``round`` should still flow."""
        with self._lock:
            if not self._known_votes:
                return True
            return round in self._known_votes or round > max(self._known_votes)

    def is_known(self, round: int, message_hash: bytes) -> bool:
        """Return True if the message was already seen for ``round``."""
        with self._lock:
            return message_hash in self._known_votes.get(round, ())

    def add_known(self, round: int, message_hash: bytes) -> None:
        """Remember a message for ``round``; ignored if the round is not noted."""
        with self._lock:
            known = self._known_votes.get(round)
            if known is not None:
                known.add(bytes(message_hash))

    def live_rounds(self) -> list[int]:
        """Return the noted rounds in ascending order."""
        with self._lock:
            return sorted(self._known_votes)

    def should_rebroadcast(self, now: Optional[float] = None) -> bool:
        """Return True when the rebroadcast timeout has passed, and restart it."""
        current = time.monotonic() if now is None else now
        with self._lock:
            if current >= self._next_rebroadcast:
                self._next_rebroadcast = current + REBROADCAST_AFTER
                return True
            return False
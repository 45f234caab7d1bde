"""Fan-out of signed commitments to any number of subscribers."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterator
from typing import Any, Optional


class Subscription:
    """The receiving end of one subscription to signed commitments."""

    def __init__(self) -> None:
        self._items: deque[Any] = deque()
        self._closed = False
        self._ready = threading.Condition()

    @property
    def closed(self) -> bool:
        """True once the subscription has been closed."""
        with self._ready:
            return self._closed

    def close(self) -> None:
        """Stop receiving; the sender drops the subscription on its next notify."""
        with self._ready:
            self._closed = True
            self._ready.notify_all()

    def _deliver(self, item: Any) -> bool:
        with self._ready:
            if self._closed:
                return False
            self._items.append(item)
            self._ready.notify()
            return True

    def receive(self, timeout: Optional[float] = None) -> Any:
        """Return the next commitment, waiting up to ``timeout`` seconds.

        Raises TimeoutError if nothing arrives in time.
        """
        with self._ready:
            if not self._ready.wait_for(lambda: self._items or self._closed, timeout):
                raise TimeoutError("no signed commitment received")
            if not self._items:
                raise TimeoutError("subscription is closed")
            return self._items.popleft()

    def __iter__(self) -> Iterator[Any]:
        """Yield the commitments received so far, without waiting."""
        while True:
            with self._ready:
                if not self._items:
                    return
                item = self._items.popleft()
            yield item

    def __len__(self) -> int:
        with self._ready:
            return len(self._items)


class _Subscribers:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.items: list[Subscription] = []


class SignedCommitmentSender:
    """Sends signed commitments to every live subscription."""

    def __init__(self, subscribers: _Subscribers) -> None:
        self._subscribers = subscribers

    def notify(self, signed_commitment: Any) -> None:
        """Deliver ``signed_commitment`` to all open subscriptions."""
        shared = self._subscribers
        with shared.lock:
            shared.items = [sub for sub in shared.items if not sub.closed]
            if shared.items:
                shared.items = [sub for sub in shared.items if sub._deliver(signed_commitment)]


class SignedCommitmentStream:
    """Hands out new subscriptions that share one sender."""

    def __init__(self, subscribers: _Subscribers) -> None:
        self._subscribers = subscribers

    def subscribe(self) -> Subscription:
        """Open a subscription that receives every later commitment."""
        subscription = Subscription()
        with self._subscribers.lock:
            self._subscribers.items.append(subscription)
        return subscription


def channel() -> tuple[SignedCommitmentSender, SignedCommitmentStream]:
    """Create a connected sender and stream of signed commitments."""
    subscribers = _Subscribers()
    return SignedCommitmentSender(subscribers), SignedCommitmentStream(subscribers)
"""Active subscriptions and the mapping between local and server IDs.

A subscription's local ID is the Keccak-256 hash of its params, so it stays
the same across reconnections while the server-assigned ID may change.
"""

from __future__ import annotations

import weakref
from collections import deque
from functools import total_ordering
from typing import Deque, Dict, Iterator, Optional, Tuple

from rpcwire.notification import EthNotification
from rpcwire.request import SerializedRequest

NOTIFICATION_CAPACITY = 16
"""Notifications a receiver buffers before the oldest are dropped."""


class NotificationReceiver:
    """Receives notifications broadcast after it subscribed.

    Holds at most NOTIFICATION_CAPACITY items; when full the oldest is
    dropped and counted in ``lagged``.
    """

    def __init__(self, capacity: int = NOTIFICATION_CAPACITY) -> None:
        self._items: Deque[str] = deque()
        self._capacity = capacity
        self.lagged = 0
        self.closed = False

    def _push(self, item: str) -> None:
        if len(self._items) >= self._capacity:
            self._items.popleft()
            self.lagged += 1
        self._items.append(item)

    def try_recv(self) -> Optional[str]:
        """The oldest buffered notification, or None when there is none."""
        return self._items.popleft() if self._items else None

    def close(self) -> None:
        """Stop receiving notifications."""
        self.closed = True
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        while self._items:
            yield self._items.popleft()


@total_ordering
class ActiveSubscription:
    """A subscription request and the channel its notifications go out on.

    Subscriptions compare, hash and sort by their local ID.
    """

    def __init__(self, request: SerializedRequest) -> None:
        self.request = request
        self.local_id: bytes = request.params_hash()
        self._receivers: "weakref.WeakSet[NotificationReceiver]" = weakref.WeakSet()

    @property
    def receiver_count(self) -> int:
        return sum(1 for receiver in self._receivers if not receiver.closed)

    def subscribe(self) -> NotificationReceiver:
        """A new receiver for notifications sent from now on."""
        receiver = NotificationReceiver()
        self._receivers.add(receiver)
        return receiver

    def notify(self, notification: str) -> None:
        """Broadcast a notification; it is dropped when nobody listens."""
        for receiver in list(self._receivers):
            if not receiver.closed:
                receiver._push(notification)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActiveSubscription):
            return NotImplemented
        return self.local_id == other.local_id

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ActiveSubscription):
            return NotImplemented
        return self.local_id < other.local_id

    def __hash__(self) -> int:
        return hash(self.local_id)

    def __repr__(self) -> str:
        return (
            f"ActiveSubscription(req={self.request!r}, "
            f"tx='Channel status: {self.receiver_count} subscribers')"
        )


class SubscriptionManager:
    """Subscriptions by local ID, and the current server ID of each."""

    def __init__(self) -> None:
        self._subs: Dict[bytes, ActiveSubscription] = {}
        self._server_by_local: Dict[bytes, int] = {}
        self._local_by_server: Dict[int, bytes] = {}

    def __len__(self) -> int:
        return len(self._subs)

    def __iter__(self) -> Iterator[Tuple[bytes, ActiveSubscription]]:
        return iter(sorted(self._subs.items(), key=lambda item: item[0]))

    def _link(self, local_id: bytes, server_id: int) -> None:
        old_server = self._server_by_local.pop(local_id, None)
        if old_server is not None:
            self._local_by_server.pop(old_server, None)
        old_local = self._local_by_server.pop(server_id, None)
        if old_local is not None:
            self._server_by_local.pop(old_local, None)
        self._server_by_local[local_id] = server_id
        self._local_by_server[server_id] = local_id

    def _insert(self, request: SerializedRequest, server_id: int) -> NotificationReceiver:
        sub = ActiveSubscription(request)
        receiver = sub.subscribe()
        self._link(sub.local_id, server_id)
        self._subs[sub.local_id] = sub
        return receiver

    def upsert(self, request: SerializedRequest, server_id: int) -> NotificationReceiver:
        """Add a subscription, or point a known one at a new server ID."""
        local_id = request.params_hash()
        if local_id in self._server_by_local:
            self._link(local_id, server_id)
            receiver = self.get_rx(local_id)
            if receiver is not None:
                return receiver
        return self._insert(request, server_id)

    def local_id_for(self, server_id: int) -> Optional[bytes]:
        """The local ID currently aliased by ``server_id``."""
        return self._local_by_server.get(server_id)

    def drop_server_ids(self) -> None:
        """Forget every server ID, keeping the subscriptions."""
        self._server_by_local.clear()
        self._local_by_server.clear()

    def remove_sub(self, local_id: bytes) -> None:
        """Forget a subscription and its server ID."""
        self._subs.pop(local_id, None)
        server_id = self._server_by_local.pop(local_id, None)
        if server_id is not None:
            self._local_by_server.pop(server_id, None)

    def notify(self, notification: EthNotification) -> None:
        """Pass a notification to its subscription; unknown ones are dropped."""
        local_id = self.local_id_for(notification.subscription)
        if local_id is None:
            return
        sub = self._subs.get(local_id)
        if sub is not None:
            sub.notify(notification.result)

    def get_rx(self, local_id: bytes) -> Optional[NotificationReceiver]:
        """A new receiver for a subscription, or None when it is unknown."""
        sub = self._subs.get(local_id)
        return sub.subscribe() if sub is not None else None

    def __repr__(self) -> str:
        return f"SubscriptionManager({len(self._subs)} subscriptions)"
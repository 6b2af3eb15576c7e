"""The two ends of a connection between a pub/sub frontend and its backend."""

from __future__ import annotations

import asyncio
from typing import Optional, Tuple, Union

from rpcwire.notification import EthNotification
from rpcwire.response import Response

PubSubItem = Union[Response, EthNotification]

_CLOSED = object()


class ConnectionClosed(Exception):
    """The other end of the connection has shut down."""


class ConnectionHandle:
    """The frontend's end: sends raw requests, receives pub/sub items.

    ``to_socket`` carries raw JSON requests to the backend, ``from_socket``
    carries items back, and ``error`` is set when the backend fails.
    """

    def __init__(
        self,
        to_socket: asyncio.Queue,
        from_socket: asyncio.Queue,
        error: asyncio.Event,
        shutdown_event: asyncio.Event,
    ) -> None:
        self.to_socket = to_socket
        self.from_socket = from_socket
        self.error = error
        self._shutdown = shutdown_event

    def shutdown(self) -> None:
        """Ask the backend to stop; it receives no further requests."""
        if not self._shutdown.is_set():
            self._shutdown.set()
            self.to_socket.put_nowait(_CLOSED)

    def __repr__(self) -> str:
        state = "shut down" if self._shutdown.is_set() else "open"
        return f"ConnectionHandle({state})"


class ConnectionInterface:
    """The backend's end of a connection."""

    def __init__(
        self,
        from_frontend: asyncio.Queue,
        to_frontend: asyncio.Queue,
        error: asyncio.Event,
        shutdown_event: asyncio.Event,
    ) -> None:
        self._from_frontend = from_frontend
        self._to_frontend = to_frontend
        self._error = error
        self._shutdown = shutdown_event

    def send_to_frontend(self, item: PubSubItem) -> None:
        """Pass an item to the frontend; raises ConnectionClosed after shutdown."""
        if self._shutdown.is_set():
            raise ConnectionClosed("the frontend has shut down")
        self._to_frontend.put_nowait(item)

    async def recv_from_frontend(self) -> Optional[str]:
        """The next raw request, or None once the frontend has shut down."""
        if self._shutdown.is_set():
            return None
        item = await self._from_frontend.get()
        if item is _CLOSED:
            self._from_frontend.put_nowait(_CLOSED)
            return None
        return item

    def close_with_error(self) -> None:
        """Tell the frontend that the backend failed."""
        self._error.set()

    def __repr__(self) -> str:
        state = "shut down" if self._shutdown.is_set() else "open"
        return f"ConnectionInterface({state})"


def new_connection() -> Tuple[ConnectionHandle, ConnectionInterface]:
    """Create a connected handle and interface."""
    to_socket: asyncio.Queue = asyncio.Queue()
    from_socket: asyncio.Queue = asyncio.Queue()
    error = asyncio.Event()
    shutdown_event = asyncio.Event()
    handle = ConnectionHandle(to_socket, from_socket, error, shutdown_event)
    interface = ConnectionInterface(to_socket, from_socket, error, shutdown_event)
    return handle, interface
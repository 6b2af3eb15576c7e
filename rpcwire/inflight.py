"""Requests waiting for their response."""

from __future__ import annotations

import json
import re
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from rpcwire.errors import DeserializationError
from rpcwire.ids import Id
from rpcwire.payload import Success
from rpcwire.request import SerializedRequest
from rpcwire.response import Response

_SUBSCRIBE = "eth_subscribe"
_U256_LIMIT = 1 << 256
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")
_DEC = re.compile(r"[0-9]+")


def _parse_u256(raw: str) -> int:
    value = json.loads(raw)
    if isinstance(value, bool):
        raise ValueError(f"invalid subscription id: {value!r}")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _HEX.fullmatch(value):
        number = int(value[2:], 16)
    elif isinstance(value, str) and _DEC.fullmatch(value):
        number = int(value, 10)
    else:
        raise ValueError(f"invalid subscription id: {value!r}")
    if not 0 <= number < _U256_LIMIT:
        raise ValueError(f"subscription id out of range: {value!r}")
    return number


@dataclass(eq=False)
class InFlight:
    """A sent request and the future its response is delivered to."""

    request: SerializedRequest
    tx: Future = field(default_factory=Future)

    @property
    def method(self) -> str:
        return self.request.method

    def _deliver(self, response: Response) -> None:
        if not self.tx.done():
            self.tx.set_result(response)

    def _fail(self, error: BaseException) -> None:
        if not self.tx.done():
            self.tx.set_exception(error)

    def fulfill(self, response: Response) -> Optional[Tuple[int, "InFlight"]]:
        """Deliver ``response`` to the waiter.

        For a successful subscription request nothing is delivered; the
        server's subscription ID and this request are returned instead.
        """
        if self.method == _SUBSCRIBE and isinstance(response.payload, Success):
            raw = response.payload.payload
            try:
                alias = _parse_u256(raw)
            except ValueError as exc:
                self._fail(DeserializationError(exc, raw))
                return None
            return alias, self
        self._deliver(response)
        return None

    def __repr__(self) -> str:
        status = "closed" if self.tx.cancelled() else "ok"
        return f"InFlight(req={self.request!r}, tx='Channel status: {status}')"


class RequestManager:
    """In-flight requests keyed by their ID, iterated in ID order."""

    def __init__(self) -> None:
        self._reqs: Dict[Id, InFlight] = {}

    def __len__(self) -> int:
        return len(self._reqs)

    def __iter__(self) -> Iterator[Tuple[Id, InFlight]]:
        return iter(sorted(self._reqs.items(), key=lambda item: item[0]))

    def insert(self, in_flight: InFlight) -> None:
        """Track a request; a request with the same ID is replaced."""
        self._reqs[in_flight.request.id] = in_flight

    def handle_response(self, response: Response) -> Optional[Tuple[int, InFlight]]:
        """Fulfill the matching request, if any.

        Returns the server subscription ID and the request when the response
        opened a new subscription.
        """
        in_flight = self._reqs.pop(response.id, None)
        if in_flight is None:
            return None
        return in_flight.fulfill(response)

    def __repr__(self) -> str:
        return f"RequestManager({len(self._reqs)} in flight)"
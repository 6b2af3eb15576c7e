"""Single requests or responses, or batches of them."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any, Iterable, Iterator, List, Set, Tuple, Union

from rpcwire.ids import Id
from rpcwire.request import SerializedRequest
from rpcwire.response import Response

_SUBSCRIBE = "eth_subscribe"


class _JsonObject(dict):
    """A decoded JSON object that remembers which keys appeared more than once."""

    def __init__(self, pairs: Iterable[Tuple[str, Any]]) -> None:
        pairs = list(pairs)
        super().__init__(pairs)
        counts = Counter(key for key, _ in pairs)
        self.duplicates = frozenset(key for key, count in counts.items() if count > 1)


class RequestPacket:
    """A single serialized request, or a batch of them.

    Built from one SerializedRequest it is a single request; built from an
    iterable (or nothing) it is a batch.
    """

    def __init__(
        self, requests: Union[SerializedRequest, Iterable[SerializedRequest]] = ()
    ) -> None:
        if isinstance(requests, SerializedRequest):
            self._requests: List[SerializedRequest] = [requests]
            self._batch = False
        else:
            self._requests = list(requests)
            self._batch = True

    @property
    def is_batch(self) -> bool:
        return self._batch

    @property
    def requests(self) -> Tuple[SerializedRequest, ...]:
        return tuple(self._requests)

    def __len__(self) -> int:
        return len(self._requests)

    def __iter__(self) -> Iterator[SerializedRequest]:
        return iter(self._requests)

    def __repr__(self) -> str:
        kind = "batch" if self._batch else "single"
        return f"RequestPacket({kind}, {self._requests!r})"

    def push(self, request: SerializedRequest) -> None:
        """Add a request; a single-request packet becomes a batch."""
        self._requests.append(request)
        self._batch = True

    def serialize(self) -> str:
        """The packet as JSON text: the request itself, or an array of them."""
        if not self._batch:
            return self._requests[0].serialized
        return "[" + ",".join(req.serialized for req in self._requests) + "]"

    def subscription_request_ids(self) -> Set[Id]:
        """IDs of all ``eth_subscribe`` requests in the packet."""
        return {req.id for req in self._requests if req.method == _SUBSCRIBE}


class ResponsePacket:
    """A single response, or a batch of them.

    Built from one Response it is a single response; built from an iterable
    it is a batch.
    """

    def __init__(self, responses: Union[Response, Iterable[Response]] = ()) -> None:
        if isinstance(responses, Response):
            self._responses: Tuple[Response, ...] = (responses,)
            self._batch = False
        else:
            self._responses = tuple(responses)
            self._batch = True

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "ResponsePacket":
        """Parse a single response object or an array of them.

        An array always gives a batch. Raises ValueError on anything else.
        """
        obj = json.loads(text, object_pairs_hook=_JsonObject)
        if isinstance(obj, list):
            return cls(Response.from_obj(item) for item in obj)
        if isinstance(obj, dict):
            return cls(Response.from_obj(obj))
        raise ValueError("expected a single response or a batch of responses")

    @classmethod
    def from_responses(cls, responses: Iterable[Response]) -> "ResponsePacket":
        """A single packet for exactly one response, a batch otherwise."""
        collected = list(responses)
        if len(collected) == 1:
            return cls(collected[0])
        return cls(collected)

    @property
    def is_batch(self) -> bool:
        return self._batch

    @property
    def responses(self) -> Tuple[Response, ...]:
        return self._responses

    def __len__(self) -> int:
        return len(self._responses)

    def __iter__(self) -> Iterator[Response]:
        return iter(self._responses)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResponsePacket):
            return NotImplemented
        return self._batch == other._batch and self._responses == other._responses

    def __repr__(self) -> str:
        kind = "batch" if self._batch else "single"
        return f"ResponsePacket({kind}, {list(self._responses)!r})"

    def responses_by_ids(self, ids: Iterable[Id]) -> List[Response]:
        """Responses whose ID is in ``ids``, in packet order, duplicates included."""
        wanted = set(ids)
        return [resp for resp in self._responses if resp.id in wanted]
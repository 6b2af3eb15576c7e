"""Items received over an Ethereum pub/sub connection.

Ethereum pub/sub uses a non-standard notification format: an item is either
a JSON-RPC response (it carries an ``id``) or a notification carrying a
``subscription`` and a ``result``.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from rpcwire.ids import Id
from rpcwire.payload import ErrorPayload, Failure, Success
from rpcwire.response import Response

_FIELDS = ("id", "subscription", "result", "error")
_U256_LIMIT = 1 << 256
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")
_DEC = re.compile(r"[0-9]+")


class _JsonObject(dict):
    """A decoded JSON object that remembers which keys appeared more than once."""

    def __init__(self, pairs: Iterable[Tuple[str, Any]]) -> None:
        pairs = list(pairs)
        super().__init__(pairs)
        counts = Counter(key for key, _ in pairs)
        self.duplicates = frozenset(key for key, count in counts.items() if count > 1)


def _to_raw(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _parse_u256(value: Any) -> int:
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


@dataclass(frozen=True)
class EthNotification:
    """An Ethereum-style subscription notification.

    ``result`` is the raw JSON text of the notification payload.
    """

    subscription: int
    result: Any


def parse_pubsub_item(text: Union[str, bytes]) -> Union[Response, EthNotification]:
    """Parse a pub/sub item into a Response or an EthNotification.

    Raises ValueError when the text is neither.
    """
    obj = json.loads(text, object_pairs_hook=_JsonObject)
    if not isinstance(obj, dict):
        raise ValueError("expected a JSON-RPC response or an Ethereum-style notification")
    for field in _FIELDS:
        if field in obj.duplicates:
            raise ValueError(f"duplicate field `{field}`")

    item_id = Id.from_json(obj["id"]) if "id" in obj else None
    subscription = _parse_u256(obj["subscription"]) if "subscription" in obj else None
    result = _to_raw(obj["result"]) if "result" in obj else None
    error = ErrorPayload.from_obj(obj["error"]) if "error" in obj else None

    if item_id is not None:
        if subscription is not None:
            raise ValueError("unexpected subscription in pubsub item")
        if error is not None:
            return Response(item_id, Failure(error))
        if result is not None:
            return Response(item_id, Success(result))
        raise ValueError("missing `result` or `error` field in response")

    if error is not None:
        raise ValueError("unexpected `error` field in subscription notification")
    if subscription is None:
        raise ValueError("missing field `subscription`")
    if result is None:
        raise ValueError("missing field `result`")
    return EthNotification(subscription=subscription, result=result)
"""JSON-RPC 2.0 response objects."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from rpcwire.ids import Id
from rpcwire.payload import ErrorPayload, Failure, Kind, ResponsePayload, Success

_FIELDS = ("result", "error", "id")


class _JsonObject(dict):
    """A decoded JSON object that remembers which keys appeared more than once."""

    def __init__(self, pairs: Iterable[Tuple[str, Any]]) -> None:
        pairs = list(pairs)
        super().__init__(pairs)
        counts = Counter(key for key, _ in pairs)
        self.duplicates = frozenset(key for key, count in counts.items() if count > 1)


def _to_raw(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class Response:
    """A response carrying either a result or an error, matched to a request by ``id``."""

    id: Id
    payload: ResponsePayload

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "Response":
        """Parse a response from JSON text; the result stays raw JSON text."""
        return cls.from_obj(json.loads(text, object_pairs_hook=_JsonObject))

    @classmethod
    def from_obj(cls, obj: Any) -> "Response":
        """Build a response from a decoded JSON object.

        Raises ValueError when the object is not a valid response.
        """
        if not isinstance(obj, dict):
            raise ValueError(
                "expected a JSON-RPC response object, consisting of either a result or an error"
            )
        for field in _FIELDS:
            if field in getattr(obj, "duplicates", ()):
                raise ValueError(f"duplicate field `{field}`")

        response_id = Id.from_json(obj["id"]) if "id" in obj else Id(None)
        has_result = "result" in obj
        has_error = "error" in obj

        if has_result and has_error:
            raise ValueError("result and error are mutually exclusive")
        if has_result:
            return cls(response_id, Success(_to_raw(obj["result"])))
        if has_error:
            return cls(response_id, Failure(ErrorPayload.from_obj(obj["error"])))
        raise ValueError("missing field `result or error`")

    def is_success(self) -> bool:
        return self.payload.is_success()

    def is_error(self) -> bool:
        return self.payload.is_error()

    def try_success_as(self, kind: Kind) -> Any:
        """Decode the success payload with ``kind``; None for an error response."""
        return self.payload.try_success_as(kind)

    def try_error_as(self, kind: Kind) -> Any:
        """Decode the error data with ``kind``; None for a success or no data."""
        return self.payload.try_error_as(kind)

    def deser_success(self, kind: Kind) -> "Response":
        """Return a copy with the success payload decoded.

        Error responses are returned unchanged; raises ValueError when a
        success payload does not decode.
        """
        return Response(self.id, self.payload.deserialize_success(kind))

    def deser_err(self, kind: Kind) -> "Response":
        """Return a copy with the error data decoded.

        Success responses are returned unchanged; raises ValueError when the
        error data is missing or does not decode.
        """
        return Response(self.id, self.payload.deserialize_error(kind))
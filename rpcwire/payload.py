"""JSON-RPC response payloads: success values and error objects.

Raw JSON values are held as their JSON text until decoded with a ``kind``,
a callable that turns a decoded JSON value into the wanted object and raises
TypeError, KeyError or ValueError when the value does not fit.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")
Kind = Callable[[Any], T]

_I64_MIN = -(1 << 63)
_I64_MAX = (1 << 63) - 1


def _to_raw(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _decode(raw: str, kind: Kind) -> Any:
    try:
        return kind(json.loads(raw))
    except (TypeError, KeyError, ValueError) as exc:
        raise ValueError(f"cannot decode {raw!r}: {exc}") from exc


@dataclass(frozen=True)
class ErrorPayload:
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str = ""
    data: Any = None

    @classmethod
    def from_obj(cls, obj: Any) -> "ErrorPayload":
        """Build from a decoded JSON object; ``data`` is kept as raw JSON text."""
        if not isinstance(obj, dict):
            raise ValueError("expected a JSON-RPC2.0 error object")
        if "code" not in obj:
            raise ValueError("missing field `code`")
        code = obj["code"]
        if isinstance(code, bool) or not isinstance(code, int) or not _I64_MIN <= code <= _I64_MAX:
            raise ValueError(f"invalid error code: {code!r}")
        message = obj.get("message", "")
        if not isinstance(message, str):
            raise ValueError(f"invalid error message: {message!r}")
        data = _to_raw(obj["data"]) if "data" in obj else None
        return cls(code=code, message=message, data=data)

    def try_data_as(self, kind: Kind) -> Any:
        """Decode the raw ``data`` with ``kind``; None when there is no data.

        Raises ValueError when the data does not decode.
        """
        if self.data is None:
            return None
        return _decode(self.data, kind)

    def deser_data(self, kind: Kind) -> "ErrorPayload":
        """Return a copy whose ``data`` is decoded with ``kind``.

        Raises ValueError when there is no data or it does not decode.
        """
        if self.data is None:
            raise ValueError("error payload has no data")
        return replace(self, data=_decode(self.data, kind))

    def __str__(self) -> str:
        contains = "true" if self.data is not None else "false"
        return (
            f'ErrorPayload code {self.code}, message: "{self.message}", '
            f"contains payload: {contains}"
        )


class ResponsePayload(ABC):
    """Either a successful result or an error object."""

    @abstractmethod
    def is_success(self) -> bool: ...

    def is_error(self) -> bool:
        return not self.is_success()

    def as_success(self) -> Any:
        """The success value, or None for a failure."""
        return None

    def as_error(self) -> Optional[ErrorPayload]:
        """The error object, or None for a success."""
        return None

    def try_success_as(self, kind: Kind) -> Any:
        """Decode a success value with ``kind``; None for a failure."""
        return None

    def try_error_as(self, kind: Kind) -> Any:
        """Decode the error's data with ``kind``; None for a success or no data."""
        return None

    @abstractmethod
    def deserialize_success(self, kind: Kind) -> "ResponsePayload": ...

    @abstractmethod
    def deserialize_error(self, kind: Kind) -> "ResponsePayload": ...


@dataclass(frozen=True)
class Success(ResponsePayload):
    """A successful result; ``payload`` is raw JSON text until decoded."""

    payload: Any

    def is_success(self) -> bool:
        return True

    def as_success(self) -> Any:
        return self.payload

    def try_success_as(self, kind: Kind) -> Any:
        return _decode(self.payload, kind)

    def deserialize_success(self, kind: Kind) -> "Success":
        """Return a success with the payload decoded; ValueError if it does not decode."""
        return Success(_decode(self.payload, kind))

    def deserialize_error(self, kind: Kind) -> "Success":
        return self


@dataclass(frozen=True)
class Failure(ResponsePayload):
    """An error response."""

    error: ErrorPayload

    def is_success(self) -> bool:
        return False

    def as_error(self) -> ErrorPayload:
        return self.error

    def try_error_as(self, kind: Kind) -> Any:
        return self.error.try_data_as(kind)

    def deserialize_success(self, kind: Kind) -> "Failure":
        return self

    def deserialize_error(self, kind: Kind) -> "Failure":
        """Return a failure with the error data decoded; ValueError if it cannot be."""
        return Failure(self.error.deser_data(kind))
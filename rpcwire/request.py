"""JSON-RPC 2.0 request objects and their serialized form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from Crypto.Hash import keccak

from rpcwire.errors import SerializationError
from rpcwire.ids import Id
from rpcwire.payload import Kind


class _RawJson(str):
    """JSON text carried without being decoded."""


def _dump(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def _keccak256(data: bytes) -> bytes:
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


@dataclass(frozen=True)
class RequestMeta:
    """The method name and ID of a request."""

    method: str
    id: Id


@dataclass(frozen=True)
class Request:
    """A JSON-RPC 2.0 request.

    ``params`` of None means the request has no parameters and the field is
    left out of the encoded request.
    """

    meta: RequestMeta
    params: Any = None

    def to_obj(self) -> dict:
        """Return the request as a JSON-ready dict, in wire field order."""
        obj = {"method": self.meta.method}
        if self.params is not None:
            if isinstance(self.params, _RawJson):
                try:
                    obj["params"] = json.loads(self.params)
                except ValueError as exc:
                    raise SerializationError(exc) from exc
            else:
                obj["params"] = self.params
        obj["id"] = self.meta.id.to_json()
        obj["jsonrpc"] = "2.0"
        return obj

    def box_params(self) -> "Request":
        """Return a copy whose params are encoded as raw JSON text.

        Raises SerializationError when the params cannot be encoded.
        """
        if isinstance(self.params, _RawJson):
            return self
        try:
            raw = _RawJson(_dump(self.params))
        except (TypeError, ValueError) as exc:
            raise SerializationError(exc) from exc
        return Request(self.meta, raw)

    def serialize(self) -> "SerializedRequest":
        """Encode the whole request, keeping its ID and method at hand.

        Raises SerializationError when it cannot be encoded.
        """
        obj = self.to_obj()
        try:
            text = _dump(obj)
        except (TypeError, ValueError) as exc:
            raise SerializationError(exc) from exc
        return SerializedRequest(self.meta, text)

    def try_params_as(self, kind: Kind) -> Any:
        """Decode the params with ``kind``; raises ValueError if they do not fit."""
        if isinstance(self.params, _RawJson):
            text = str(self.params)
        else:
            try:
                text = _dump(self.params)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"cannot encode params: {exc}") from exc
        try:
            return kind(json.loads(text))
        except (TypeError, KeyError, ValueError) as exc:
            raise ValueError(f"cannot decode params {text!r}: {exc}") from exc


@dataclass(frozen=True)
class SerializedRequest:
    """A fully encoded request whose ID and method are kept alongside."""

    meta: RequestMeta
    request: str

    @property
    def id(self) -> Id:
        return self.meta.id

    @property
    def method(self) -> str:
        return self.meta.method

    @property
    def serialized(self) -> str:
        """The encoded request text."""
        return self.request

    def decompose(self) -> Tuple[RequestMeta, str]:
        """Split into the metadata and the encoded text."""
        return self.meta, self.request

    def params(self) -> Optional[str]:
        """The params as compact JSON text, or None when absent or null."""
        obj = json.loads(self.request)
        if not isinstance(obj, dict) or obj.get("params") is None:
            return None
        return _dump(obj["params"])

    def params_hash(self) -> bytes:
        """Keccak-256 of the params text, or of the empty string without params."""
        params = self.params()
        return _keccak256(b"" if params is None else params.encode())
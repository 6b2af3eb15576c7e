"""Errors raised while performing a JSON-RPC exchange."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rpcwire.payload import ErrorPayload


def _chain(error: Exception, cause: object) -> None:
    if isinstance(cause, BaseException):
        error.__cause__ = cause


class RpcError(Exception):
    """Base class for every failure of a JSON-RPC call."""


class ErrorResponse(RpcError):
    """The server answered with an error object."""

    def __init__(self, payload: "ErrorPayload") -> None:
        super().__init__(f"Server returned an error response: {payload}")
        self.payload = payload


class SerializationError(RpcError):
    """A request could not be encoded as JSON."""

    def __init__(self, err: object) -> None:
        super().__init__(f"Serialization error: {err}")
        self.err = err
        _chain(self, err)


class DeserializationError(RpcError):
    """A response could not be decoded; ``text`` holds the offending JSON."""

    def __init__(self, err: object, text: str) -> None:
        super().__init__(f"Deserialization error: {err}")
        self.err = err
        self.text = str(text)
        _chain(self, err)


class TransportError(RpcError):
    """The transport failed while communicating."""

    def __init__(self, err: object) -> None:
        super().__init__(f"Error during transport: {err}")
        self.err = err
        _chain(self, err)
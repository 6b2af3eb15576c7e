"""Turning responses and transport outcomes into values or raised errors."""

from __future__ import annotations

import json
from typing import Any, Union

from rpcwire.errors import DeserializationError, ErrorResponse, TransportError
from rpcwire.payload import Kind
from rpcwire.response import Response


def transform_response(response: Response) -> Any:
    """Return the success payload of ``response``, discarding its ID.

    Raises ErrorResponse when the server answered with an error object.
    """
    error = response.payload.as_error()
    if error is not None:
        raise ErrorResponse(error)
    return response.payload.as_success()


def transform_result(outcome: Union[Response, BaseException]) -> Any:
    """Like transform_response, but ``outcome`` may be a transport failure.

    An exception passed as ``outcome`` is raised as a TransportError.
    """
    if isinstance(outcome, BaseException):
        raise TransportError(outcome) from outcome
    return transform_response(outcome)


def try_deserialize_ok(raw: Union[str, bytes], kind: Kind) -> Any:
    """Decode a raw JSON success value with ``kind``.

    Raises DeserializationError, carrying the text, when it does not decode.
    """
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return kind(json.loads(text))
    except (TypeError, KeyError, ValueError) as exc:
        raise DeserializationError(exc, text) from exc
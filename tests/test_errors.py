import json

import pytest

from rpcwire.errors import (
    DeserializationError,
    ErrorResponse,
    RpcError,
    SerializationError,
    TransportError,
)
from rpcwire.payload import ErrorPayload


def test_error_response_carries_payload():
    payload = ErrorPayload(code=-32000, message="b")
    with pytest.raises(RpcError) as info:
        raise ErrorResponse(payload)
    assert info.value.payload is payload
    assert str(info.value) == f"Server returned an error response: {payload}"


def test_serialization_error_chains_cause():
    cause = TypeError("boom")
    error = SerializationError(cause)
    assert error.err is cause
    assert error.__cause__ is cause
    assert str(error) == "Serialization error: boom"


def test_deserialization_error_keeps_text():
    text = '{"not": valid'
    try:
        json.loads(text)
    except ValueError as exc:
        error = DeserializationError(exc, text)
        cause = exc
    assert error.text == text
    assert error.err is cause
    assert error.__cause__ is cause
    assert str(error) == f"Deserialization error: {cause}"


def test_transport_error_accepts_non_exception():
    error = TransportError("backend gone")
    assert error.err == "backend gone"
    assert error.__cause__ is None
    assert str(error) == "Error during transport: backend gone"


def test_transport_error_chains_exception():
    cause = ConnectionError("refused")
    error = TransportError(cause)
    assert error.__cause__ is cause


@pytest.mark.parametrize(
    ("error", "prefix"),
    [
        (ErrorResponse(ErrorPayload(code=1)), "Server returned an error response: "),
        (SerializationError("x"), "Serialization error: "),
        (DeserializationError("x", "y"), "Deserialization error: "),
        (TransportError("x"), "Error during transport: "),
    ],
)
def test_all_errors_are_rpc_errors(error, prefix):
    with pytest.raises(RpcError) as info:
        raise error
    assert info.value is error
    assert str(info.value).startswith(prefix)
# rpcwire

Data types and bookkeeping for building JSON-RPC 2.0 clients against
Ethereum-style nodes. The package models the messages, matches responses to
requests, tracks pubsub subscriptions and estimates EIP-1559 fees.

## Raw JSON and `kind`

Result values and error data are kept as raw JSON text until you decode
them. Every decoding method takes a `kind`: a callable that receives the
decoded JSON value and returns the object you want. It should raise
`TypeError`, `KeyError` or `ValueError` when the value does not fit. Those
errors come back as `ValueError`, or as `DeserializationError` from
`try_deserialize_ok`.

## Modules

- `rpcwire.ids.Id` is a request ID. Its value is an unsigned 64-bit number, a
  string or `None`.
  - IDs are hashable and ordered: numbers first, then strings, then null.
  - `Id.from_json` and `to_json` convert to and from JSON values.
- `rpcwire.request` holds `RequestMeta` (method and ID), `Request` and
  `SerializedRequest`.
  - `Request.serialize()` encodes the whole request and keeps its ID and
    method alongside.
  - `Request.box_params()` encodes only the params.
  - A request whose `params` is `None` is encoded without a `params` field.
  - `SerializedRequest.params_hash()` returns the Keccak-256 digest of the
    params text, or of the empty string when there are no params.
- `rpcwire.payload` holds `ErrorPayload` (code, message, data) and the two
  kinds of `ResponsePayload`: `Success` and `Failure`.
- `rpcwire.response.Response` is a response built with `Response.from_json` or
  `Response.from_obj`.
  - A missing `id` becomes a null ID.
  - A response with both `result` and `error`, or with neither, raises
    `ValueError`. So does a duplicated field.
- `rpcwire.packet` holds `RequestPacket` and `ResponsePacket`, which are
  single messages or batches.
  - `RequestPacket.subscription_request_ids()` returns the IDs of the
    `eth_subscribe` requests in a packet.
  - `ResponsePacket.responses_by_ids()` picks out the responses whose ID is in
    a given set.
- `rpcwire.result` turns responses into values or raised errors:
  - `transform_response` returns the raw result, or raises `ErrorResponse`.
  - `transform_result` also accepts an exception and raises it as a
    `TransportError`.
  - `try_deserialize_ok` decodes a raw success value.
- `rpcwire.errors` holds the exceptions, all subclasses of `RpcError`:
  `ErrorResponse`, `SerializationError`, `DeserializationError` (which carries
  the offending `text`) and `TransportError`.
- `rpcwire.notification` holds `EthNotification` and `parse_pubsub_item`. The
  parser sorts an incoming pubsub frame into a `Response` (it has an `id`) or
  a subscription notification.
- `rpcwire.inflight` holds `InFlight` and `RequestManager`.
  - An `InFlight` pairs a sent request with a `concurrent.futures.Future`.
  - `fulfill` delivers the response to that future. A successful
    `eth_subscribe` response is not delivered: `fulfill` returns the server's
    subscription ID and the request instead.
- `rpcwire.subscriptions` holds `ActiveSubscription` and
  `SubscriptionManager`.
  - A subscription's local ID is the hash of its params.
  - The manager maps each local ID to the ID the server currently uses, and
    hands out `NotificationReceiver` objects.
  - Each receiver buffers up to 16 notifications. When it is full, the oldest
    notification is dropped and counted in `lagged`.
- `rpcwire.connection.new_connection()` returns a connected `ConnectionHandle`
  and `ConnectionInterface` pair.
  - The pair is built on `asyncio` queues and events.
  - After `ConnectionHandle.shutdown()`, `recv_from_frontend()` returns `None`
    and `send_to_frontend()` raises `ConnectionClosed`.
- `rpcwire.fees.eip1559_default_estimator(base_fee_per_gas, rewards)` returns
  `(max_fee_per_gas, max_priority_fee_per_gas)`. It works from a base fee and a
  fee-history reward matrix, using the first entry of each row.

## Example

```python
from rpcwire.ids import Id
from rpcwire.request import Request, RequestMeta
from rpcwire.response import Response
from rpcwire.result import transform_response, try_deserialize_ok

request = Request(RequestMeta(method="eth_blockNumber", id=Id(1)), [])
serialized = request.serialize()
print(serialized.serialized)
# {"method":"eth_blockNumber","params":[],"id":1,"jsonrpc":"2.0"}

response = Response.from_json('{"jsonrpc":"2.0","id":1,"result":"0x10"}')
assert response.id == serialized.id
raw = transform_response(response)  # raises ErrorResponse on a server error
block = try_deserialize_ok(raw, lambda value: int(value, 16))
assert block == 16
```

## What it does not do

rpcwire has no transport, client or provider. It opens no sockets and makes no
HTTP or WebSocket connections, and it sends no requests. You supply the I/O
and use these types to build requests, read responses and keep track of
requests and subscriptions.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```
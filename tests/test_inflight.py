from rpcwire.errors import DeserializationError
from rpcwire.ids import Id
from rpcwire.inflight import InFlight, RequestManager
from rpcwire.request import Request, RequestMeta
from rpcwire.response import Response


def _request(method, number, params=None):
    return Request(RequestMeta(method, Id(number)), params).serialize()


def _response(text):
    return Response.from_json(text)


def test_plain_request_receives_response():
    in_flight = InFlight(_request("eth_blockNumber", 1))
    response = _response('{"jsonrpc":"2.0","id":1,"result":"0x10"}')
    assert in_flight.fulfill(response) is None
    assert in_flight.tx.result() == response


def test_subscription_success_returns_server_id():
    in_flight = InFlight(_request("eth_subscribe", 2, ["newHeads"]))
    outcome = in_flight.fulfill(_response('{"jsonrpc":"2.0","id":2,"result":"0x1a"}'))
    assert outcome == (0x1a, in_flight)
    assert not in_flight.tx.done()


def test_subscription_error_is_delivered():
    in_flight = InFlight(_request("eth_subscribe", 3, ["newHeads"]))
    response = _response('{"id":3,"error":{"code":-32000,"message":"nope"}}')
    assert in_flight.fulfill(response) is None
    assert in_flight.tx.result().is_error()


def test_subscription_with_bad_id_fails_waiter():
    in_flight = InFlight(_request("eth_subscribe", 4, ["newHeads"]))
    assert in_flight.fulfill(_response('{"id":4,"result":"nope"}')) is None
    error = in_flight.tx.exception()
    assert isinstance(error, DeserializationError)
    assert error.text == '"nope"'


def test_fulfill_ignores_cancelled_waiter():
    in_flight = InFlight(_request("eth_chainId", 5))
    in_flight.tx.cancel()
    assert in_flight.fulfill(_response('{"id":5,"result":"0x1"}')) is None
    assert "closed" in repr(in_flight)


def test_method_comes_from_request():
    assert InFlight(_request("eth_chainId", 6)).method == "eth_chainId"


def test_manager_removes_answered_request():
    manager = RequestManager()
    in_flight = InFlight(_request("eth_chainId", 7))
    manager.insert(in_flight)
    assert len(manager) == 1
    manager.handle_response(_response('{"id":7,"result":"0x1"}'))
    assert len(manager) == 0
    assert in_flight.tx.done()


def test_manager_ignores_unknown_id():
    manager = RequestManager()
    manager.insert(InFlight(_request("eth_chainId", 8)))
    assert manager.handle_response(_response('{"id":99,"result":"0x1"}')) is None
    assert len(manager) == 1


def test_manager_returns_subscription():
    manager = RequestManager()
    in_flight = InFlight(_request("eth_subscribe", 9, ["logs"]))
    manager.insert(in_flight)
    server_id, returned = manager.handle_response(_response('{"id":9,"result":"0x2"}'))
    assert server_id == 0x2
    assert returned is in_flight
    assert len(manager) == 0


def test_manager_iterates_in_id_order():
    manager = RequestManager()
    for number in (5, "b", 1, "a"):
        manager.insert(InFlight(_request("eth_chainId", number)))
    assert [request_id for request_id, _ in manager] == [Id(1), Id(5), Id("a"), Id("b")]


def test_error_response_on_plain_request_is_delivered_as_is():
    in_flight = InFlight(_request("eth_call", 10))
    response = _response('{"id":10,"error":{"code":3,"message":"reverted"}}')
    assert in_flight.fulfill(response) is None
    delivered = in_flight.tx.result(timeout=0)
    assert delivered == response
    assert delivered.is_error()
    assert delivered.payload.as_success() is None
    assert delivered.payload.as_error().code == 3
    assert delivered.payload.as_error().message == "reverted"
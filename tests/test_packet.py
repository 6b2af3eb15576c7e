import json

import pytest

from rpcwire.ids import Id
from rpcwire.packet import RequestPacket, ResponsePacket
from rpcwire.payload import Success
from rpcwire.request import Request, RequestMeta
from rpcwire.response import Response


def ser(method, id_value, params=None):
    return Request(RequestMeta(method, Id(id_value)), params).serialize()


def resp(id_value, result="1"):
    return Response(Id(id_value), Success(result))


def test_empty_packet():
    packet = RequestPacket()
    assert len(packet) == 0
    assert packet.is_batch
    assert packet.serialize() == "[]"


def test_single_packet_serializes_as_request():
    request = ser("eth_chainId", 1)
    packet = RequestPacket(request)
    assert len(packet) == 1
    assert not packet.is_batch
    assert packet.serialize() == request.serialized


def test_push_turns_single_into_batch():
    first, second = ser("a", 1), ser("b", 2, [1])
    packet = RequestPacket(first)
    packet.push(second)
    assert packet.is_batch
    assert packet.requests == (first, second)
    assert json.loads(packet.serialize()) == [
        json.loads(first.serialized),
        json.loads(second.serialized),
    ]


def test_batch_from_iterable():
    requests = [ser("a", i) for i in range(3)]
    packet = RequestPacket(iter(requests))
    assert list(packet) == requests
    packet.push(ser("b", 9))
    assert len(packet) == 4


def test_subscription_request_ids():
    packet = RequestPacket([ser("eth_subscribe", 1, ["newHeads"]), ser("eth_call", 2), ser("eth_subscribe", "x", ["logs"])])
    assert packet.subscription_request_ids() == {Id(1), Id("x")}
    assert RequestPacket(ser("eth_call", 5)).subscription_request_ids() == set()
    assert RequestPacket(ser("eth_subscribe", 5)).subscription_request_ids() == {Id(5)}


def test_response_packet_single_from_json():
    packet = ResponsePacket.from_json('{"id":1,"result":"0x1"}')
    assert not packet.is_batch
    assert packet.responses == (Response(Id(1), Success('"0x1"')),)


def test_response_packet_batch_from_json():
    packet = ResponsePacket.from_json('[{"id":1,"result":1}]')
    assert packet.is_batch
    assert [r.id for r in packet] == [Id(1)]
    empty = ResponsePacket.from_json("[]")
    assert empty.is_batch and len(empty) == 0


@pytest.mark.parametrize("text", ["42", '"x"', '[{"id":1}]', '{"id":1,"id":2,"result":1}'])
def test_response_packet_invalid(text):
    with pytest.raises(ValueError):
        ResponsePacket.from_json(text)


def test_from_responses():
    one = ResponsePacket.from_responses([resp(1)])
    assert not one.is_batch and one.responses == (resp(1),)
    two = ResponsePacket.from_responses(iter([resp(1), resp(2)]))
    assert two.is_batch and len(two) == 2
    none = ResponsePacket.from_responses([])
    assert none.is_batch and len(none) == 0


def test_responses_by_ids():
    single = ResponsePacket(resp(1))
    assert single.responses_by_ids({Id(1)}) == [resp(1)]
    assert single.responses_by_ids({Id(2)}) == []
    batch = ResponsePacket([resp(1, "1"), resp(2), resp(1, "2")])
    assert batch.responses_by_ids({Id(1)}) == [resp(1, "1"), resp(1, "2")]
    assert batch.responses_by_ids(set()) == []
import asyncio

import pytest

from rpcwire.connection import ConnectionClosed, new_connection
from rpcwire.notification import EthNotification
from rpcwire.response import Response


@pytest.mark.asyncio
async def test_requests_reach_backend_in_order():
    handle, interface = new_connection()
    handle.to_socket.put_nowait('{"id":1}')
    handle.to_socket.put_nowait('{"id":2}')
    assert await interface.recv_from_frontend() == '{"id":1}'
    assert await interface.recv_from_frontend() == '{"id":2}'


@pytest.mark.asyncio
async def test_shutdown_stops_requests():
    handle, interface = new_connection()
    handle.to_socket.put_nowait('{"id":1}')
    handle.shutdown()
    assert await interface.recv_from_frontend() is None
    assert await interface.recv_from_frontend() is None


@pytest.mark.asyncio
async def test_shutdown_wakes_waiting_backend():
    handle, interface = new_connection()
    waiter = asyncio.create_task(interface.recv_from_frontend())
    await asyncio.sleep(0)
    handle.shutdown()
    assert await asyncio.wait_for(waiter, timeout=1) is None


@pytest.mark.asyncio
async def test_items_reach_frontend():
    handle, interface = new_connection()
    response = Response.from_json('{"id":1,"result":"0x1"}')
    notification = EthNotification(subscription=1, result='"x"')
    interface.send_to_frontend(response)
    interface.send_to_frontend(notification)
    assert handle.from_socket.get_nowait() == response
    assert handle.from_socket.get_nowait() == notification


@pytest.mark.asyncio
async def test_send_after_shutdown_fails():
    handle, interface = new_connection()
    handle.shutdown()
    with pytest.raises(ConnectionClosed):
        interface.send_to_frontend(EthNotification(subscription=1, result='"x"'))


@pytest.mark.asyncio
async def test_close_with_error_signals_frontend():
    handle, interface = new_connection()
    assert not handle.error.is_set()
    interface.close_with_error()
    assert handle.error.is_set()
    await asyncio.wait_for(handle.error.wait(), timeout=1)
    assert "open" in repr(handle)


@pytest.mark.asyncio
async def test_shutdown_is_idempotent():
    handle, interface = new_connection()
    handle.shutdown()
    handle.shutdown()
    assert handle.to_socket.qsize() == 1
    assert await interface.recv_from_frontend() is None
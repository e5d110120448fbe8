"""
Integration tests for the WebSocket notification listener.
"""

import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from vaxvet_console.notifications import (
    HANDSHAKE,
    PING,
    RECORD_SEPARATOR,
    NotificationInbox,
    NotificationListener,
)


def invocation(text):
    return json.dumps({"type": 1, "target": "ReceiveNotification", "arguments": [text]}) + RECORD_SEPARATOR


def make_hub(frames, received, seen_headers=None, wait_for_ping=False, hold_open=False):
    """Hub that answers only after the client handshake, like the clinic server."""
    async def hub(request):
        if seen_headers is not None:
            seen_headers.append(dict(request.headers))
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        handshake = await ws.receive_str()
        received.append(handshake)
        if handshake != HANDSHAKE:
            await ws.close()
            return ws
        await ws.send_str("{}" + RECORD_SEPARATOR)

        if wait_for_ping:
            received.append(await ws.receive_str())
        for frame in frames:
            await ws.send_str(frame)

        if hold_open:
            async for _ in ws:
                pass
        else:
            await ws.close()
        return ws

    app = web.Application()
    app.router.add_get("/hubs/notifications", hub)
    return app


def hub_url(server):
    return str(server.make_url("/hubs/notifications")).replace("http://", "ws://")


class TestNotificationListener:
    """Tests for NotificationListener against a local hub."""

    @pytest.mark.asyncio
    async def test_messages_reach_inbox_after_handshake(self):
        frames = [
            invocation("Stock LOT-7 expires in 3 days"),
            json.dumps({"message": "New vaccine record for Rex"}),
        ]
        received, seen_headers = [], []
        server = TestServer(make_hub(frames, received, seen_headers))
        await server.start_server()
        try:
            inbox = NotificationInbox()
            listener = NotificationListener(hub_url(server), inbox, token_provider=lambda: "jwt")

            await listener.run()
        finally:
            await server.close()

        assert received == [HANDSHAKE]
        assert inbox.drain() == ["Stock LOT-7 expires in 3 days", "New vaccine record for Rex"]
        assert seen_headers[0]["Authorization"] == "Bearer jwt"

    @pytest.mark.asyncio
    async def test_close_record_ends_channel(self):
        frames = [
            invocation("before close"),
            json.dumps({"type": 7, "error": "Server is shutting down"}) + RECORD_SEPARATOR,
            invocation("after close"),
        ]
        server = TestServer(make_hub(frames, [], hold_open=True))
        await server.start_server()
        try:
            inbox = NotificationInbox()
            listener = NotificationListener(hub_url(server), inbox)

            await listener.run()
        finally:
            await server.close()

        assert inbox.drain() == ["before close"]

    @pytest.mark.asyncio
    async def test_keepalive_ping_is_sent(self):
        received = []
        server = TestServer(make_hub([invocation("pong received")], received, wait_for_ping=True))
        await server.start_server()
        try:
            inbox = NotificationInbox()
            listener = NotificationListener(hub_url(server), inbox, keepalive_interval=0.05)

            await listener.run()
        finally:
            await server.close()

        assert received == [HANDSHAKE, PING]
        assert inbox.drain() == ["pong received"]

    @pytest.mark.asyncio
    async def test_unreachable_hub_is_not_retried(self, unused_tcp_port):
        inbox = NotificationInbox()
        listener = NotificationListener(f"ws://127.0.0.1:{unused_tcp_port}/hubs/notifications", inbox)

        await listener.run()

        assert len(inbox) == 0

    @pytest.mark.asyncio
    async def test_start_and_stop(self, unused_tcp_port):
        listener = NotificationListener(f"ws://127.0.0.1:{unused_tcp_port}/hubs/notifications", NotificationInbox())

        task = listener.start()
        assert listener.start() is task

        await listener.stop()
        assert task.done()

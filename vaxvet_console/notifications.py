"""
Real-time notification channel.

A WebSocket connection to the server's notification hub is opened at startup.
Pushed messages are queued and shown as a blocking alert on the next page the
operator loads. The channel is not re-established once it drops.
"""

import asyncio
import json
from collections import deque
from typing import Any, Deque, List, Optional

import aiohttp
from loguru import logger

from .api.base import TokenProvider

RECORD_SEPARATOR = "\x1e"
HANDSHAKE = json.dumps({"protocol": "json", "version": 1}) + RECORD_SEPARATOR
PING = json.dumps({"type": 6}) + RECORD_SEPARATOR
CLOSE_MESSAGE_TYPE = 7


def _message_from_record(record: Any) -> Optional[str]:
    if isinstance(record, str):
        return record.strip() or None

    if isinstance(record, dict):
        if isinstance(record.get("message"), str):
            return record["message"]
        arguments = record.get("arguments")
        if isinstance(arguments, list):
            parts = [
                arg if isinstance(arg, str) else json.dumps(arg)
                for arg in arguments
            ]
            return " ".join(parts) or None
        return None

    return str(record)


def parse_notification(frame: str) -> List[str]:
    """
    Extract display messages from one WebSocket text frame.

    A frame may hold several records separated by the ASCII record
    separator. Each record is plain text, `{"message": ...}`, or a hub
    invocation `{"target": ..., "arguments": [...]}`. Handshake and
    keep-alive records carry no message and are dropped.

    Args:
        frame: Raw text frame

    Returns:
        Messages in arrival order
    """
    messages = []
    for record in split_records(frame):
        message = _message_from_record(record)
        if message:
            messages.append(message)
    return messages


def split_records(frame: str) -> List[Any]:
    """Decode each record of a frame; records that are not JSON stay as text."""
    records = []
    for raw in frame.split(RECORD_SEPARATOR):
        raw = raw.strip()
        if not raw:
            continue
        try:
            records.append(json.loads(raw))
        except ValueError:
            records.append(raw)
    return records


def is_close_record(record: Any) -> bool:
    return isinstance(record, dict) and record.get("type") == CLOSE_MESSAGE_TYPE


class NotificationInbox:
    """Messages waiting to be shown."""

    def __init__(self, maxlen: int = 50):
        self._messages: Deque[str] = deque(maxlen=maxlen)

    def push(self, message: str) -> None:
        self._messages.append(message)

    def peek(self) -> List[str]:
        return list(self._messages)

    def drain(self) -> List[str]:
        """Remove and return every pending message."""
        messages = list(self._messages)
        self._messages.clear()
        return messages

    def __len__(self) -> int:
        return len(self._messages)


class NotificationListener:
    """Background task reading the notification hub into an inbox."""

    def __init__(
        self,
        url: str,
        inbox: NotificationInbox,
        token_provider: Optional[TokenProvider] = None,
        keepalive_interval: float = 15.0,
    ):
        self.url = url
        self.inbox = inbox
        self.token_provider = token_provider
        self.keepalive_interval = keepalive_interval
        self._task: Optional[asyncio.Task] = None

    def _get_headers(self) -> dict:
        token = self.token_provider() if self.token_provider else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _handle_frame(self, frame: str) -> bool:
        """
        Queue the messages of one frame.

        Returns:
            True when the hub announced it is closing the channel
        """
        for record in split_records(frame):
            if is_close_record(record):
                logger.info(f"Notification hub closed the channel: {record.get('error') or 'no reason given'}")
                return True
            message = _message_from_record(record)
            if message:
                logger.info(f"Notification received: {message}")
                self.inbox.push(message)
        return False

    async def _keep_alive(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        while not ws.closed:
            await asyncio.sleep(self.keepalive_interval)
            try:
                await ws.send_str(PING)
            except ConnectionResetError:
                return

    async def run(self) -> None:
        """Connect, handshake and consume messages until the channel closes."""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.ws_connect(self.url, headers=self._get_headers()) as ws:
                    await ws.send_str(HANDSHAKE)
                    logger.info(f"Notification channel connected: {self.url}")
                    keepalive = asyncio.create_task(self._keep_alive(ws))
                    try:
                        async for msg in ws:
                            if msg.type == aiohttp.WSMsgType.TEXT:
                                if self._handle_frame(msg.data):
                                    break
                            elif msg.type == aiohttp.WSMsgType.ERROR:
                                logger.error(f"Notification channel error: {ws.exception()}")
                                break
                    finally:
                        keepalive.cancel()
                        try:
                            await keepalive
                        except asyncio.CancelledError:
                            pass
        except aiohttp.ClientError as e:
            logger.warning(f"Notification channel unavailable at {self.url}: {e}")
            return

        logger.info("Notification channel closed")

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

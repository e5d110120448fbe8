"""
Unit tests for notification parsing and the inbox.
"""

import json

from vaxvet_console.notifications import (
    HANDSHAKE,
    RECORD_SEPARATOR,
    NotificationInbox,
    is_close_record,
    parse_notification,
    split_records,
)


class TestParseNotification:
    """Tests for parse_notification."""

    def test_plain_text(self):
        assert parse_notification("Stock LOT-001 expires tomorrow") == ["Stock LOT-001 expires tomorrow"]

    def test_message_object(self):
        assert parse_notification(json.dumps({"message": "Rex is overdue"})) == ["Rex is overdue"]

    def test_hub_invocation(self):
        frame = json.dumps({"type": 1, "target": "ReceiveNotification", "arguments": ["New record added"]})
        assert parse_notification(frame) == ["New record added"]

    def test_multiple_records_in_one_frame(self):
        frame = (
            json.dumps({"target": "ReceiveNotification", "arguments": ["first"]})
            + RECORD_SEPARATOR
            + json.dumps({"target": "ReceiveNotification", "arguments": ["second"]})
            + RECORD_SEPARATOR
        )
        assert parse_notification(frame) == ["first", "second"]

    def test_handshake_and_ping_are_dropped(self):
        frame = "{}" + RECORD_SEPARATOR + json.dumps({"type": 6}) + RECORD_SEPARATOR
        assert parse_notification(frame) == []


class TestNotificationInbox:
    """Tests for NotificationInbox."""

    def test_drain_returns_in_order_and_empties(self):
        inbox = NotificationInbox()
        inbox.push("one")
        inbox.push("two")

        assert inbox.peek() == ["one", "two"]
        assert inbox.drain() == ["one", "two"]
        assert len(inbox) == 0

    def test_oldest_messages_dropped_past_limit(self):
        inbox = NotificationInbox(maxlen=2)
        for message in ("a", "b", "c"):
            inbox.push(message)
        assert inbox.peek() == ["b", "c"]


class TestHubRecords:
    """Tests for hub record helpers."""

    def test_split_records_keeps_plain_text(self):
        frame = json.dumps({"type": 6}) + RECORD_SEPARATOR + "plain" + RECORD_SEPARATOR
        assert split_records(frame) == [{"type": 6}, "plain"]

    def test_close_record(self):
        assert is_close_record({"type": 7, "error": "shutting down"})
        assert not is_close_record({"type": 1, "arguments": ["x"]})
        assert not is_close_record("type 7")

    def test_close_record_carries_no_message(self):
        assert parse_notification(json.dumps({"type": 7}) + RECORD_SEPARATOR) == []

    def test_handshake_is_terminated(self):
        assert HANDSHAKE.endswith(RECORD_SEPARATOR)
        assert json.loads(HANDSHAKE.rstrip(RECORD_SEPARATOR)) == {"protocol": "json", "version": 1}

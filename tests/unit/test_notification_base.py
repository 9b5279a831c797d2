"""
Unit tests for ecs_notifier.notification.base.

These tests validate notification-layer contracts:
- Notifier protocol supports duck typing (no inheritance required)
- PrintNotifier writes the webhook JSON document to its stream

These are contract tests; no external I/O is involved.
"""

from __future__ import annotations

import io
import json

from ecs_notifier.notification.base import Notifier, PrintNotifier
from ecs_notifier.notification.payload import SlackMessage


class _FakeNotifier:
    """
    Minimal notifier implementation for protocol conformance testing.

    This class does not inherit from Notifier; it only implements the required
    notify(message) method to validate Protocol-based duck typing.
    """

    def __init__(self) -> None:
        self.seen: list[SlackMessage] = []

    def notify(self, message: SlackMessage) -> None:
        """Record the received message for assertions."""
        self.seen.append(message)


def test_notifier_protocol_duck_typing() -> None:
    """
    A class is usable as a Notifier if it implements notify(message).
    """
    n: Notifier = _FakeNotifier()
    msg = SlackMessage(username="aws", icon_emoji=":rocket:", channel="#c")

    n.notify(msg)
    assert n.seen == [msg]  # type: ignore[attr-defined]


def test_print_notifier_writes_json_document() -> None:
    stream = io.StringIO()
    msg = SlackMessage(username="aws", icon_emoji=":rocket:", channel="#c", text="hi")

    PrintNotifier(stream).notify(msg)

    assert json.loads(stream.getvalue()) == {
        "username": "aws",
        "icon_emoji": ":rocket:",
        "channel": "#c",
        "text": "hi",
    }

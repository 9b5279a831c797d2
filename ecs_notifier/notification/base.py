from __future__ import annotations

import json
import sys
from typing import Protocol, TextIO

from ecs_notifier.notification.payload import SlackMessage


class Notifier(Protocol):
    """
    Protocol interface for notification delivery.

    Any notifier implementation can be used if it provides a 'notify(message)'
    method with the correct signature. This enables dependency inversion and
    makes the pipeline easy to test with fakes/mocks.

    Methods
    -------
    notify(message)
        Deliver a composed Slack message.
    """

    def notify(self, message: SlackMessage) -> None:
        """
        Deliver a composed Slack message.

        Parameters
        ----------
        message
            The message to deliver.

        Raises
        ------
        DeliveryFailure
            If the message could not be delivered.
        """
        ...


class PrintNotifier:
    """
    Notifier that writes the JSON document to a stream instead of posting it.

    Used by the replay CLI in dry-run mode.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdout

    def notify(self, message: SlackMessage) -> None:
        json.dump(message.to_dict(), self._stream, indent=2)
        self._stream.write("\n")

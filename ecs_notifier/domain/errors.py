"""
Typed errors raised by the notification pipeline.

Every stage raises one of these instead of returning partial results, so the
batch runner can report exactly which record failed and why.
"""

from __future__ import annotations

from typing import Optional


class NotifierError(Exception):
    """Base class for all pipeline errors."""


class MalformedEnvelope(NotifierError):
    """The outer trigger message is not a usable JSON object."""


class MalformedSubField(NotifierError):
    """
    One of the string-encoded sub-fields failed to parse.

    Parameters
    ----------
    field
        Wire name of the failing sub-field (e.g. "deploymentOverview").
    reason
        Short description of the parse failure.
    """

    def __init__(self, field: str, reason: str):
        super().__init__(f"Malformed {field}: {reason}")
        self.field = field
        self.reason = reason


class DeliveryFailure(NotifierError):
    """
    The Slack webhook did not acknowledge the message.

    Parameters
    ----------
    message
        Error description.
    body
        Response body when a response was received, else None.
    """

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body

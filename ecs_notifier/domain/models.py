"""
Domain models and enums.

This module defines the deployment-event types shared across the pipeline:
- The as-received CodeDeploy trigger shape (some fields still JSON strings)
- The normalized event with typed sub-structures
- Lifecycle events, deployment overview, error and rollback information
- SeverityTier, which drives the color and icon of a notification

All models are frozen dataclasses so a decoded event can be handed from the
normalizer to the classifier and composer without being mutated on the way.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SeverityTier(str, Enum):
    """
    Severity tier of a deployment notification.

    Each tier is bound to a Slack attachment color and an emoji icon.

    Members
    -------
    SUCCESS : str
        Deployment (or instance) finished successfully.
    NEUTRAL : str
        Deployment is created, ready or still in progress.
    FAILURE : str
        Anything else, including an unknown or missing status.
    """

    SUCCESS = "SUCCESS"
    NEUTRAL = "NEUTRAL"
    FAILURE = "FAILURE"

    @property
    def color(self) -> str:
        return _TIER_STYLE[self][0]

    @property
    def icon(self) -> str:
        return _TIER_STYLE[self][1]


_TIER_STYLE = {
    SeverityTier.SUCCESS: ("good", ":white_check_mark:"),
    SeverityTier.NEUTRAL: ("grey", ":arrows_counterclockwise:"),
    SeverityTier.FAILURE: ("danger", ":x:"),
}


@dataclass(frozen=True)
class LifecycleEvent:
    """
    One hook of an ECS blue/green deployment (e.g. "BeforeInstall").

    Parameters
    ----------
    event
        Lifecycle hook name.
    event_status
        Status reported for the hook (e.g. "Succeeded", "Failed").
    start_time
        Optional start timestamp as sent by CodeDeploy.
    end_time
        Optional end timestamp as sent by CodeDeploy.
    """

    event: str
    event_status: str
    start_time: str = ""
    end_time: str = ""


@dataclass(frozen=True)
class DeploymentOverview:
    """
    Per-target counters of a deployment.

    Parameters
    ----------
    succeeded, failed, skipped, in_progress, pending
        Number of targets in each state.
    """

    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    in_progress: int = 0
    pending: int = 0


@dataclass(frozen=True)
class ErrorInformation:
    """Error code and message attached to a failed deployment."""

    code: str = ""
    message: str = ""


@dataclass(frozen=True)
class RollbackInformation:
    """
    Rollback details of a deployment.

    Parameters
    ----------
    message
        Human-readable rollback message.
    triggering_deployment_id
        Deployment that triggered the rollback. A rollback without this id is
        never attached to a normalized event.
    """

    message: str = ""
    triggering_deployment_id: str = ""


@dataclass(frozen=True)
class TriggerIdentity:
    """
    Scalar identity and timing fields common to raw and normalized events.
    """

    region: str = ""
    account_id: str = ""
    event_trigger_name: str = ""
    application_name: str = ""
    deployment_id: str = ""
    instance_id: str = ""
    deployment_group_name: str = ""
    create_time: str = ""
    complete_time: str = ""
    status: str = ""
    last_updated_at: str = ""
    instance_status: str = ""


@dataclass(frozen=True)
class RawTriggerEvent(TriggerIdentity):
    """
    CodeDeploy trigger message exactly as received.

    The four structured fields below are JSON documents encoded as strings.
    They are re-parsed by :func:`~ecs_notifier.core.normalizer.normalize_event`.
    """

    lifecycle_events: str = ""
    deployment_overview: str = ""
    error_information: str = ""
    rollback_information: str = ""


@dataclass(frozen=True)
class NormalizedEvent(TriggerIdentity):
    """
    Canonical deployment event consumed by the classifier and composer.

    Parameters
    ----------
    lifecycle_events
        Lifecycle hooks in the order received (empty when absent).
    deployment_overview
        Target counters, or None when the trigger carried none.
    error_information
        Error details, or None.
    rollback_information
        Rollback details, or None (also None when the triggering deployment
        id is empty).
    unified_status
        Deployment-level status if set, else instance-level status, else "".
    """

    lifecycle_events: Tuple[LifecycleEvent, ...] = ()
    deployment_overview: Optional[DeploymentOverview] = None
    error_information: Optional[ErrorInformation] = None
    rollback_information: Optional[RollbackInformation] = None
    unified_status: str = ""

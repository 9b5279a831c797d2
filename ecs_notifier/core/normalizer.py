"""
Second decode phase for CodeDeploy trigger messages.

CodeDeploy sends lifecycle events, the deployment overview, error information
and rollback information as JSON documents encoded *inside* string fields.
This module re-parses each of them, attributing any failure to the wire field
that caused it, and folds the two status fields into one.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar, Union

from ecs_notifier.domain.errors import MalformedSubField
from ecs_notifier.domain.models import (
    DeploymentOverview,
    ErrorInformation,
    LifecycleEvent,
    NormalizedEvent,
    RawTriggerEvent,
    RollbackInformation,
    TriggerIdentity,
)
from ecs_notifier.transport.envelope import decode_trigger_event

logger = logging.getLogger(__name__)

T = TypeVar("T")

# CodeDeploy overview counters are single-byte values
MAX_COUNT = 255


def unify_status(status: str, instance_status: str) -> str:
    """
    Pick the single status used for classification.

    Deployment-level notifications carry ``status``, instance-level ones carry
    ``instanceStatus``. The deployment-level value takes precedence when both
    are set.
    """
    if status:
        return status
    if instance_status:
        return instance_status
    return ""


def _parse_sub_field(field: str, raw: str, convert: Callable[[Any], T]) -> Optional[T]:
    """
    Parse one string-encoded sub-field.

    An empty string or a JSON ``null`` gives None. Both JSON errors and shape
    errors raised by ``convert`` are reported as MalformedSubField for ``field``.
    """
    if not raw:
        return None

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedSubField(field, f"invalid JSON ({e})") from e

    if data is None:
        return None

    try:
        return convert(data)
    except (TypeError, ValueError) as e:
        raise MalformedSubField(field, str(e)) from e


def _expect_object(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _str_value(obj: Dict[str, Any], key: str) -> str:
    v = obj.get(key)
    if v is None:
        return ""
    if not isinstance(v, str):
        raise TypeError(f"{key} must be a string, got {type(v).__name__}")
    return v


def _count_value(obj: Dict[str, Any], key: str) -> int:
    v = obj.get(key)
    if v is None:
        return 0
    # bool is an int subclass but never a valid count
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{key} must be an integer, got {type(v).__name__}")
    if not 0 <= v <= MAX_COUNT:
        raise ValueError(f"{key} must be between 0 and {MAX_COUNT}, got {v}")
    return v


def _to_lifecycle_events(data: Any) -> Tuple[LifecycleEvent, ...]:
    if not isinstance(data, list):
        raise TypeError(f"expected a JSON array, got {type(data).__name__}")

    events = []
    for item in data:
        obj = _expect_object(item)
        events.append(
            LifecycleEvent(
                event=_str_value(obj, "LifecycleEvent"),
                event_status=_str_value(obj, "LifecycleEventStatus"),
                start_time=_str_value(obj, "StartTime"),
                end_time=_str_value(obj, "EndTime"),
            )
        )
    return tuple(events)


def _to_deployment_overview(data: Any) -> DeploymentOverview:
    obj = _expect_object(data)
    return DeploymentOverview(
        succeeded=_count_value(obj, "Succeeded"),
        failed=_count_value(obj, "Failed"),
        skipped=_count_value(obj, "Skipped"),
        in_progress=_count_value(obj, "InProgress"),
        pending=_count_value(obj, "Pending"),
    )


def _to_error_information(data: Any) -> ErrorInformation:
    obj = _expect_object(data)
    return ErrorInformation(
        code=_str_value(obj, "ErrorCode"),
        message=_str_value(obj, "ErrorMessage"),
    )


def _to_rollback_information(data: Any) -> RollbackInformation:
    obj = _expect_object(data)
    return RollbackInformation(
        message=_str_value(obj, "RollbackMessage"),
        triggering_deployment_id=_str_value(obj, "RollbackTriggeringDeploymentId"),
    )


def normalize_event(raw: RawTriggerEvent) -> NormalizedEvent:
    """
    Turn a RawTriggerEvent into a NormalizedEvent.

    Steps
    -----
    1. Copy the scalar identity/timing fields verbatim.
    2. Compute ``unified_status`` with :func:`unify_status`.
    3. Re-parse each non-empty string-encoded sub-field; failures are raised,
       never swallowed.
    4. Drop rollback information without a triggering deployment id.
    5. Keep lifecycle events in the order received.

    Parameters
    ----------
    raw
        Output of :func:`~ecs_notifier.transport.envelope.decode_trigger_event`.

    Returns
    -------
    NormalizedEvent
        Fully populated, immutable event.

    Raises
    ------
    MalformedSubField
        If a sub-field is not valid JSON or does not have the expected shape.
        ``field`` holds the wire name of the offending sub-field.
    """
    scalars = {f.name: getattr(raw, f.name) for f in fields(TriggerIdentity)}

    lifecycle_events = _parse_sub_field("lifecycleEvents", raw.lifecycle_events, _to_lifecycle_events)
    overview = _parse_sub_field("deploymentOverview", raw.deployment_overview, _to_deployment_overview)
    error_info = _parse_sub_field("errorInformation", raw.error_information, _to_error_information)
    rollback = _parse_sub_field("rollbackInformation", raw.rollback_information, _to_rollback_information)

    if rollback is not None and not rollback.triggering_deployment_id:
        logger.debug("Ignoring rollback information without triggering deployment id")
        rollback = None

    return NormalizedEvent(
        **scalars,
        lifecycle_events=lifecycle_events or (),
        deployment_overview=overview,
        error_information=error_info,
        rollback_information=rollback,
        unified_status=unify_status(raw.status, raw.instance_status),
    )


def parse_trigger_message(payload: Union[str, bytes]) -> NormalizedEvent:
    """Decode and normalize a trigger message in one step."""
    return normalize_event(decode_trigger_event(payload))

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from ecs_notifier.domain.errors import MalformedEnvelope
from ecs_notifier.domain.models import RawTriggerEvent

# wire key -> RawTriggerEvent attribute
_FIELD_MAP: Dict[str, str] = {
    "region": "region",
    "accountId": "account_id",
    "eventTriggerName": "event_trigger_name",
    "applicationName": "application_name",
    "deploymentId": "deployment_id",
    "instanceId": "instance_id",
    "deploymentGroupName": "deployment_group_name",
    "createTime": "create_time",
    "completeTime": "complete_time",
    "status": "status",
    "lastUpdatedAt": "last_updated_at",
    "instanceStatus": "instance_status",
    "lifecycleEvents": "lifecycle_events",
    "deploymentOverview": "deployment_overview",
    "errorInformation": "error_information",
    "rollbackInformation": "rollback_information",
}


@dataclass(frozen=True)
class SnsRecord:
    """
    One record of an SNS event delivered to the notifier.

    Parameters
    ----------
    event_source
        Source label of the record (usually "aws:sns").
    timestamp
        Publish timestamp of the SNS message.
    message
        Message body; a CodeDeploy trigger JSON document.
    """

    event_source: str
    timestamp: str
    message: str


def _load_object(payload: Union[str, bytes]) -> Dict[str, Any]:
    """
    Parse a payload into a JSON object.

    Raises
    ------
    MalformedEnvelope
        If the payload is not valid JSON or not a JSON object.
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedEnvelope(f"Payload is not valid UTF-8: {e}") from e

    try:
        obj = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedEnvelope(f"Payload is not valid JSON: {e}") from e

    if not isinstance(obj, dict):
        raise MalformedEnvelope(f"Payload must be a JSON object, got {type(obj).__name__}")
    return obj


def decode_trigger_event(payload: Union[str, bytes]) -> RawTriggerEvent:
    """
    Decode a CodeDeploy trigger message into a RawTriggerEvent.

    Every recognized field is optional; unknown keys are ignored, so ``{}``
    decodes to an all-empty event. The structured sub-fields are kept as the
    raw strings CodeDeploy sends.

    Parameters
    ----------
    payload
        Trigger message as text or UTF-8 bytes.

    Returns
    -------
    RawTriggerEvent
        Decoded event with string-encoded sub-fields left untouched.

    Raises
    ------
    MalformedEnvelope
        If the payload is not a JSON object, or a recognized field holds
        something other than a string or null.
    """
    obj = _load_object(payload)

    values: Dict[str, str] = {}
    for key, attr in _FIELD_MAP.items():
        v = obj.get(key)
        if v is None:
            continue
        if not isinstance(v, str):
            raise MalformedEnvelope(f"Field {key!r} must be a string, got {type(v).__name__}")
        values[attr] = v

    return RawTriggerEvent(**values)


def sns_records(event: Dict[str, Any]) -> List[Any]:
    """
    Return the raw record list of an SNS event (``{"Records": [...]}``).

    A missing or null ``Records`` key gives an empty list.

    Raises
    ------
    MalformedEnvelope
        If ``Records`` is present but not a list.
    """
    records = event.get("Records")
    if records is None:
        return []
    if not isinstance(records, list):
        raise MalformedEnvelope("SNS event 'Records' must be a list")
    return records


def parse_sns_record(record: Any) -> SnsRecord:
    """
    Convert one raw SNS record into an SnsRecord.

    Parameters
    ----------
    record
        One entry of ``event["Records"]``.

    Raises
    ------
    MalformedEnvelope
        If the record has no string ``Sns.Message``.
    """
    sns = record.get("Sns") if isinstance(record, dict) else None
    message = sns.get("Message") if isinstance(sns, dict) else None
    if not isinstance(message, str):
        raise MalformedEnvelope("SNS record has no Message body")

    return SnsRecord(
        event_source=str(record.get("EventSource", "")),
        timestamp=str(sns.get("Timestamp", "")),
        message=message,
    )

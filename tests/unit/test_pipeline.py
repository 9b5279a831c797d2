"""
Unit tests for ecs_notifier.runtime.pipeline.

These tests validate the end-to-end flow with a recording notifier:
- one message is decoded, classified, composed and delivered
- malformed messages are never delivered
- SNS batches isolate failures per record
- fail_fast re-raises the first failure

No network I/O is involved.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import pytest

from ecs_notifier.core.config.settings import NotifierConfig, SlackConfig
from ecs_notifier.domain.errors import DeliveryFailure, MalformedEnvelope, MalformedSubField
from ecs_notifier.notification.payload import SlackMessage
from ecs_notifier.runtime.pipeline import DeploymentNotificationPipeline

CFG = NotifierConfig(slack=SlackConfig(webhook_url="https://hooks.example.com/x", channel="#deploys"))


class _RecordingNotifier:
    """Notifier test double that records messages or fails on demand."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: List[SlackMessage] = []
        self._fail = fail

    def notify(self, message: SlackMessage) -> None:
        if self._fail:
            raise DeliveryFailure("Slack message failed to send", body="invalid_payload")
        self.sent.append(message)


def _trigger(**fields) -> str:
    base = {"region": "us-east-1", "accountId": "111122223333", "deploymentId": "d-XYZ"}
    base.update(fields)
    return json.dumps(base)


def _sns_event(*messages: str) -> Dict[str, Any]:
    return {
        "Records": [
            {
                "EventSource": "aws:sns",
                "Sns": {"Timestamp": "2024-01-01T10:00:00.000Z", "Message": m},
            }
            for m in messages
        ]
    }


def test_process_message_delivers_composed_message() -> None:
    notifier = _RecordingNotifier()
    pipeline = DeploymentNotificationPipeline(CFG, notifier)

    msg = pipeline.process_message(_trigger(status="SUCCEEDED", instanceStatus="FAILED"))

    assert notifier.sent == [msg]
    assert msg.attachments[0].color == "good"
    assert msg.attachments[0].fields[2].value == "*SUCCEEDED*"
    assert msg.channel == "#deploys"


def test_process_message_minimal_created_event() -> None:
    """
    Empty sub-fields and status CREATED give a neutral message with no
    optional sections.
    """
    notifier = _RecordingNotifier()
    pipeline = DeploymentNotificationPipeline(CFG, notifier)

    msg = pipeline.process_message(
        _trigger(status="CREATED", lifecycleEvents="", deploymentOverview="", errorInformation="", rollbackInformation="")
    )

    assert msg.attachments[0].color == "grey"
    assert msg.text.endswith(":arrows_counterclockwise: *ECS Deployment Update*\n\n")
    assert len(msg.attachments[0].fields) == 3


def test_process_message_malformed_sub_field_is_not_delivered() -> None:
    notifier = _RecordingNotifier()
    pipeline = DeploymentNotificationPipeline(CFG, notifier)

    with pytest.raises(MalformedSubField) as exc_info:
        pipeline.process_message(_trigger(deploymentOverview="{invalid"))

    assert exc_info.value.field == "deploymentOverview"
    assert notifier.sent == []


def test_process_sns_event_isolates_failing_records(caplog) -> None:
    """
    A malformed record is logged and reported; the rest of the batch is
    still delivered.
    """
    notifier = _RecordingNotifier()
    pipeline = DeploymentNotificationPipeline(CFG, notifier)

    event = _sns_event(
        _trigger(status="SUCCEEDED"),
        "{not json",
        _trigger(instanceStatus="READY", deploymentId="d-2"),
    )

    with caplog.at_level(logging.INFO):
        report = pipeline.process_sns_event(event)

    assert report.delivered == 2
    assert not report.ok
    assert [f.index for f in report.failures] == [1]
    assert isinstance(report.failures[0].error, MalformedEnvelope)
    assert report.as_dict() == {"delivered": 2, "failed": 1}
    assert [m.attachments[0].fields[1].value for m in notifier.sent] == ["d-XYZ", "d-2"]
    assert "Failed to process SNS record 1" in caplog.text


def test_process_sns_event_reports_record_without_message() -> None:
    pipeline = DeploymentNotificationPipeline(CFG, _RecordingNotifier())
    report = pipeline.process_sns_event({"Records": [{"EventSource": "aws:sns", "Sns": {}}]})
    assert report.as_dict() == {"delivered": 0, "failed": 1}


def test_process_sns_event_reports_delivery_failures() -> None:
    pipeline = DeploymentNotificationPipeline(CFG, _RecordingNotifier(fail=True))

    report = pipeline.process_sns_event(_sns_event(_trigger(status="FAILED")))

    assert report.delivered == 0
    assert isinstance(report.failures[0].error, DeliveryFailure)


def test_process_sns_event_fail_fast_stops_batch() -> None:
    notifier = _RecordingNotifier()
    cfg = NotifierConfig(slack=CFG.slack, fail_fast=True)
    pipeline = DeploymentNotificationPipeline(cfg, notifier)

    event = _sns_event("{not json", _trigger(status="SUCCEEDED"))

    with pytest.raises(MalformedEnvelope):
        pipeline.process_sns_event(event)
    assert notifier.sent == []


def test_process_sns_event_empty_batch() -> None:
    pipeline = DeploymentNotificationPipeline(CFG, _RecordingNotifier())
    report = pipeline.process_sns_event({"Records": []})
    assert report.ok
    assert report.delivered == 0

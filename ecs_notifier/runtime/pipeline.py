"""
Deployment notification pipeline.

One trigger message runs through decode, normalize, classify, compose and
deliver. An SNS batch is processed record by record; a failing record is
logged and reported without stopping the rest of the batch unless the
configuration asks for fail-fast behavior.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ecs_notifier.core.classifier import classify_status
from ecs_notifier.core.config.settings import NotifierConfig
from ecs_notifier.core.normalizer import parse_trigger_message
from ecs_notifier.domain.errors import NotifierError
from ecs_notifier.notification.base import Notifier
from ecs_notifier.notification.payload import SlackMessage, build_deployment_message
from ecs_notifier.transport.envelope import parse_sns_record, sns_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFailure:
    """
    A record of a batch that could not be processed.

    Parameters
    ----------
    index
        Zero-based position of the record in ``event["Records"]``.
    error
        The error raised while processing it.
    """

    index: int
    error: NotifierError


@dataclass
class BatchReport:
    """Outcome of processing one SNS event."""

    delivered: int = 0
    failures: List[RecordFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def as_dict(self) -> Dict[str, int]:
        return {"delivered": self.delivered, "failed": len(self.failures)}


class DeploymentNotificationPipeline:
    """
    Turns CodeDeploy trigger messages into delivered Slack notifications.

    Parameters
    ----------
    cfg
        Notifier configuration, loaded once by the caller.
    notifier
        Delivery client (Slack webhook, or a fake in tests).
    """

    def __init__(self, cfg: NotifierConfig, notifier: Notifier):
        self._cfg = cfg
        self._notifier = notifier

    @property
    def config(self) -> NotifierConfig:
        return self._cfg

    def process_message(self, message: str) -> SlackMessage:
        """
        Run one trigger message through the whole pipeline.

        Returns
        -------
        SlackMessage
            The message that was delivered.

        Raises
        ------
        MalformedEnvelope, MalformedSubField
            If the message cannot be decoded; nothing is delivered.
        DeliveryFailure
            If the notifier rejects the message.
        """
        event = parse_trigger_message(message)
        tier = classify_status(event.unified_status)
        logger.debug(
            "Deployment %s status %r classified as %s",
            event.deployment_id,
            event.unified_status,
            tier.value,
        )

        slack_message = build_deployment_message(event, tier, self._cfg)
        self._notifier.notify(slack_message)
        return slack_message

    def process_sns_event(self, event: Dict[str, Any]) -> BatchReport:
        """
        Process every record of an SNS event, one at a time.

        Parameters
        ----------
        event
            SNS event (``{"Records": [...]}``).

        Returns
        -------
        BatchReport
            Number of delivered messages and the failed records.

        Raises
        ------
        NotifierError
            Only when ``fail_fast`` is configured: the first failure is
            re-raised and the remaining records are not processed.
        """
        report = BatchReport()

        for index, raw_record in enumerate(sns_records(event)):
            try:
                record = parse_sns_record(raw_record)
                logger.info("[%s %s] Message = %s", record.event_source, record.timestamp, record.message)
                self.process_message(record.message)
            except NotifierError as e:
                logger.exception("Failed to process SNS record %d", index)
                if self._cfg.fail_fast:
                    raise
                report.failures.append(RecordFailure(index=index, error=e))
            else:
                report.delivered += 1

        logger.info("Processed SNS event: %d delivered, %d failed", report.delivered, len(report.failures))
        return report

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from ecs_notifier.core.config.settings import SlackConfig
from ecs_notifier.domain.errors import DeliveryFailure
from ecs_notifier.notification.payload import SlackMessage

logger = logging.getLogger(__name__)

ACK_BODY = "ok"


@dataclass(frozen=True)
class SlackWebhookConfig:
    """
    Configuration for Slack webhook delivery.

    Parameters
    ----------
    url
        Incoming-webhook URL.
    timeout_s
        HTTP request timeout in seconds.
    verify_tls
        Whether to verify TLS certificates.
    """

    url: str
    timeout_s: float = 5.0
    verify_tls: bool = True

    @classmethod
    def from_slack_config(cls, cfg: SlackConfig) -> "SlackWebhookConfig":
        return cls(url=cfg.webhook_url, timeout_s=cfg.timeout_s, verify_tls=cfg.verify_tls)


class SlackWebhookNotifier:
    """
    Notification sender that posts messages to a Slack incoming webhook.

    Slack acknowledges an accepted message with the literal body ``ok``;
    anything else is treated as a failed delivery.

    Notes
    -----
    - This class performs side effects (network I/O).
    - No retries are attempted; failures are raised to the caller.
    """

    def __init__(self, cfg: SlackWebhookConfig):
        """
        Initialize the webhook notifier.

        Parameters
        ----------
        cfg
            Webhook configuration.
        """
        self._cfg = cfg

    def notify(self, message: SlackMessage) -> None:
        """
        Post a Slack message to the configured webhook.

        Parameters
        ----------
        message
            Composed message; serialized with ``SlackMessage.to_dict()``.

        Raises
        ------
        DeliveryFailure
            On any transport error, or if the response body is not ``ok``.
        """
        body = json.dumps(message.to_dict())
        headers = {"Content-Type": "application/json"}

        try:
            r = requests.post(
                self._cfg.url,
                data=body,
                headers=headers,
                timeout=self._cfg.timeout_s,
                verify=self._cfg.verify_tls,
            )
        except requests.RequestException as e:
            raise DeliveryFailure(f"Slack message failed to send: {e}") from e

        if r.text != ACK_BODY:
            raise DeliveryFailure(
                f"Slack message failed to send (HTTP {r.status_code})",
                body=r.text,
            )

        logger.debug("Slack message delivered to %s", message.channel)

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ecs_notifier.core.config.settings import NotifierConfig
from ecs_notifier.domain.models import NormalizedEvent, SeverityTier

CONSOLE_URL = "https://{region}.console.aws.amazon.com/codesuite/codedeploy/deployments/{deployment_id}"


@dataclass(frozen=True)
class SlackField:
    """One title/value cell of a Slack attachment."""
    title: str
    value: str
    short: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"title": self.title, "value": self.value}
        if self.short:
            d["short"] = True
        return d


@dataclass(frozen=True)
class SlackAttachment:
    """Colored attachment carrying the summary fields of a notification."""
    color: str
    ts: int
    fields: Tuple[SlackField, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"color": self.color, "ts": self.ts}
        if self.fields:
            d["fields"] = [f.to_dict() for f in self.fields]
        return d


@dataclass(frozen=True)
class SlackMessage:
    """
    Slack incoming-webhook message.

    Parameters
    ----------
    username
        Sender display name.
    icon_emoji
        Sender icon.
    channel
        Target channel.
    text
        Markdown body (title, deep link and event details).
    attachments
        Attachments; the composer always emits exactly one.
    """
    username: str
    icon_emoji: str
    channel: str
    text: str = ""
    attachments: Tuple[SlackAttachment, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the JSON document posted to the webhook.

        Empty values are omitted, matching the webhook's optional fields.
        """
        d: Dict[str, Any] = {}
        for key in ("username", "icon_emoji", "channel", "text"):
            value = getattr(self, key)
            if value:
                d[key] = value
        if self.attachments:
            d["attachments"] = [a.to_dict() for a in self.attachments]
        return d


def title_case(label: str) -> str:
    """
    Upper-case the first letter of every word.

    A word starts after any character that is not a letter, digit or "_",
    so "pre-prod" becomes "Pre-Prod". The rest of each word is left
    untouched, so "QA" stays "QA".
    """
    out = []
    prev = ""
    for ch in label:
        starts_word = not prev or not (prev.isalnum() or prev == "_")
        out.append(ch.upper() if starts_word else ch)
        prev = ch
    return "".join(out)


def render_event_details(event: NormalizedEvent) -> str:
    """
    Render the optional sections of a notification body.

    Sections appear only when the matching sub-structure is present, in the
    order: lifecycle events, deployment overview, error information, rollback
    information.

    Parameters
    ----------
    event
        Normalized deployment event.

    Returns
    -------
    str
        Slack markdown, possibly empty.
    """
    lines: List[str] = []

    if event.lifecycle_events:
        lines.append("*Lifecycle Events*\n")
        for i, lc in enumerate(event.lifecycle_events, start=1):
            line = f"*Event {i}:* {lc.event} [*{lc.event_status}*]"
            if lc.end_time:
                line += f" {lc.end_time}"
            lines.append(line + "\n")

    ov = event.deployment_overview
    if ov is not None:
        lines.append("*Deployment Overview*\n")
        lines.append(
            f"Succeeded: *{ov.succeeded}* | "
            f"Failed: *{ov.failed}* | "
            f"Skipped: *{ov.skipped}* | "
            f"InProgress: *{ov.in_progress}* | "
            f"Pending: *{ov.pending}*\n\n"
        )

    err = event.error_information
    if err is not None:
        lines.append("*Error Information*\n")
        lines.append(f"Error Code: *{err.code}*\n")
        lines.append(f"{err.message}\n")

    rb = event.rollback_information
    if rb is not None:
        lines.append("*Rollback Information*\n")
        lines.append(f"{rb.message}\n")

    return "".join(lines)


def _render_title(event: NormalizedEvent, tier: SeverityTier) -> str:
    # Slack link markup: <URL|anchor text>
    url = CONSOLE_URL.format(region=event.region, deployment_id=event.deployment_id)
    anchor = f":mega: AWS CodeDeploy Notification | {event.region} | Account: {event.account_id}"
    return f"*<{url}|{anchor}>*\n\n{tier.icon} *ECS Deployment Update*\n\n"


def build_deployment_message(
    event: NormalizedEvent,
    tier: SeverityTier,
    cfg: NotifierConfig,
    now: Optional[float] = None,
) -> SlackMessage:
    """
    Compose the Slack message for a deployment event.

    The body holds the deep-link title, the tier icon heading and the optional
    detail sections. The single attachment carries the tier color, the unix
    timestamp and the Environment / Deployment ID / Status fields.

    Parameters
    ----------
    event
        Normalized deployment event.
    tier
        Severity tier of ``event.unified_status``.
    cfg
        Notifier configuration (sender, channel, environment label).
    now
        Unix time to stamp on the attachment. Defaults to the current time.

    Returns
    -------
    SlackMessage
        Message ready for a notifier.
    """
    ts = int(time.time() if now is None else now)

    attachment = SlackAttachment(
        color=tier.color,
        ts=ts,
        fields=(
            SlackField(title="Environment", value=title_case(cfg.environment), short=True),
            SlackField(title="Deployment ID", value=event.deployment_id, short=True),
            SlackField(title="Status", value=f"*{event.unified_status.upper()}*"),
        ),
    )

    return SlackMessage(
        username=cfg.slack.username,
        icon_emoji=cfg.slack.icon_emoji,
        channel=cfg.slack.channel,
        text=_render_title(event, tier) + render_event_details(event),
        attachments=(attachment,),
    )

"""
Unit tests for ecs_notifier.domain.models.

These tests verify:
- SeverityTier values and their color/icon bindings
- Dataclass immutability (frozen models)
- Defaults of raw and normalized events
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from ecs_notifier.domain.models import (
    DeploymentOverview,
    NormalizedEvent,
    RawTriggerEvent,
    SeverityTier,
)


def test_severity_tier_values() -> None:
    assert SeverityTier.SUCCESS.value == "SUCCESS"
    assert SeverityTier.NEUTRAL.value == "NEUTRAL"
    assert SeverityTier.FAILURE.value == "FAILURE"


def test_severity_tier_color_and_icon() -> None:
    """
    Each tier is bound to a fixed Slack color and emoji.
    """
    assert (SeverityTier.SUCCESS.color, SeverityTier.SUCCESS.icon) == ("good", ":white_check_mark:")
    assert (SeverityTier.NEUTRAL.color, SeverityTier.NEUTRAL.icon) == ("grey", ":arrows_counterclockwise:")
    assert (SeverityTier.FAILURE.color, SeverityTier.FAILURE.icon) == ("danger", ":x:")


def test_raw_event_defaults_are_empty() -> None:
    raw = RawTriggerEvent()
    assert raw.deployment_id == ""
    assert raw.lifecycle_events == ""
    assert raw.rollback_information == ""


def test_normalized_event_defaults() -> None:
    ev = NormalizedEvent()
    assert ev.lifecycle_events == ()
    assert ev.deployment_overview is None
    assert ev.error_information is None
    assert ev.rollback_information is None
    assert ev.unified_status == ""


def test_normalized_event_is_frozen() -> None:
    ev = NormalizedEvent(deployment_id="d-1")
    with pytest.raises(FrozenInstanceError):
        ev.unified_status = "SUCCEEDED"  # type: ignore[misc]


def test_deployment_overview_is_frozen() -> None:
    ov = DeploymentOverview(succeeded=1)
    with pytest.raises(FrozenInstanceError):
        ov.failed = 2  # type: ignore[misc]

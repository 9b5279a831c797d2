"""
Unit tests for ecs_notifier.core.classifier.

classify_status ignores case and underscores, and falls back to FAILURE for
anything it does not recognize.
"""

from __future__ import annotations

import pytest

from ecs_notifier.core.classifier import classify_status
from ecs_notifier.domain.models import SeverityTier


@pytest.mark.parametrize("status", ["SUCCEEDED", "Succeeded", "succeeded", "SUCCEE_DED"])
def test_classify_success(status: str) -> None:
    assert classify_status(status) is SeverityTier.SUCCESS


@pytest.mark.parametrize("status", ["CREATED", "IN_PROGRESS", "InProgress", "inprogress", "READY", "Ready"])
def test_classify_neutral(status: str) -> None:
    assert classify_status(status) is SeverityTier.NEUTRAL


@pytest.mark.parametrize("status", ["", "FAILED", "STOPPED", "Pending", "unknown"])
def test_classify_failure_default(status: str) -> None:
    """
    Unknown and empty statuses must never be reported as success.
    """
    assert classify_status(status) is SeverityTier.FAILURE

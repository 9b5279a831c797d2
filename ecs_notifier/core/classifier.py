from __future__ import annotations

from ecs_notifier.domain.models import SeverityTier

_SUCCESS_STATUSES = frozenset({"SUCCEEDED"})
_NEUTRAL_STATUSES = frozenset({"CREATED", "INPROGRESS", "READY"})


def classify_status(status: str) -> SeverityTier:
    """
    Map a unified deployment status to a severity tier.

    Comparison ignores case and underscores, so "IN_PROGRESS" and
    "InProgress" are the same status. Unknown and empty statuses are
    FAILURE; they are never reported as a success.

    Parameters
    ----------
    status
        Unified status of a normalized event.

    Returns
    -------
    SeverityTier
        SUCCESS, NEUTRAL or FAILURE.
    """
    key = status.upper().replace("_", "")

    if key in _SUCCESS_STATUSES:
        return SeverityTier.SUCCESS
    if key in _NEUTRAL_STATUSES:
        return SeverityTier.NEUTRAL
    return SeverityTier.FAILURE

from __future__ import annotations

from typing import Any, Dict, Optional

from ecs_notifier.bootstrap import build_pipeline
from ecs_notifier.runtime.pipeline import DeploymentNotificationPipeline

# Built on the first invocation and reused while the Lambda container is warm.
_pipeline: Optional[DeploymentNotificationPipeline] = None


def _get_pipeline() -> DeploymentNotificationPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline()
    return _pipeline


def handler(event: Dict[str, Any], context: Any) -> Dict[str, int]:
    """
    AWS Lambda entry point for SNS-delivered CodeDeploy triggers.

    Returns
    -------
    dict
        ``{"delivered": n, "failed": m}`` for the invocation.
    """
    report = _get_pipeline().process_sns_event(event)
    return report.as_dict()

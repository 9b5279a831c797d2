from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ecs_notifier.core.config.settings import NotifierConfig, load_app_config
from ecs_notifier.logging_setup import setup_logging
from ecs_notifier.notification.base import Notifier
from ecs_notifier.notification.slack_notifier import SlackWebhookConfig, SlackWebhookNotifier
from ecs_notifier.runtime.pipeline import DeploymentNotificationPipeline


def build_notifier(cfg: NotifierConfig) -> SlackWebhookNotifier:
    return SlackWebhookNotifier(SlackWebhookConfig.from_slack_config(cfg.slack))


def build_pipeline(config_path: Optional[str] = None, notifier: Optional[Notifier] = None) -> DeploymentNotificationPipeline:
    """
    Load configuration, configure logging and wire the pipeline.

    A ``.env`` file in the working directory is loaded first; variables
    already present in the environment win over it.

    Parameters
    ----------
    config_path
        Optional YAML config path.
    notifier
        Delivery client override (e.g. a dry-run printer). Defaults to the
        Slack webhook notifier built from the config.
    """
    load_dotenv(Path.cwd() / ".env")

    cfg = load_app_config(config_path)
    setup_logging(cfg.log_level, service_name=cfg.service_name, environment=cfg.environment)

    return DeploymentNotificationPipeline(cfg=cfg, notifier=notifier or build_notifier(cfg))

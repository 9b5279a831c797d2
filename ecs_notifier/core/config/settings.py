from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

FALLBACK = "*fallback*"


@dataclass(frozen=True)
class SlackConfig:
    """Slack incoming-webhook settings (endpoint, target channel, sender)."""
    webhook_url: str = FALLBACK
    channel: str = FALLBACK
    username: str = "aws"
    icon_emoji: str = ":rocket:"
    timeout_s: float = 5.0
    verify_tls: bool = True


@dataclass(frozen=True)
class NotifierConfig:
    """
    Root configuration of the deployment notifier.

    Loaded once per process and passed explicitly to the pipeline, so nothing
    below the entry points reads the environment.
    """
    slack: SlackConfig = SlackConfig()
    environment: str = "Testing"
    fail_fast: bool = False
    log_level: str = "INFO"
    service_name: str = "ecs-deploy-notifier"


# env var -> (section, key); section None means root
_ENV_KEYS = {
    "SLACK_WEBHOOK_URL": ("slack", "webhook_url"),
    "SLACK_CHANNEL": ("slack", "channel"),
    "SLACK_USERNAME": ("slack", "username"),
    "SLACK_ICON_EMOJI": ("slack", "icon_emoji"),
    "SLACK_TIMEOUT_S": ("slack", "timeout_s"),
    "SLACK_VERIFY_TLS": ("slack", "verify_tls"),
    "ENVIRONMENT": (None, "environment"),
    "NOTIFIER_FAIL_FAST": (None, "fail_fast"),
    "LOG_LEVEL": (None, "log_level"),
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def _positive_timeout(value: Any, default: float) -> float:
    """A timeout of zero or less means "use the default"."""
    timeout = float(value)
    return timeout if timeout > 0 else default


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must contain a YAML mapping at the root")
    return data


def _resolve_config_path(path: Optional[str], environ: Mapping[str, str]) -> Optional[Path]:
    """
    Resolve the YAML config location.

    Priority:
    1) explicit path argument (must exist)
    2) NOTIFIER_CONFIG env var (must exist)
    3) ./config.yaml if present, otherwise no file
    """
    explicit = path or environ.get("NOTIFIER_CONFIG")
    if explicit:
        cfg_path = Path(explicit).expanduser().resolve()
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config not found: {cfg_path}")
        return cfg_path

    candidate = Path("config.yaml").resolve()
    return candidate if candidate.exists() else None


def load_app_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> NotifierConfig:
    """
    Load notifier configuration.

    Values are layered as defaults < YAML file < environment variables. Empty
    environment variables count as unset.

    Parameters
    ----------
    path
        Explicit path to a YAML file. If None, uses default resolution.
    environ
        Environment mapping to read. Defaults to ``os.environ``.

    Returns
    -------
    NotifierConfig
        Parsed configuration.

    Raises
    ------
    FileNotFoundError
        If an explicitly requested config file does not exist.
    ValueError
        If the YAML root is not a mapping or a value cannot be converted.
    """
    env = os.environ if environ is None else environ

    cfg_path = _resolve_config_path(path, env)
    raw = _read_yaml(cfg_path) if cfg_path is not None else {}

    root: Dict[str, Any] = {k: v for k, v in raw.items() if k != "slack" and v is not None}
    slack: Dict[str, Any] = {k: v for k, v in (raw.get("slack") or {}).items() if v is not None}

    for var, (section, key) in _ENV_KEYS.items():
        value = env.get(var)
        if not value:
            continue
        if section == "slack":
            slack[key] = value
        else:
            root[key] = value

    defaults = SlackConfig()
    slack_cfg = SlackConfig(
        webhook_url=str(slack.get("webhook_url", defaults.webhook_url)),
        channel=str(slack.get("channel", defaults.channel)),
        username=str(slack.get("username", defaults.username)),
        icon_emoji=str(slack.get("icon_emoji", defaults.icon_emoji)),
        timeout_s=_positive_timeout(slack.get("timeout_s", defaults.timeout_s), defaults.timeout_s),
        verify_tls=_as_bool(slack.get("verify_tls", defaults.verify_tls)),
    )

    base = NotifierConfig()
    return NotifierConfig(
        slack=slack_cfg,
        environment=str(root.get("environment", base.environment)),
        fail_fast=_as_bool(root.get("fail_fast", base.fail_fast)),
        log_level=str(root.get("log_level", base.log_level)).upper(),
        service_name=str(root.get("service_name", base.service_name)),
    )

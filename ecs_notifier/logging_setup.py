from __future__ import annotations

import logging
import time

from pythonjsonlogger.json import JsonFormatter


class _ServiceJsonFormatter(JsonFormatter):
    """JSON formatter that stamps every record with service and environment."""

    def __init__(self, *args, service_name: str, environment: str, **kwargs):
        super().__init__(*args, **kwargs)
        self._service_name = service_name
        self._environment = environment

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = self._service_name
        log_record["environment"] = self._environment
        log_record["timestamp"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created))


def setup_logging(level: str = "INFO", service_name: str = "ecs-deploy-notifier", environment: str = "Testing") -> None:
    """
    Configure root logging with a single JSON stream handler.

    Existing root handlers are replaced (the Lambda runtime installs its own).

    Parameters
    ----------
    level
        Log level name, e.g. "INFO" or "DEBUG".
    service_name
        Value of the ``service`` key on every record.
    environment
        Value of the ``environment`` key on every record.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(
        _ServiceJsonFormatter(
            "%(timestamp)s %(levelname)s %(name)s %(message)s",
            service_name=service_name,
            environment=environment,
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

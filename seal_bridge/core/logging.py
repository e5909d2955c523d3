"""Structured logging setup shared by the bridge and the proxy API.

Call ``configure_logging`` once at startup; modules keep using
``logging.getLogger(__name__)`` and pass structured fields through ``extra``.
"""
from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

LOG_FIELDS = ("asctime", "levelname", "name", "message", "service")

FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(service)s] %(name)s: %(message)s"


class ServiceNameFilter(logging.Filter):
    """Stamp every record with the service name."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


def create_json_formatter() -> JsonFormatter:
    format_string = " ".join(f"%({field})s" for field in LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)


def configure_logging(level: str = "INFO", service_name: str = "seal-bridge", json_output: bool = True) -> None:
    """Install a single stream handler on the root logger."""
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(create_json_formatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    handler.addFilter(ServiceNameFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]

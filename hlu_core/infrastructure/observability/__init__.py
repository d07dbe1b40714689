"""Observability infrastructure: structured logging configuration."""

from hlu_core.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_service,
)

__all__: list[str] = ["configure_structlog", "get_logger_for_service"]

"""Structured logging shared by the application services.

A service mixes in LoggingMixin, calls ``_init_logger()`` once its
collaborators are stored, and asks ``_log_operation()`` for a logger per
operation:

    class IncidEditorService(LoggingMixin):
        def __init__(self, repository: IncidRepositoryProtocol) -> None:
            self._repository = repository
            self._init_logger()

        def load(self, key: str) -> Incid:
            log = self._log_operation("load", key=key)
            log.info("incid_loading")
"""

import structlog

from hlu_core.application.edit_context import get_current_incid


class LoggingMixin:
    """Binds ``service`` and ``component`` once, ``operation`` per call.

    When an incid is being edited its key is bound as ``incid`` unless the
    caller already passed one.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "editor") -> None:
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Return a logger bound to one operation and its context."""
        incid = get_current_incid()
        if incid:
            context.setdefault("incid", incid)
        return self._log.bind(operation=operation, **context)

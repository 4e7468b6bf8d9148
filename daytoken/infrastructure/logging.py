from typing import Any

import structlog
from structlog.stdlib import BoundLogger


def get_logger(name: str, **context: Any) -> BoundLogger:
    """Return a structlog logger for a module, pre-bound with the service name and any extra context.

    Callers must never bind token values or shared secrets.
    """

    return structlog.get_logger(name, service="daytoken", module=name, **context)

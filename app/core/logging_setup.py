from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(company_id)s | %(show_id)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOG_COMPANY_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("log_company_id", default=None)
LOG_SHOW_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("log_show_id", default=None)


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.company_id = LOG_COMPANY_ID.get() or "-"
        record.show_id = LOG_SHOW_ID.get() or "-"
        return True


@contextmanager
def log_context(
    company_id: Optional[str] = None,
    show_id: Optional[str] = None,
) -> Iterator[None]:
    tokens = []
    if company_id is not None:
        tokens.append((LOG_COMPANY_ID, LOG_COMPANY_ID.set(company_id)))
    if show_id is not None:
        tokens.append((LOG_SHOW_ID, LOG_SHOW_ID.set(show_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def configure_logging(level: int | str = logging.INFO, force: bool = False) -> logging.Logger:
    root = logging.getLogger()
    if getattr(root, "_scene_logging_configured", False) and not force:
        return root

    if force:
        for handler in list(root.handlers):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    # Root-logger filters never see records propagated from child loggers.
    handler.addFilter(ContextFilter())

    root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(True)
    root._scene_logging_configured = True
    return root

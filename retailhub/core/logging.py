import logging
import uuid
from contextvars import ContextVar

from retailhub.core.config import settings

request_id_var: ContextVar[str] = ContextVar('request_id', default='-')


class RequestIdFilter(logging.Filter):
    """Stamp every record with the correlation id of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def new_request_id(incoming: str | None = None) -> str:
    rid = incoming or uuid.uuid4().hex
    request_id_var.set(rid)
    return rid


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure the root logger with a single console handler.

    Safe to call more than once; existing root handlers are replaced so
    uvicorn reloads and test sessions don't duplicate lines.
    """
    root = logging.getLogger()
    level_name = (level or settings.LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or settings.LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

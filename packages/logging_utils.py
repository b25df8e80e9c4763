import logging
import os

from .request_context import request_id_var, upload_id_var

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "request_id=%(request_id)s upload_id=%(upload_id)s %(message)s"
)


def _stamp(record: logging.LogRecord) -> logging.LogRecord:
    if not hasattr(record, "request_id"):
        record.request_id = request_id_var.get() or "-"
    if not hasattr(record, "upload_id"):
        record.upload_id = upload_id_var.get() or "-"
    return record


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.upload_id = upload_id_var.get() or "-"
        return True


class SafeFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return super().format(_stamp(record))


def setup_logging(level: str | None = None) -> None:
    level = (level or os.getenv("FITNESS_LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    # Records created by third-party code still need the context fields.
    base_factory = logging.getLogRecordFactory()
    if not getattr(base_factory, "_fitness_stamped", False):
        def record_factory(*args, **kwargs):
            return _stamp(base_factory(*args, **kwargs))

        record_factory._fitness_stamped = True
        logging.setLogRecordFactory(record_factory)

    handler = logging.StreamHandler()
    handler.setFormatter(SafeFormatter(LOG_FORMAT))
    handler.addFilter(ContextFilter())
    root.addHandler(handler)
    root.setLevel(level)

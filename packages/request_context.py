from contextvars import ContextVar
from contextlib import contextmanager


request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
upload_id_var: ContextVar[str | None] = ContextVar("upload_id", default=None)


@contextmanager
def upload_context(upload_id: str | None):
    token = upload_id_var.set(str(upload_id) if upload_id is not None else None)
    try:
        yield
    finally:
        upload_id_var.reset(token)

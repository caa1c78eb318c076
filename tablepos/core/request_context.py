from __future__ import annotations

from contextvars import ContextVar


_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)
_DEVICE_ID_CTX: ContextVar[str | None] = ContextVar("device_id", default=None)


def set_request_context(*, request_id: str | None = None, device_id: str | None = None) -> None:
    if request_id is not None:
        _REQUEST_ID_CTX.set(request_id)
    if device_id is not None:
        _DEVICE_ID_CTX.set(device_id)


def get_request_id() -> str | None:
    return _REQUEST_ID_CTX.get()


def get_device_id() -> str | None:
    return _DEVICE_ID_CTX.get()


def clear_request_context() -> None:
    _REQUEST_ID_CTX.set(None)
    _DEVICE_ID_CTX.set(None)

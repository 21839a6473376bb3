"""Structured logging helpers for the configuration boot sequence.

Purpose
    Emit every diagnostic through one package logger with a predictable
    structured payload, without forcing a logging backend on the host
    application.

Contents
    - ``TRACE_ID``: context variable carrying the active boot's trace id.
    - ``get_logger``: the package logger (silent until the host adds handlers).
    - ``bind_trace_id`` / ``new_trace_id``: manage the active trace id.
    - ``log_debug`` / ``log_info`` / ``log_error``: structured emitters.
    - ``make_event``: builder for ``layer``/``path`` event payloads.

System Integration
    Adapters, the layering step, and the boot orchestrator all log through
    these helpers; each record carries ``extra={"context": {...}}`` with the
    trace id so one boot's records can be correlated.
"""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("lib_typed_config_trace_id", default=None)

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_typed_config")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers."""

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Bind or clear the active trace identifier.

    Examples
    --------
    >>> bind_trace_id('boot-1')
    >>> TRACE_ID.get()
    'boot-1'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def new_trace_id() -> str:
    """Bind a fresh random trace identifier and return it."""

    trace_id = uuid.uuid4().hex
    bind_trace_id(trace_id)
    return trace_id


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(layer: str, path: str | None, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build a structured payload for a layer lifecycle event.

    >>> make_event('profile', 'application-prod.conf', {'profile': 'prod'})
    {'layer': 'profile', 'path': 'application-prod.conf', 'profile': 'prod'}
    """

    event: dict[str, Any] = {"layer": layer, "path": path}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    context = {"trace_id": TRACE_ID.get()}
    context.update(fields)
    _LOGGER.log(level, message, extra={"context": context})

"""Structured logging helpers shared by the generator and its adapters.

Purpose
    Keep every emission of logging data predictable and contextual without
    forcing applications to adopt a specific logging backend.

Contents
    - ``RUN_ID``: context variable storing the active generation run identifier.
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``bind_run_id``: binds or clears the active run identifier.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: emit
      structured entries via a single private emitter.
    - ``make_event``: convenience builder for structured event payloads.

System Integration
    Used by the composition root and the adapters so all diagnostics carry the
    same run metadata. The domain layer stays free from logging concerns.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

RUN_ID: ContextVar[str | None] = ContextVar("stork_launcher_run_id", default=None)
"""Identifier of the generation run currently emitting events."""

_LOGGER: Final[logging.Logger] = logging.getLogger("stork_launcher")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers."""

    return _LOGGER


def bind_run_id(run_id: str | None) -> None:
    """Bind or clear the active run identifier.

    Examples
    --------
    >>> bind_run_id('run-1')
    >>> RUN_ID.get()
    'run-1'
    >>> bind_run_id(None)
    >>> RUN_ID.get() is None
    True
    """

    RUN_ID.set(run_id)


def log_debug(message: str, **fields: Any) -> None:
    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    _emit(logging.INFO, message, fields)


def log_warning(message: str, **fields: Any) -> None:
    _emit(logging.WARNING, message, fields)


def log_error(message: str, **fields: Any) -> None:
    _emit(logging.ERROR, message, fields)


def make_event(
    source: str | None,
    platform: object | None,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a structured logging payload for generation lifecycle events.

    Inputs
        source: Identity of the configuration being generated.
        platform: Platform being processed, if any; rendered as a string.
        payload: Optional mapping with extra diagnostic detail.

    Examples
    --------
    >>> make_event('demo.yml', None, {'artifacts': 3})
    {'source': 'demo.yml', 'platform': None, 'artifacts': 3}
    """

    event: dict[str, Any] = {"source": source, "platform": str(platform) if platform is not None else None}
    if payload:
        event |= dict(payload)
    return event


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    context = {"run_id": RUN_ID.get()}
    context.update(fields)
    _LOGGER.log(level, _render(message, context), extra={"context": context})


def _render(message: str, context: Mapping[str, Any]) -> str:
    """Append non-empty context fields so plain handlers stay readable."""

    details = " ".join(f"{key}={value}" for key, value in context.items() if value is not None and key != "run_id")
    return f"{message} {details}" if details else message

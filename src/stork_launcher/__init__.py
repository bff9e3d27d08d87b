"""Public package surface for ``stork_launcher``.

Exports the generator entry points, the launcher configuration types, and the
error taxonomy so ``import stork_launcher`` is enough for typical callers.
"""

from __future__ import annotations

from .core import Generator, generate_launchers
from .domain.configuration import Configuration, DaemonMethod, LauncherModel, LauncherType, Platform, WorkingDirMode
from .domain.errors import (
    ArgumentError,
    CollaboratorError,
    ConfigParseError,
    GenerationError,
    LauncherError,
    ResourceNotFoundError,
    TemplateError,
)
from .observability import bind_run_id, get_logger

__all__ = [
    "ArgumentError",
    "CollaboratorError",
    "ConfigParseError",
    "Configuration",
    "DaemonMethod",
    "GenerationError",
    "Generator",
    "LauncherError",
    "LauncherModel",
    "LauncherType",
    "Platform",
    "ResourceNotFoundError",
    "TemplateError",
    "WorkingDirMode",
    "bind_run_id",
    "generate_launchers",
    "get_logger",
]

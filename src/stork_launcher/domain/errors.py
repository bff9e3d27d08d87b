"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by the dispatch planner, the adapters,
the composition root, and consuming applications. The hierarchy lives in the
domain layer so outer layers may depend on it without creating cycles.

Contents
--------
* :class:`LauncherError` – umbrella base class for every generation failure.
* :class:`ArgumentError` – invalid caller input (output directory, platform,
  daemon method combination).
* :class:`ConfigParseError` – a launcher config file could not be turned into
  a :class:`~stork_launcher.domain.configuration.Configuration`.
* :class:`CollaboratorError` – base for renderer and resource failures.
* :class:`TemplateError` / :class:`ResourceNotFoundError` – collaborator
  failures raised by the adapters.
* :class:`GenerationError` – wraps collaborator and I/O failures with the
  owning configuration and platform.

System Role
-----------
Callers catch :class:`LauncherError` to handle all library failures uniformly
and inspect :attr:`LauncherError.retryable` to tell their own mistakes apart
from failures that may succeed on a rerun.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .configuration import Platform


class LauncherError(Exception):
    """Base type for all exceptions emitted by ``stork_launcher``."""

    retryable: bool = False


class ArgumentError(LauncherError, ValueError):
    """Raised when the caller supplied input the generator cannot act on.

    Typical Sources
    ---------------
    Missing or unwritable output directories, platforms without a dispatch
    route, and daemon methods that do not apply to a platform. Never retried.

    Attributes
    ----------
    generated:
        Configurations completed before a dispatch failure aborted the run;
        ``None`` when raised outside a generation run.
    """

    generated: int | None = None


class ConfigParseError(LauncherError):
    """Raised when a launcher config file fails to parse or validate.

    Attributes
    ----------
    source:
        Path of the offending file, or ``None`` for in-memory mappings.
    """

    def __init__(self, message: str, *, source: str | Path | None = None) -> None:
        super().__init__(message)
        self.source = str(source) if source is not None else None


class CollaboratorError(LauncherError):
    """Failure raised by a template renderer or resource copier."""

    retryable = True


class TemplateError(CollaboratorError):
    """Template identifier is unknown or the template raised while rendering."""


class ResourceNotFoundError(CollaboratorError):
    """Resource identifier did not resolve to a bundled or helper file."""

    retryable = False


class GenerationError(LauncherError):
    """Wrap a failure that aborted generation for one configuration.

    Why
    ----
    The run is fail-fast; callers need to know which configuration and which
    platform broke, and how many configurations completed before it.

    Attributes
    ----------
    source:
        Source identity of the configuration (config file path or name).
    platform:
        Platform being materialised when the failure happened, if known.
    generated:
        Number of configurations fully generated before this failure.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str,
        platform: Platform | None = None,
        generated: int = 0,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.platform = platform
        self.generated = generated

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        cause = self.__cause__
        if isinstance(cause, LauncherError):
            return cause.retryable
        return isinstance(cause, OSError)

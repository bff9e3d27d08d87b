"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the composition
root can materialise artifacts without depending on Jinja2 or on where
resources physically live.

Contents
--------
* :class:`TemplateRenderer` – renders a template identifier against a model.
* :class:`ResourceCopier` – reads or copies bundled resources byte-for-byte.
* :class:`ConfigurationLoader` – parses a launcher config file.

System Role
-----------
These protocols keep the dispatch planner and the generator testable with
in-memory fakes; the default adapters live under
:mod:`stork_launcher.adapters`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from ..domain.configuration import Configuration, LauncherModel


@runtime_checkable
class TemplateRenderer(Protocol):
    """Render templates into text.

    Why
    ----
    The generator treats rendering as an injected collaborator initialised
    once per process, so alternative engines or test doubles can replace it.
    """

    def initialize(self) -> None:
        """Perform one-time setup; failures propagate immediately."""

    def render(self, template_id: str, model: LauncherModel) -> str:
        """Return rendered text or raise ``TemplateError``."""


@runtime_checkable
class ResourceCopier(Protocol):
    """Resolve static resources that are never templated."""

    def read(self, resource_id: str) -> bytes:
        """Return the resource payload or raise ``ResourceNotFoundError``."""

    def copy(self, resource_id: str, destination: Path) -> Path:
        """Stream the resource to *destination*, creating parent directories."""


@runtime_checkable
class ConfigurationLoader(Protocol):
    """Turn a config file into a validated :class:`Configuration`."""

    def load(self, path: Path) -> Configuration:
        """Parse *path* or raise ``ConfigParseError``."""

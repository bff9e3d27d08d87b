"""Jinja2-backed template renderer.

Purpose
-------
Render launcher templates shipped in ``stork_launcher/templates`` (optionally
overlaid by a user directory) against a :class:`LauncherModel`.

Contents
--------
* :class:`JinjaTemplateRenderer` – explicit, injectable renderer with a single
  :meth:`~JinjaTemplateRenderer.initialize` step.

System Role
-----------
Implements :class:`stork_launcher.application.ports.TemplateRenderer`. The
generator receives an instance instead of reaching for a process-wide global.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from ...domain.configuration import LauncherModel
from ...domain.errors import TemplateError
from ...observability import log_debug, log_error

TEMPLATE_PACKAGE = "stork_launcher"
TEMPLATE_FOLDER = "templates"


class JinjaTemplateRenderer:
    """Render templates by identifier using a lazily built Jinja2 environment.

    Parameters
    ----------
    override_dir:
        Optional directory searched before the bundled templates, allowing
        callers to customise individual template bodies.

    Examples
    --------
    >>> renderer = JinjaTemplateRenderer()
    >>> renderer.initialize()
    >>> renderer.initialized
    True
    """

    def __init__(self, override_dir: str | Path | None = None) -> None:
        self.override_dir = Path(override_dir) if override_dir is not None else None
        self._environment: jinja2.Environment | None = None

    @property
    def initialized(self) -> bool:
        return self._environment is not None

    def initialize(self) -> None:
        """Build the Jinja2 environment once; repeated calls are no-ops."""

        self._ensure_environment()

    def render(self, template_id: str, model: LauncherModel) -> str:
        """Render *template_id* with *model* bound as ``app``.

        Raises
        ------
        TemplateError
            When the template is unknown or raises while rendering.
        """

        environment = self._ensure_environment()
        try:
            template = environment.get_template(template_id)
        except jinja2.TemplateNotFound as exc:
            log_error("template_missing", template=template_id)
            raise TemplateError(f"Unknown template [{template_id}]") from exc
        except jinja2.TemplateSyntaxError as exc:
            log_error("template_invalid", template=template_id, error=str(exc))
            raise TemplateError(f"Template [{template_id}] is invalid: {exc}") from exc
        try:
            return template.render(app=model)
        except jinja2.TemplateError as exc:
            log_error("template_failed", template=template_id, error=str(exc))
            raise TemplateError(f"Template [{template_id}] failed to render: {exc}") from exc

    def _ensure_environment(self) -> jinja2.Environment:
        if self._environment is None:
            self._environment = self._build_environment()
        return self._environment

    def _build_environment(self) -> jinja2.Environment:
        loaders: list[jinja2.BaseLoader] = []
        if self.override_dir is not None:
            if not self.override_dir.is_dir():
                raise TemplateError(f"Template override directory [{self.override_dir}] does not exist")
            loaders.append(jinja2.FileSystemLoader(str(self.override_dir)))
        loaders.append(jinja2.PackageLoader(TEMPLATE_PACKAGE, TEMPLATE_FOLDER))
        # XML-bearing templates escape values with the built-in ``e`` filter.
        environment = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )
        log_debug("renderer_initialized", override_dir=str(self.override_dir) if self.override_dir else None)
        return environment

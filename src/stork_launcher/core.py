"""Composition root for ``stork_launcher``.

Purpose
-------
Provide the entry points that validate the output directory, plan artifacts per
configuration via the dispatch table, and materialise them through the injected
template renderer and resource copier.

Contents
--------
* :class:`Generator` – orchestrates fail-fast generation over configurations.
* :func:`generate_launchers` – convenience wrapper wiring the default adapters.
* :func:`_ensure_output_dir` / :func:`_mark_executable` – filesystem helpers.

System Role
-----------
This module connects the pure planner (:mod:`stork_launcher.application.dispatch`)
with the adapters while emitting structured observability signals. It is the
canonical place to adjust failure policy or wire new collaborators.
"""

from __future__ import annotations

import os
import stat
import uuid
from pathlib import Path
from typing import Iterable, Mapping, Sequence, Union

from .adapters.config_loaders.factory import ConfigurationFactory
from .adapters.resources.bundled import BundledResourceCopier
from .adapters.templates.jinja import JinjaTemplateRenderer
from .application.dispatch import DISPATCH, PlatformPlan, Route, RouteKey, plan_configuration, validate_table
from .application.ports import ConfigurationLoader, ResourceCopier, TemplateRenderer
from .domain.artifacts import Artifact, FragmentKind
from .domain.configuration import Configuration, LauncherModel
from .domain.errors import ArgumentError, ConfigParseError, GenerationError, LauncherError
from .observability import bind_run_id, log_error, log_info, log_warning, make_event

ConfigSource = Union[Configuration, str, Path]


class Generator:
    """Generate launcher artifacts for one or more configurations.

    Parameters
    ----------
    renderer:
        Template renderer; initialised once here so initialisation failures
        surface before any output is written.
    copier:
        Resource copier used for verbatim resources and helper executables.
    loader:
        Config file loader used by :meth:`generate` and the ``read_*`` helpers.
    table:
        Dispatch table; validated at construction.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        copier: ResourceCopier,
        *,
        loader: ConfigurationLoader | None = None,
        table: Mapping[RouteKey, Route] = DISPATCH,
    ) -> None:
        validate_table(table)
        renderer.initialize()
        self.renderer = renderer
        self.copier = copier
        self.loader = loader if loader is not None else ConfigurationFactory()
        self.table = table

    def read_configuration_file(self, config_file: str | Path) -> Configuration:
        configs = self.read_configuration_files([config_file])
        return configs[0]

    def read_configuration_files(self, config_files: Iterable[str | Path] | None) -> list[Configuration]:
        """Parse every file in *config_files*; ``None`` or empty yields ``[]``.

        Raises
        ------
        ConfigParseError
            Naming the first file that failed; no generation has started.
        """

        configs: list[Configuration] = []
        for config_file in config_files or ():
            path = Path(config_file)
            try:
                configs.append(self.loader.load(path))
            except ConfigParseError:
                raise
            except (OSError, LauncherError) as exc:
                raise ConfigParseError(f"Launcher config file [{path}] failed parsing: {exc}", source=path) from exc
        return configs

    def generate(self, source: ConfigSource | Sequence[ConfigSource], output_dir: str | Path | None) -> int:
        """Generate launchers for a configuration, a config file, or a sequence of either."""

        items: Sequence[ConfigSource]
        if isinstance(source, (Configuration, str, Path)):
            items = [source]
        else:
            items = list(source)
        configs = [
            item if isinstance(item, Configuration) else self.read_configuration_file(item) for item in items
        ]
        return self.generate_all(configs, output_dir)

    def generate_all(self, configs: Sequence[Configuration], output_dir: str | Path | None) -> int:
        """Generate every configuration into *output_dir* and return the count.

        Why
        ----
        A single failed configuration aborts the run so callers never ship a
        half-consistent launcher set.

        Returns
        -------
        int
            Number of configurations generated; ``0`` for an empty input.

        Raises
        ------
        ArgumentError
            For an unusable output directory or an unsupported
            platform/daemon-method combination. Dispatch failures carry
            ``generated`` like :class:`GenerationError` does.
        GenerationError
            When rendering, copying, or writing fails; carries ``source``,
            ``platform`` and ``generated``.

        Side Effects
        ------------
        Creates *output_dir* (with parents) and per-artifact subdirectories,
        writes files, binds a fresh run identifier for log correlation.
        """

        target = _ensure_output_dir(output_dir)
        bind_run_id(uuid.uuid4().hex[:12])
        if not configs:
            log_warning("no_configurations", path=str(target))
            return 0

        generated = 0
        for config in configs:
            log_info("configuration_started", **make_event(config.identity, None))
            try:
                self._generate_configuration(config, target, generated)
            except ArgumentError as exc:
                exc.generated = generated
                raise
            generated += 1
            log_info("configuration_generated", **make_event(config.identity, None))
        return generated

    def plan(self, config: Configuration) -> list[PlatformPlan]:
        """Return the artifacts *config* would produce, without writing anything."""

        return plan_configuration(config, self.table)

    def _generate_configuration(self, config: Configuration, output_dir: Path, generated: int) -> None:
        plans = self.plan(config)
        model = LauncherModel.from_configuration(config)
        for plan in plans:
            log_info("platform_started", **make_event(config.identity, plan.platform))
            if plan.reused_from is not None:
                log_info(
                    "shared_artifact_reused",
                    **make_event(config.identity, plan.platform, {"same_as": str(plan.reused_from)}),
                )
            try:
                for artifact in plan.artifacts:
                    self._write_artifact(artifact, output_dir, model)
                    log_info(
                        "artifact_written",
                        **make_event(config.identity, plan.platform, {"kind": artifact.kind, "path": artifact.path.as_posix()}),
                    )
            except (LauncherError, OSError) as exc:
                log_error("generation_failed", **make_event(config.identity, plan.platform, {"error": str(exc)}))
                raise GenerationError(
                    f"Unable to cleanly generate launcher for [{config.identity}] on {plan.platform}: {exc}",
                    source=config.identity,
                    platform=plan.platform,
                    generated=generated,
                ) from exc

    def _write_artifact(self, artifact: Artifact, output_dir: Path, model: LauncherModel) -> Path:
        destination = output_dir.joinpath(*artifact.path.parts)
        if artifact.is_verbatim_copy:
            self.copier.copy(artifact.fragments[0].name, destination)
        else:
            payload = b"".join(self._render_fragment(fragment.kind, fragment.name, model) for fragment in artifact.fragments)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(payload)
        if artifact.executable:
            _mark_executable(destination)
        return destination

    def _render_fragment(self, kind: FragmentKind, name: str, model: LauncherModel) -> bytes:
        if kind is FragmentKind.TEMPLATE:
            return self.renderer.render(name, model).encode("utf-8")
        return self.copier.read(name)


def _ensure_output_dir(output_dir: str | Path | None) -> Path:
    """Create *output_dir* when absent and confirm it is a writable directory."""

    if output_dir is None:
        raise ArgumentError("No output dir was specified")
    target = Path(output_dir)
    if not target.exists():
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArgumentError(f"Unable to create output directory [{target}]: {exc}") from exc
        log_info("output_dir_created", path=str(target))
    if not target.is_dir():
        raise ArgumentError(f"Output directory [{target}] exists but is not a directory")
    if not os.access(target, os.W_OK):
        raise ArgumentError(f"Output directory [{target}] is not writable")
    return target


def _mark_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def generate_launchers(
    source: ConfigSource | Sequence[ConfigSource],
    output_dir: str | Path,
    *,
    helper_dirs: Iterable[str | Path] = (),
    templates_dir: str | Path | None = None,
) -> int:
    """Generate launchers with the default Jinja renderer and bundled copier.

    Parameters
    ----------
    source:
        A :class:`Configuration`, a config file path, or a sequence of either.
    output_dir:
        Directory receiving the generated tree.
    helper_dirs:
        Directories holding service wrapper executables.
    templates_dir:
        Optional directory whose templates override the bundled ones.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from stork_launcher.domain.configuration import LauncherType, Platform
    >>> tmp = TemporaryDirectory()
    >>> cfg = Configuration(name="hello", type=LauncherType.CONSOLE,
    ...                     platforms=frozenset({Platform.LINUX}), main_class="demo.Hello")
    >>> generate_launchers(cfg, tmp.name)
    1
    >>> sorted(p.relative_to(tmp.name).as_posix() for p in Path(tmp.name).rglob("*") if p.is_file())
    ['bin/hello', 'share/helper/java-detect']
    >>> tmp.cleanup()
    """

    generator = Generator(JinjaTemplateRenderer(templates_dir), BundledResourceCopier(helper_dirs))
    return generator.generate(source, output_dir)


__all__ = [
    "ConfigSource",
    "Generator",
    "generate_launchers",
]

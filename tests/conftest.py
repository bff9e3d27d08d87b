"""Shared fixtures: launcher configurations, fake helper binaries, generators."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from stork_launcher.adapters.resources.bundled import BundledResourceCopier
from stork_launcher.adapters.templates.jinja import JinjaTemplateRenderer
from stork_launcher.application.dispatch import JSLWIN_SERVICE_32, JSLWIN_SERVICE_64, WINSW_SERVICE
from stork_launcher.core import Generator
from stork_launcher.domain.configuration import Configuration, DaemonMethod, LauncherType, Platform

HELPER_PAYLOADS = {
    JSLWIN_SERVICE_32: b"MZ\x90\x00jsl-32\x00\xff",
    JSLWIN_SERVICE_64: b"MZ\x90\x00jsl-64\x00\xfe",
    WINSW_SERVICE: b"MZ\x90\x00winsw\x00\xfd",
}


@pytest.fixture()
def helpers_dir(tmp_path: Path) -> Path:
    """Directory holding stand-in service wrapper executables."""

    root = tmp_path / "helpers"
    for resource_id, payload in HELPER_PAYLOADS.items():
        target = root / resource_id
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
    return root


@pytest.fixture()
def helper_payloads() -> dict[str, bytes]:
    return dict(HELPER_PAYLOADS)


@pytest.fixture()
def copier(helpers_dir: Path) -> BundledResourceCopier:
    return BundledResourceCopier([helpers_dir], environ={})


@pytest.fixture()
def generator(copier: BundledResourceCopier) -> Generator:
    return Generator(JinjaTemplateRenderer(), copier)


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture()
def make_config() -> Callable[..., Configuration]:
    """Return a builder for configurations with sensible defaults."""

    def build(**overrides: Any) -> Configuration:
        values: dict[str, Any] = {
            "name": "hello",
            "type": LauncherType.CONSOLE,
            "platforms": frozenset({Platform.LINUX}),
            "main_class": "com.example.Hello",
            "domain": "com.example",
            "display_name": "Hello Server",
            "short_description": "Says hello",
        }
        values.update(overrides)
        return Configuration(**values)

    return build


@pytest.fixture()
def daemon_config(make_config: Callable[..., Configuration]) -> Callable[..., Configuration]:
    """Return a builder for daemon configurations with explicit daemon methods."""

    def build(platforms: set[Platform], **methods: DaemonMethod) -> Configuration:
        return make_config(
            type=LauncherType.DAEMON,
            platforms=frozenset(platforms),
            daemon_methods={Platform[key]: value for key, value in methods.items()},
        )

    return build


@pytest.fixture()
def list_files() -> Callable[[Path], set[str]]:
    """Return a helper listing files under a root as relative POSIX paths."""

    def collect(root: Path) -> set[str]:
        return {path.relative_to(root).as_posix() for path in root.rglob("*") if path.is_file()}

    return collect

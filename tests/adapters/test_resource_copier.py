from __future__ import annotations

import os
from pathlib import Path

import pytest

from stork_launcher.adapters.resources.bundled import HELPERS_DIR_ENV, BundledResourceCopier
from stork_launcher.application.dispatch import JSLWIN_SERVICE_32, WINSW_NET_CONFIG
from stork_launcher.domain.errors import ResourceNotFoundError


def test_reads_packaged_resource() -> None:
    payload = BundledResourceCopier(environ={}).read(WINSW_NET_CONFIG)
    assert payload.startswith(b"<?xml")


def test_copy_is_byte_identical_and_creates_parents(helpers_dir: Path, tmp_path: Path) -> None:
    copier = BundledResourceCopier([helpers_dir], environ={})
    destination = tmp_path / "deep" / "nested" / "svc32.exe"
    copier.copy(JSLWIN_SERVICE_32, destination)
    assert destination.read_bytes() == (helpers_dir / JSLWIN_SERVICE_32).read_bytes()


def test_helper_dir_overrides_package(tmp_path: Path) -> None:
    override = tmp_path / "helpers" / WINSW_NET_CONFIG
    override.parent.mkdir(parents=True)
    override.write_bytes(b"custom")
    copier = BundledResourceCopier([tmp_path / "helpers"], environ={})
    assert copier.read(WINSW_NET_CONFIG) == b"custom"


def test_helper_dirs_from_environment(helpers_dir: Path, tmp_path: Path) -> None:
    extra = tmp_path / "other"
    copier = BundledResourceCopier(environ={HELPERS_DIR_ENV: os.pathsep.join([str(extra), str(helpers_dir)])})
    assert copier.helper_dirs == (extra, helpers_dir)
    assert copier.read(JSLWIN_SERVICE_32).startswith(b"MZ")


def test_missing_helper_binary_raises() -> None:
    copier = BundledResourceCopier(environ={})
    with pytest.raises(ResourceNotFoundError, match="jsl_static.exe"):
        copier.read(JSLWIN_SERVICE_32)


@pytest.mark.parametrize("resource_id", ["", "/etc/passwd", "../secrets", "linux/../../x"])
def test_invalid_identifiers_raise(resource_id: str) -> None:
    with pytest.raises(ResourceNotFoundError):
        BundledResourceCopier(environ={}).read(resource_id)

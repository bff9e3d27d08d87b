"""Resource copier backed by helper directories and package data.

Purpose
-------
Resolve static resources (shell/batch fragments, service wrapper binaries and
their runtime configs) and hand them to the generator byte-for-byte.

Contents
--------
* :data:`HELPERS_DIR_ENV` – environment variable naming an extra helper root.
* :class:`BundledResourceCopier` – searches helper directories first, then the
  ``stork_launcher/resources`` tree shipped with the package.

System Role
-----------
Implements :class:`stork_launcher.application.ports.ResourceCopier`. Service
wrapper executables are not distributed with the package; operators point the
copier at a directory holding them.
"""

from __future__ import annotations

import os
import shutil
from importlib import resources
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, BinaryIO, Iterable, Mapping

from ...domain.errors import ResourceNotFoundError
from ...observability import log_debug

if TYPE_CHECKING:  # pragma: no cover - typing only
    from importlib.resources.abc import Traversable

HELPERS_DIR_ENV = "STORK_LAUNCHER_HELPERS_DIR"
RESOURCE_PACKAGE = "stork_launcher"
RESOURCE_FOLDER = "resources"


class BundledResourceCopier:
    """Locate resources by relative identifier and copy them verbatim.

    Parameters
    ----------
    helper_dirs:
        Directories searched, in order, before the packaged resources.
    environ:
        Mapping used to read :data:`HELPERS_DIR_ENV`; defaults to ``os.environ``.
        Entries are ``os.pathsep`` separated and appended after *helper_dirs*.

    Examples
    --------
    >>> copier = BundledResourceCopier(environ={})
    >>> copier.read("linux/script-functions.sh").startswith(b"#")
    True
    """

    def __init__(
        self,
        helper_dirs: Iterable[str | Path] = (),
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        env = os.environ if environ is None else environ
        roots = [Path(entry) for entry in helper_dirs]
        roots.extend(Path(entry) for entry in env.get(HELPERS_DIR_ENV, "").split(os.pathsep) if entry)
        self.helper_dirs: tuple[Path, ...] = tuple(roots)

    def read(self, resource_id: str) -> bytes:
        """Return the payload of *resource_id*."""

        with self._open(resource_id) as stream:
            return stream.read()

    def copy(self, resource_id: str, destination: Path) -> Path:
        """Stream *resource_id* into *destination*, creating parent directories."""

        destination = Path(destination)
        with self._open(resource_id) as stream:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("wb") as target:
                shutil.copyfileobj(stream, target)
        log_debug("resource_copied", resource=resource_id, path=str(destination))
        return destination

    def _open(self, resource_id: str) -> BinaryIO:
        return self._resolve(resource_id).open("rb")

    def _resolve(self, resource_id: str) -> Traversable:
        """Return the first helper or packaged file matching *resource_id*."""

        parts = _split_identifier(resource_id)
        for root in self.helper_dirs:
            candidate = root.joinpath(*parts)
            if candidate.is_file():
                return candidate
        packaged = resources.files(RESOURCE_PACKAGE).joinpath(RESOURCE_FOLDER)
        for part in parts:
            packaged = packaged.joinpath(part)
        if packaged.is_file():
            return packaged
        searched = ", ".join(str(root) for root in self.helper_dirs) or "no helper directories"
        raise ResourceNotFoundError(f"Unable to find resource {resource_id} (searched {searched} and package data)")


def _split_identifier(resource_id: str) -> tuple[str, ...]:
    """Validate *resource_id* as a relative POSIX path and return its parts."""

    path = PurePosixPath(resource_id)
    if not resource_id or path.is_absolute() or ".." in path.parts:
        raise ResourceNotFoundError(f"Invalid resource identifier [{resource_id}]")
    return path.parts

"""Domain-level launcher configuration value objects.

Purpose
-------
Anchor the immutable :class:`Configuration` that describes one launcher and the
:class:`LauncherModel` projection handed to templates. This module contains no
I/O; parsing lives in :mod:`stork_launcher.adapters.config_loaders`.

Contents
--------
* :class:`Platform`, :class:`LauncherType`, :class:`DaemonMethod`,
  :class:`WorkingDirMode` – enumerations used by the dispatch table.
* :class:`Configuration` – frozen launcher definition with a strict
  :meth:`Configuration.daemon_method` lookup.
* :class:`LauncherModel` – flattened, read-only view consumed by templates.

System Role
-----------
The composition root builds exactly one :class:`LauncherModel` per
configuration and reuses it for every artifact so templates see a consistent
view.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Mapping

from .errors import ArgumentError

_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class Platform(Enum):
    """Target operating system families, declared in canonical order."""

    LINUX = "LINUX"
    MAC_OSX = "MAC_OSX"
    WINDOWS = "WINDOWS"

    @property
    def is_unix(self) -> bool:
        return self in (Platform.LINUX, Platform.MAC_OSX)

    @property
    def sort_key(self) -> int:
        return _PLATFORM_ORDER.index(self)

    def __str__(self) -> str:
        return self.value


_PLATFORM_ORDER: tuple[Platform, ...] = tuple(Platform)


class LauncherType(Enum):
    CONSOLE = "CONSOLE"
    DAEMON = "DAEMON"

    def __str__(self) -> str:
        return self.value


class DaemonMethod(Enum):
    """Mechanisms used to run the application as a background service."""

    NOHUP = "NOHUP"
    JSLWIN = "JSLWIN"
    WINSW = "WINSW"

    def __str__(self) -> str:
        return self.value


class WorkingDirMode(Enum):
    RETAIN = "RETAIN"
    APP_HOME = "APP_HOME"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Configuration:
    """Immutable definition of one launcher.

    Why
    ----
    The generator reasons about name, type, platforms, and daemon methods
    only; everything else is carried through to templates untouched.

    Parameters
    ----------
    name:
        Filesystem-safe launcher name used to derive every output filename.
    type:
        :class:`LauncherType` selecting console or daemon artifacts.
    platforms:
        Target platforms; stored as a ``frozenset`` and visited via
        :meth:`sorted_platforms`.
    main_class:
        Fully qualified entry point passed to the JVM.
    daemon_methods:
        Per-platform daemon mechanism. Absent entries are errors at lookup
        time, never silent defaults.
    domain:
        Reverse-DNS identifier used for launchd labels and plist filenames;
        must be a single token without path separators.
    source:
        Config file the definition was parsed from (diagnostics only).

    Examples
    --------
    >>> cfg = Configuration(name="hello", type=LauncherType.CONSOLE,
    ...                     platforms=frozenset({Platform.WINDOWS, Platform.LINUX}),
    ...                     main_class="demo.Hello")
    >>> [str(p) for p in cfg.sorted_platforms()]
    ['LINUX', 'WINDOWS']
    >>> cfg.identity
    'hello'
    """

    name: str
    type: LauncherType
    platforms: frozenset[Platform]
    main_class: str
    daemon_methods: Mapping[Platform, DaemonMethod] = field(default_factory=dict)
    domain: str | None = None
    display_name: str | None = None
    short_description: str = ""
    long_description: str = ""
    working_dir_mode: WorkingDirMode = WorkingDirMode.RETAIN
    app_args: str = ""
    java_args: str = ""
    min_java_version: str = "1.6"
    min_java_memory: int | None = None
    max_java_memory: int | None = None
    symlink_java: bool = False
    bin_dir: str = "bin"
    share_dir: str = "share"
    log_dir: str = "log"
    run_dir: str = "run"
    source: Path | None = None

    def __post_init__(self) -> None:
        """Validate invariants and freeze the mutable inputs.

        Side Effects
        ------------
        Mutates ``platforms`` and ``daemon_methods`` via ``object.__setattr__``
        during initialisation only.
        """

        if not _SAFE_NAME.match(self.name or "") or self.name in {".", ".."}:
            raise ArgumentError(f"Launcher name [{self.name}] is not filesystem-safe")
        if self.domain and not _SAFE_NAME.match(self.domain):
            raise ArgumentError(f"Launcher domain [{self.domain}] must be a reverse-DNS token without path separators")
        if not self.platforms:
            raise ArgumentError(f"Launcher [{self.name}] declares no platforms")
        for label, value in (("bin_dir", self.bin_dir), ("share_dir", self.share_dir)):
            _ensure_relative(label, value)
        object.__setattr__(self, "platforms", frozenset(self.platforms))
        object.__setattr__(self, "daemon_methods", MappingProxyType(dict(self.daemon_methods)))

    @property
    def identity(self) -> str:
        """Return the diagnostic identity: the source file if known, else the name."""

        return str(self.source) if self.source is not None else self.name

    def sorted_platforms(self) -> list[Platform]:
        return sorted(self.platforms, key=lambda platform: platform.sort_key)

    def daemon_method(self, platform: Platform) -> DaemonMethod:
        """Return the daemon method configured for *platform*.

        Raises
        ------
        ArgumentError
            When no method is configured for *platform*.

        Examples
        --------
        >>> cfg = Configuration(name="svc", type=LauncherType.DAEMON,
        ...                     platforms=frozenset({Platform.LINUX}), main_class="demo.Svc",
        ...                     daemon_methods={Platform.LINUX: DaemonMethod.NOHUP})
        >>> cfg.daemon_method(Platform.LINUX)
        <DaemonMethod.NOHUP: 'NOHUP'>
        """

        try:
            return self.daemon_methods[platform]
        except KeyError:
            raise ArgumentError(f"No daemon method configured for platform {platform}") from None


def _ensure_relative(label: str, value: str) -> None:
    path = PurePosixPath(value)
    if not value or path.is_absolute() or ".." in path.parts:
        raise ArgumentError(f"{label} [{value}] must be a relative path inside the output directory")


@dataclass(frozen=True, slots=True)
class LauncherModel:
    """Read-only projection of a :class:`Configuration` for templates.

    Enum values are flattened to strings and memory settings are pre-rendered
    into JVM arguments so templates stay free of formatting logic.
    """

    name: str
    domain: str
    display_name: str
    short_description: str
    long_description: str
    type: str
    main_class: str
    platforms: tuple[str, ...]
    working_dir_mode: str
    app_args: str
    java_args: str
    min_java_version: str
    min_java_memory: int | None
    max_java_memory: int | None
    symlink_java: bool
    bin_dir: str
    share_dir: str
    log_dir: str
    run_dir: str

    @classmethod
    def from_configuration(cls, config: Configuration) -> LauncherModel:
        return cls(
            name=config.name,
            domain=config.domain or "",
            display_name=config.display_name or config.name,
            short_description=config.short_description,
            long_description=config.long_description,
            type=str(config.type),
            main_class=config.main_class,
            platforms=tuple(str(platform) for platform in config.sorted_platforms()),
            working_dir_mode=str(config.working_dir_mode),
            app_args=config.app_args,
            java_args=config.java_args,
            min_java_version=config.min_java_version,
            min_java_memory=config.min_java_memory,
            max_java_memory=config.max_java_memory,
            symlink_java=config.symlink_java,
            bin_dir=config.bin_dir,
            share_dir=config.share_dir,
            log_dir=config.log_dir,
            run_dir=config.run_dir,
        )

    @property
    def launchd_label(self) -> str:
        return f"{self.domain}.{self.name}"

    @property
    def java_detect_path(self) -> str:
        return f"{self.share_dir}/helper/java-detect"

    @property
    def min_java_memory_arg(self) -> str:
        return f"-Xms{self.min_java_memory}m" if self.min_java_memory else ""

    @property
    def max_java_memory_arg(self) -> str:
        return f"-Xmx{self.max_java_memory}m" if self.max_java_memory else ""

    @property
    def java_memory_args(self) -> str:
        """Return the combined ``-Xms``/``-Xmx`` arguments (may be empty)."""

        return " ".join(arg for arg in (self.min_java_memory_arg, self.max_java_memory_arg) if arg)

    @property
    def relative_app_home(self) -> str:
        """Return the path from ``bin_dir`` back to the application root."""

        depth = len(PurePosixPath(self.bin_dir).parts)
        return "/".join([".."] * depth) or "."

"""Platform × launcher type × daemon method dispatch.

Purpose
-------
Decide which artifacts a configuration produces, per platform, without touching
the filesystem. The decision matrix is an explicit table keyed by
``(platform, type, daemon_method)`` and validated when the module is imported.

Contents
    - ``Route``: shared (deduplicated) builder plus platform-specific builders.
    - ``DISPATCH``: the default routing table.
    - ``validate_table``: exhaustiveness check run at import time.
    - ``resolve_route``: strict lookup raising :class:`ArgumentError`.
    - ``plan_platform`` / ``plan_configuration``: thread the Unix dedup state
      through the sorted platform loop and return :class:`PlatformPlan` values.
    - ``_unix_launcher`` / ``_windows_*`` / ``_initd`` / ``_launchd``: artifact
      builders narrating the file layout.

System Role
-----------
Called by :class:`stork_launcher.core.Generator` before any file of a
configuration is written, so unsupported combinations fail without leaving
partial output for that configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Callable, Mapping

from ..domain.artifacts import Artifact, Fragment
from ..domain.configuration import Configuration, DaemonMethod, LauncherType, Platform
from ..domain.errors import ArgumentError

ArtifactBuilder = Callable[[Configuration], tuple[Artifact, ...]]
RouteKey = tuple[Platform, LauncherType, DaemonMethod | None]

UNIX_LAUNCHER = "unix-launcher"
"""Shared-artifact kind for the Unix launcher and its java-detect helper."""

JSLWIN_SERVICE_32 = "windows/jslwin/jsl_static.exe"
JSLWIN_SERVICE_64 = "windows/jslwin/jsl_static64.exe"
WINSW_SERVICE = "windows/winsw/winsw-1.16-bin.exe"
WINSW_NET_CONFIG = "windows/winsw/winsw.exe.config"


@dataclass(frozen=True, slots=True)
class Route:
    """Artifacts produced for one dispatch key.

    ``shared`` artifacts are produced once per configuration for every route
    carrying the same ``shared_kind``; ``own`` builders run for every platform
    that resolves to this route.
    """

    own: tuple[ArtifactBuilder, ...] = ()
    shared: ArtifactBuilder | None = None
    shared_kind: str | None = None


@dataclass(frozen=True, slots=True)
class PlatformPlan:
    platform: Platform
    artifacts: tuple[Artifact, ...]
    reused_from: Platform | None = None


def _bin(config: Configuration) -> PurePosixPath:
    return PurePosixPath(config.bin_dir)


def _share(config: Configuration) -> PurePosixPath:
    return PurePosixPath(config.share_dir)


def _java_detect(config: Configuration) -> Artifact:
    return Artifact(
        _share(config) / "helper" / "java-detect",
        (
            Fragment.resource("linux/script-java-detect-header.sh"),
            Fragment.resource("linux/script-functions.sh"),
            Fragment.resource("linux/script-java-detect.sh"),
        ),
        executable=True,
        kind="script",
    )


def _unix_launcher(body_template: str) -> ArtifactBuilder:
    """Return a builder for the shared Unix launcher ending in *body_template*."""

    def build(config: Configuration) -> tuple[Artifact, ...]:
        launcher = Artifact(
            _bin(config) / config.name,
            (
                Fragment.template("linux/script-header.sh.j2"),
                Fragment.resource("linux/script-functions.sh"),
                Fragment.template("linux/script-java.sh.j2"),
                Fragment.template(body_template),
            ),
            executable=True,
        )
        return launcher, _java_detect(config)

    return build


def _initd(config: Configuration) -> tuple[Artifact, ...]:
    return (
        Artifact(
            _share(config) / "init.d" / f"{config.name}.init",
            (Fragment.template("linux/initd-daemon.sh.j2"),),
            executable=True,
            kind="init.d",
        ),
    )


def _launchd(config: Configuration) -> tuple[Artifact, ...]:
    if not config.domain:
        raise ArgumentError(f"Launcher [{config.name}] needs a domain to generate a launchd plist")
    return (
        Artifact(
            _share(config) / "osx" / f"{config.domain}.{config.name}.plist",
            (Fragment.template("osx/launchd.plist.j2"),),
            kind="launchd",
        ),
    )


def _windows_batch(config: Configuration, body_template: str) -> Artifact:
    return Artifact(
        _bin(config) / f"{config.name}.bat",
        (
            Fragment.template("windows/batch-header.bat.j2"),
            Fragment.resource("windows/batch-find-java.bat"),
            Fragment.template("windows/batch-java.bat.j2"),
            Fragment.template(body_template),
            Fragment.template("windows/batch-footer.bat.j2"),
        ),
    )


def _windows_console(config: Configuration) -> tuple[Artifact, ...]:
    return (_windows_batch(config, "windows/batch-console.bat.j2"),)


def _windows_jslwin(config: Configuration) -> tuple[Artifact, ...]:
    bin_dir = _bin(config)
    ini = (Fragment.template("windows/config-daemon-jslwin.ini.j2"),)
    return (
        _windows_batch(config, "windows/batch-daemon-jslwin.bat.j2"),
        Artifact(bin_dir / f"{config.name}32.exe", (Fragment.resource(JSLWIN_SERVICE_32),), kind="helper"),
        Artifact(bin_dir / f"{config.name}32.ini", ini, kind="helper"),
        Artifact(bin_dir / f"{config.name}64.exe", (Fragment.resource(JSLWIN_SERVICE_64),), kind="helper"),
        Artifact(bin_dir / f"{config.name}64.ini", ini, kind="helper"),
    )


def _windows_winsw(config: Configuration) -> tuple[Artifact, ...]:
    bin_dir = _bin(config)
    return (
        Artifact(bin_dir / f"{config.name}.exe", (Fragment.resource(WINSW_SERVICE),), kind="helper"),
        Artifact(bin_dir / f"{config.name}.exe.config", (Fragment.resource(WINSW_NET_CONFIG),), kind="helper"),
        Artifact(
            bin_dir / f"{config.name}.xml",
            (Fragment.template("windows/config-daemon-winsw.xml.j2"),),
            kind="config",
        ),
    )


_UNIX_CONSOLE = _unix_launcher("linux/script-console.sh.j2")
# MAC_OSX daemons reuse the nohup body so the deduplicated launcher is identical
# whichever Unix platform produced it.
_UNIX_DAEMON_NOHUP = _unix_launcher("linux/script-daemon-nohup.sh.j2")

DISPATCH: Mapping[RouteKey, Route] = MappingProxyType(
    {
        (Platform.LINUX, LauncherType.CONSOLE, None): Route(shared=_UNIX_CONSOLE, shared_kind=UNIX_LAUNCHER),
        (Platform.LINUX, LauncherType.DAEMON, DaemonMethod.NOHUP): Route(
            own=(_initd,), shared=_UNIX_DAEMON_NOHUP, shared_kind=UNIX_LAUNCHER
        ),
        (Platform.MAC_OSX, LauncherType.CONSOLE, None): Route(shared=_UNIX_CONSOLE, shared_kind=UNIX_LAUNCHER),
        (Platform.MAC_OSX, LauncherType.DAEMON, None): Route(
            own=(_launchd,), shared=_UNIX_DAEMON_NOHUP, shared_kind=UNIX_LAUNCHER
        ),
        (Platform.WINDOWS, LauncherType.CONSOLE, None): Route(own=(_windows_console,)),
        (Platform.WINDOWS, LauncherType.DAEMON, DaemonMethod.JSLWIN): Route(own=(_windows_jslwin,)),
        (Platform.WINDOWS, LauncherType.DAEMON, DaemonMethod.WINSW): Route(own=(_windows_winsw,)),
    }
)


def validate_table(table: Mapping[RouteKey, Route]) -> None:
    """Ensure every platform/type pair is routable and every route produces output.

    Raises
    ------
    ArgumentError
        When a pair has no route, a route has no builders, or a shared builder
        lacks a ``shared_kind``.

    Examples
    --------
    >>> validate_table(DISPATCH)
    >>> validate_table({})
    Traceback (most recent call last):
    ...
    stork_launcher.domain.errors.ArgumentError: Dispatch table has no route for LINUX/CONSOLE
    """

    for platform in Platform:
        for launcher_type in LauncherType:
            if not any(key[0] is platform and key[1] is launcher_type for key in table):
                raise ArgumentError(f"Dispatch table has no route for {platform}/{launcher_type}")
    for key, route in table.items():
        if route.shared is None and not route.own:
            raise ArgumentError(f"Dispatch route {_format_key(key)} produces no artifacts")
        if route.shared is not None and route.shared_kind is None:
            raise ArgumentError(f"Dispatch route {_format_key(key)} has a shared builder without a kind")


def _format_key(key: RouteKey) -> str:
    return "/".join(str(part) for part in key if part is not None)


def _consults_daemon_method(table: Mapping[RouteKey, Route], platform: Platform) -> bool:
    return any(key[0] is platform and key[1] is LauncherType.DAEMON and key[2] is not None for key in table)


def resolve_route(
    config: Configuration,
    platform: Platform,
    table: Mapping[RouteKey, Route] = DISPATCH,
) -> Route:
    """Return the route for *platform* under *config*.

    The daemon method is looked up only for daemon launchers on platforms whose
    table entries are keyed by a method; MAC_OSX daemons never consult it.

    Raises
    ------
    ArgumentError
        For platforms absent from the table, missing daemon methods, and daemon
        methods that do not apply to *platform*.
    """

    if not any(key[0] is platform for key in table):
        raise ArgumentError(f"Unsupported platform {platform}")
    method: DaemonMethod | None = None
    if config.type is LauncherType.DAEMON and _consults_daemon_method(table, platform):
        method = config.daemon_method(platform)
    route = table.get((platform, config.type, method))
    if route is None:
        if method is None:
            raise ArgumentError(f"Unsupported launcher type [{config.type}] for platform {platform}")
        raise ArgumentError(f"Unsupported daemon method [{method}] for platform {platform}")
    return route


def plan_platform(
    config: Configuration,
    platform: Platform,
    produced: Mapping[str, Platform],
    table: Mapping[RouteKey, Route] = DISPATCH,
) -> tuple[PlatformPlan, Mapping[str, Platform]]:
    """Plan artifacts for one platform given the shared kinds already *produced*.

    Returns the plan and the updated ``shared-kind -> platform`` mapping; the
    input mapping is never mutated.
    """

    route = resolve_route(config, platform, table)
    artifacts: list[Artifact] = []
    reused_from: Platform | None = None
    if route.shared is not None and route.shared_kind is not None:
        if route.shared_kind in produced:
            reused_from = produced[route.shared_kind]
        else:
            artifacts.extend(route.shared(config))
            produced = {**produced, route.shared_kind: platform}
    for builder in route.own:
        artifacts.extend(builder(config))
    return PlatformPlan(platform, tuple(artifacts), reused_from), produced


def plan_configuration(
    config: Configuration,
    table: Mapping[RouteKey, Route] = DISPATCH,
) -> list[PlatformPlan]:
    """Plan every artifact of *config*, visiting platforms in canonical order.

    Examples
    --------
    >>> cfg = Configuration(name="hello", type=LauncherType.CONSOLE,
    ...                     platforms=frozenset(Platform), main_class="demo.Hello")
    >>> plans = plan_configuration(cfg)
    >>> [(str(p.platform), len(p.artifacts), str(p.reused_from)) for p in plans]
    [('LINUX', 2, 'None'), ('MAC_OSX', 0, 'LINUX'), ('WINDOWS', 1, 'None')]
    """

    produced: Mapping[str, Platform] = {}
    plans: list[PlatformPlan] = []
    for platform in config.sorted_platforms():
        plan, produced = plan_platform(config, platform, produced, table)
        plans.append(plan)
    return plans


validate_table(DISPATCH)

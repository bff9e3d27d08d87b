from __future__ import annotations

from types import MappingProxyType

import pytest
from hypothesis import given
from hypothesis import strategies as st

from stork_launcher.application.dispatch import (
    DISPATCH,
    JSLWIN_SERVICE_32,
    JSLWIN_SERVICE_64,
    UNIX_LAUNCHER,
    WINSW_NET_CONFIG,
    WINSW_SERVICE,
    Route,
    plan_configuration,
    plan_platform,
    resolve_route,
    validate_table,
)
from stork_launcher.domain.artifacts import FragmentKind
from stork_launcher.domain.configuration import Configuration, DaemonMethod, LauncherType, Platform
from stork_launcher.domain.errors import ArgumentError

PLATFORM_SETS = st.sets(st.sampled_from(list(Platform)), min_size=1)


def _paths(plans) -> list[str]:
    return [artifact.path.as_posix() for plan in plans for artifact in plan.artifacts]


def _console(platforms) -> Configuration:
    return Configuration(
        name="hello", type=LauncherType.CONSOLE, platforms=frozenset(platforms), main_class="demo.Hello"
    )


def _daemon(platforms) -> Configuration:
    return Configuration(
        name="svc",
        type=LauncherType.DAEMON,
        platforms=frozenset(platforms),
        main_class="demo.Svc",
        domain="com.example",
        daemon_methods={Platform.LINUX: DaemonMethod.NOHUP, Platform.WINDOWS: DaemonMethod.WINSW},
    )


def test_default_table_is_valid() -> None:
    validate_table(DISPATCH)


def test_table_missing_pair_is_rejected() -> None:
    table = dict(DISPATCH)
    del table[(Platform.WINDOWS, LauncherType.CONSOLE, None)]
    with pytest.raises(ArgumentError, match="WINDOWS/CONSOLE"):
        validate_table(table)


def test_table_route_without_builders_is_rejected() -> None:
    table = dict(DISPATCH)
    table[(Platform.WINDOWS, LauncherType.CONSOLE, None)] = Route()
    with pytest.raises(ArgumentError, match="produces no artifacts"):
        validate_table(table)


def test_unix_console_dedup() -> None:
    plans = plan_configuration(_console({Platform.MAC_OSX, Platform.LINUX}))
    assert [plan.platform for plan in plans] == [Platform.LINUX, Platform.MAC_OSX]
    assert _paths(plans) == ["bin/hello", "share/helper/java-detect"]
    assert plans[1].reused_from is Platform.LINUX


def test_mac_only_console_produces_shared_launcher() -> None:
    plans = plan_configuration(_console({Platform.MAC_OSX}))
    assert _paths(plans) == ["bin/hello", "share/helper/java-detect"]
    assert plans[0].reused_from is None


def test_unix_daemon_secondary_artifacts_survive_dedup() -> None:
    plans = plan_configuration(_daemon({Platform.LINUX, Platform.MAC_OSX}))
    assert _paths(plans) == [
        "bin/svc",
        "share/helper/java-detect",
        "share/init.d/svc.init",
        "share/osx/com.example.svc.plist",
    ]


def test_mac_daemon_does_not_consult_daemon_method() -> None:
    config = Configuration(
        name="svc",
        type=LauncherType.DAEMON,
        platforms=frozenset({Platform.MAC_OSX}),
        main_class="demo.Svc",
        domain="com.example",
    )
    assert _paths(plan_configuration(config)) == [
        "bin/svc",
        "share/helper/java-detect",
        "share/osx/com.example.svc.plist",
    ]


def test_mac_daemon_requires_domain() -> None:
    config = Configuration(
        name="svc", type=LauncherType.DAEMON, platforms=frozenset({Platform.MAC_OSX}), main_class="demo.Svc"
    )
    with pytest.raises(ArgumentError, match="domain"):
        plan_configuration(config)


def test_windows_jslwin_set() -> None:
    config = Configuration(
        name="svc",
        type=LauncherType.DAEMON,
        platforms=frozenset({Platform.WINDOWS}),
        main_class="demo.Svc",
        daemon_methods={Platform.WINDOWS: DaemonMethod.JSLWIN},
    )
    (plan,) = plan_configuration(config)
    by_path = {artifact.path.as_posix(): artifact for artifact in plan.artifacts}
    assert set(by_path) == {"bin/svc.bat", "bin/svc32.exe", "bin/svc32.ini", "bin/svc64.exe", "bin/svc64.ini"}
    assert by_path["bin/svc32.exe"].fragments[0].name == JSLWIN_SERVICE_32
    assert by_path["bin/svc64.exe"].fragments[0].name == JSLWIN_SERVICE_64
    assert by_path["bin/svc32.exe"].is_verbatim_copy
    assert not by_path["bin/svc.bat"].executable


def test_windows_winsw_set() -> None:
    (plan,) = plan_configuration(_daemon({Platform.WINDOWS}))
    by_path = {artifact.path.as_posix(): artifact for artifact in plan.artifacts}
    assert set(by_path) == {"bin/svc.exe", "bin/svc.exe.config", "bin/svc.xml"}
    assert by_path["bin/svc.exe"].fragments[0].name == WINSW_SERVICE
    assert by_path["bin/svc.exe.config"].fragments[0].name == WINSW_NET_CONFIG
    assert by_path["bin/svc.xml"].fragments[0].kind is FragmentKind.TEMPLATE


def test_linux_winsw_is_rejected_naming_both() -> None:
    config = Configuration(
        name="svc",
        type=LauncherType.DAEMON,
        platforms=frozenset({Platform.LINUX}),
        main_class="demo.Svc",
        daemon_methods={Platform.LINUX: DaemonMethod.WINSW},
    )
    with pytest.raises(ArgumentError) as excinfo:
        plan_configuration(config)
    assert "LINUX" in str(excinfo.value)
    assert "WINSW" in str(excinfo.value)


def test_missing_daemon_method_is_rejected() -> None:
    config = Configuration(
        name="svc", type=LauncherType.DAEMON, platforms=frozenset({Platform.WINDOWS}), main_class="demo.Svc"
    )
    with pytest.raises(ArgumentError, match="No daemon method configured for platform WINDOWS"):
        plan_configuration(config)


def test_console_never_consults_daemon_method() -> None:
    config = Configuration(
        name="hello",
        type=LauncherType.CONSOLE,
        platforms=frozenset({Platform.LINUX}),
        main_class="demo.Hello",
        daemon_methods={Platform.LINUX: DaemonMethod.WINSW},
    )
    assert _paths(plan_configuration(config)) == ["bin/hello", "share/helper/java-detect"]


def test_platform_missing_from_table_is_rejected() -> None:
    table = MappingProxyType({key: route for key, route in DISPATCH.items() if key[0] is not Platform.WINDOWS})
    with pytest.raises(ArgumentError, match="Unsupported platform WINDOWS"):
        resolve_route(_console({Platform.WINDOWS}), Platform.WINDOWS, table)


def test_plan_platform_does_not_mutate_state() -> None:
    produced: dict = {}
    plan, updated = plan_platform(_console({Platform.LINUX}), Platform.LINUX, produced)
    assert produced == {}
    assert updated == {UNIX_LAUNCHER: Platform.LINUX}
    assert len(plan.artifacts) == 2


def test_unix_scripts_are_executable_and_windows_are_not() -> None:
    plans = plan_configuration(_daemon(set(Platform)))
    flags = {artifact.path.as_posix(): artifact.executable for plan in plans for artifact in plan.artifacts}
    assert flags["bin/svc"] is True
    assert flags["share/helper/java-detect"] is True
    assert flags["share/init.d/svc.init"] is True
    assert flags["share/osx/com.example.svc.plist"] is False
    assert flags["bin/svc.xml"] is False
    assert flags["bin/svc.exe"] is False


@given(PLATFORM_SETS)
def test_plan_order_and_uniqueness(platforms) -> None:
    plans = plan_configuration(_console(platforms))
    visited = [plan.platform for plan in plans]
    assert visited == sorted(platforms, key=lambda platform: platform.sort_key)
    paths = _paths(plans)
    assert len(paths) == len(set(paths))
    unix = [platform for platform in visited if platform.is_unix]
    assert paths.count("bin/hello") == (1 if unix else 0)
    assert paths.count("share/helper/java-detect") == (1 if unix else 0)


@given(PLATFORM_SETS)
def test_daemon_plan_is_deterministic(platforms) -> None:
    assert _paths(plan_configuration(_daemon(platforms))) == _paths(plan_configuration(_daemon(platforms)))

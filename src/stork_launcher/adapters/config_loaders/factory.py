"""Build validated :class:`Configuration` objects from parsed mappings.

Purpose
    Apply defaults, coerce enum and scalar values, and reject unknown keys so
    the generator only ever sees well-formed launcher definitions.

Contents
    - ``ConfigurationFactory``: implements the ``ConfigurationLoader`` port.
    - ``_coerce_*`` helpers: one per value shape, each raising
      :class:`ConfigParseError` with the offending key.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Mapping, TypeVar

from ...domain.configuration import Configuration, DaemonMethod, LauncherType, Platform, WorkingDirMode
from ...domain.errors import ArgumentError, ConfigParseError
from .structured import read_mapping

E = TypeVar("E", bound=Enum)

REQUIRED_KEYS = ("name", "type", "platforms", "main_class")
OPTIONAL_KEYS = (
    "domain",
    "display_name",
    "short_description",
    "long_description",
    "daemon_methods",
    "working_dir_mode",
    "app_args",
    "java_args",
    "min_java_version",
    "min_java_memory",
    "max_java_memory",
    "symlink_java",
    "bin_dir",
    "share_dir",
    "log_dir",
    "run_dir",
)
_STRING_KEYS = (
    "domain",
    "display_name",
    "short_description",
    "long_description",
    "app_args",
    "java_args",
    "min_java_version",
    "bin_dir",
    "share_dir",
    "log_dir",
    "run_dir",
)


class ConfigurationFactory:
    """Parse launcher config files into :class:`Configuration` instances.

    Examples
    --------
    >>> factory = ConfigurationFactory()
    >>> cfg = factory.from_mapping({"name": "hello", "type": "console",
    ...                             "platforms": "linux, windows", "main_class": "demo.Hello"})
    >>> [str(p) for p in cfg.sorted_platforms()]
    ['LINUX', 'WINDOWS']
    """

    def load(self, path: Path) -> Configuration:
        """Read and validate the config file at *path*."""

        file_path = Path(path)
        return self.from_mapping(read_mapping(file_path), source=file_path)

    def from_mapping(self, data: Mapping[str, Any], *, source: Path | None = None) -> Configuration:
        """Validate *data* and return a :class:`Configuration`.

        Raises
        ------
        ConfigParseError
            For missing or unknown keys, bad values, and domain invariant
            violations (unsafe names, absolute output directories).
        """

        origin = source if source is not None else "<memory>"
        odd_keys = [key for key in data if not isinstance(key, str)]
        if odd_keys:
            listed = ", ".join(repr(key) for key in odd_keys)
            raise ConfigParseError(f"Keys in {origin} must be strings (got {listed})", source=source)
        unknown = sorted(set(data) - set(REQUIRED_KEYS) - set(OPTIONAL_KEYS))
        if unknown:
            raise ConfigParseError(f"Unknown keys in {origin}: {', '.join(unknown)}", source=source)
        missing = [key for key in REQUIRED_KEYS if data.get(key) in (None, "")]
        if missing:
            raise ConfigParseError(f"Missing required keys in {origin}: {', '.join(missing)}", source=source)

        kwargs: dict[str, Any] = {
            "name": _coerce_str(data, "name", source),
            "type": _coerce_enum(LauncherType, data["type"], "type", source),
            "platforms": _coerce_platforms(data["platforms"], source),
            "main_class": _coerce_str(data, "main_class", source),
            "daemon_methods": _coerce_daemon_methods(data.get("daemon_methods") or {}, source),
            "source": source,
        }
        for key in _STRING_KEYS:
            if data.get(key) is not None:
                kwargs[key] = _coerce_str(data, key, source)
        if data.get("working_dir_mode") is not None:
            kwargs["working_dir_mode"] = _coerce_enum(WorkingDirMode, data["working_dir_mode"], "working_dir_mode", source)
        for key in ("min_java_memory", "max_java_memory"):
            if data.get(key) is not None:
                kwargs[key] = _coerce_memory(data[key], key, source)
        if data.get("symlink_java") is not None:
            kwargs["symlink_java"] = _coerce_bool(data["symlink_java"], "symlink_java", source)

        if (
            kwargs["type"] is LauncherType.DAEMON
            and Platform.MAC_OSX in kwargs["platforms"]
            and not kwargs.get("domain")
        ):
            raise ConfigParseError(f"Key [domain] is required for MAC_OSX daemons in {origin}", source=source)

        try:
            return Configuration(**kwargs)
        except ArgumentError as exc:
            raise ConfigParseError(f"Invalid launcher definition in {origin}: {exc}", source=source) from exc


def _coerce_str(data: Mapping[str, Any], key: str, source: Path | None) -> str:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigParseError(f"Key [{key}] must be a string (got {type(value).__name__})", source=source)
    return str(value)


def _coerce_enum(enum_type: type[E], value: Any, key: str, source: Path | None) -> E:
    """Return the *enum_type* member named by *value* (case-insensitive).

    Examples
    --------
    >>> _coerce_enum(DaemonMethod, "winsw", "daemon_methods", None)
    <DaemonMethod.WINSW: 'WINSW'>
    """

    if isinstance(value, enum_type):
        return value
    normalized = str(value).strip().upper().replace("-", "_")
    try:
        return enum_type[normalized]
    except KeyError:
        choices = ", ".join(member.name for member in enum_type)
        raise ConfigParseError(f"Key [{key}] has invalid value [{value}] (expected one of {choices})", source=source) from None


def _coerce_platforms(value: Any, source: Path | None) -> frozenset[Platform]:
    items = value.split(",") if isinstance(value, str) else value
    if not isinstance(items, (list, tuple, set, frozenset)):
        raise ConfigParseError("Key [platforms] must be a list or a comma separated string", source=source)
    platforms = frozenset(_coerce_enum(Platform, item, "platforms", source) for item in items if str(item).strip())
    if not platforms:
        raise ConfigParseError("Key [platforms] must name at least one platform", source=source)
    return platforms


def _coerce_daemon_methods(value: Any, source: Path | None) -> dict[Platform, DaemonMethod]:
    if not isinstance(value, Mapping):
        raise ConfigParseError("Key [daemon_methods] must map platforms to daemon methods", source=source)
    return {
        _coerce_enum(Platform, platform, "daemon_methods", source): _coerce_enum(
            DaemonMethod, method, "daemon_methods", source
        )
        for platform, method in value.items()
    }


def _coerce_memory(value: Any, key: str, source: Path | None) -> int:
    if isinstance(value, bool):
        raise ConfigParseError(f"Key [{key}] must be a positive integer (MB)", source=source)
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ConfigParseError(f"Key [{key}] must be a positive integer (MB)", source=source) from None
    if amount <= 0:
        raise ConfigParseError(f"Key [{key}] must be a positive integer (MB)", source=source)
    return amount


def _coerce_bool(value: Any, key: str, source: Path | None) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in {"true", "yes", "1", "on"}:
        return True
    if lowered in {"false", "no", "0", "off"}:
        return False
    raise ConfigParseError(f"Key [{key}] must be a boolean", source=source)

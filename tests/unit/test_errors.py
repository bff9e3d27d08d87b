from __future__ import annotations

from stork_launcher.domain.configuration import Platform
from stork_launcher.domain.errors import (
    ArgumentError,
    CollaboratorError,
    ConfigParseError,
    GenerationError,
    LauncherError,
    ResourceNotFoundError,
    TemplateError,
)


def test_error_hierarchy() -> None:
    for error_type in (ArgumentError, ConfigParseError, CollaboratorError, GenerationError):
        assert issubclass(error_type, LauncherError)
    assert issubclass(TemplateError, CollaboratorError)
    assert issubclass(ResourceNotFoundError, CollaboratorError)
    assert issubclass(ArgumentError, ValueError)


def test_retryable_flags() -> None:
    assert ArgumentError("x").retryable is False
    assert TemplateError("x").retryable is True
    assert ResourceNotFoundError("x").retryable is False


def test_generation_error_retryable_follows_cause() -> None:
    def wrap(cause: BaseException) -> GenerationError:
        try:
            raise GenerationError("boom", source="demo", platform=Platform.LINUX, generated=2) from cause
        except GenerationError as exc:
            return exc

    assert wrap(TemplateError("t")).retryable is True
    assert wrap(ResourceNotFoundError("r")).retryable is False
    assert wrap(PermissionError("denied")).retryable is True
    error = wrap(RuntimeError("other"))
    assert error.retryable is False
    assert (error.source, error.platform, error.generated) == ("demo", Platform.LINUX, 2)


def test_config_parse_error_keeps_source(tmp_path) -> None:
    error = ConfigParseError("bad", source=tmp_path / "a.toml")
    assert error.source == str(tmp_path / "a.toml")
    assert ConfigParseError("bad").source is None

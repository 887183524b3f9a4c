from __future__ import annotations

import pytest

from collectionmap.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_flag,
    require_env_var,
    require_env_vars,
)
from collectionmap.mapping import MappingConfigurationError


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.delenv("OTHER_MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["OTHER_MISSING_VAR", "MISSING_VAR"])

    assert "MISSING_VAR, OTHER_MISSING_VAR" in str(exc.value)
    assert exc.value.names == ("MISSING_VAR", "OTHER_MISSING_VAR")


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_mapping_errors_are_configuration_errors() -> None:
    assert issubclass(MappingConfigurationError, ConfigurationError)
    assert issubclass(MissingConfigurationError, ConfigurationError)


@pytest.mark.parametrize(("raw", "expected"), [("1", True), ("Yes", True), ("off", False)])
def test_env_flag_parses_switches(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool  # noqa: FBT001
) -> None:
    monkeypatch.setenv("EXAMPLE_FLAG", raw)

    assert env_flag("EXAMPLE_FLAG") is expected


def test_env_flag_defaults_and_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("EXAMPLE_FLAG", raising=False)
    assert env_flag("EXAMPLE_FLAG", default=True)

    monkeypatch.setenv("EXAMPLE_FLAG", "maybe")
    with pytest.raises(ConfigurationError, match="EXAMPLE_FLAG"):
        env_flag("EXAMPLE_FLAG")

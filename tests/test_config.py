"""Tests for checker options."""

import logging

import pytest

from typedsig import CHECK_TYPES_VAR, ConstructionError, Options
from typedsig.env import DEFAULT_ENV, Number


class TestOptions:
    """Test construction and validation of options."""

    def test_defaults(self) -> None:
        options = Options()
        assert options.check_types is True
        assert options.env == DEFAULT_ENV

    def test_env_stored_as_tuple(self) -> None:
        assert Options(env=[Number]).env == (Number,)  # type: ignore[arg-type]

    def test_invalid_check_types(self) -> None:
        with pytest.raises(ConstructionError, match="check_types"):
            Options(check_types="yes")  # type: ignore[arg-type]

    def test_invalid_env(self) -> None:
        with pytest.raises(ConstructionError, match="Invalid environment"):
            Options(env=(Number, "String"))  # type: ignore[arg-type]


class TestFromEnviron:
    """Test reading the checking switch from the environment."""

    def test_unset_enables_checking(self) -> None:
        assert Options.from_environ({}).check_types is True

    @pytest.mark.parametrize("raw", ["0", "false", "no", "off", " Off "])
    def test_falsy_values_disable_checking(self, raw: str) -> None:
        assert Options.from_environ({CHECK_TYPES_VAR: raw}).check_types is False

    @pytest.mark.parametrize("raw", ["1", "true", "yes", ""])
    def test_other_values_enable_checking(self, raw: str) -> None:
        assert Options.from_environ({CHECK_TYPES_VAR: raw}).check_types is True

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CHECK_TYPES_VAR, "off")
        assert Options.from_environ().check_types is False

    def test_custom_environment(self) -> None:
        assert Options.from_environ({}, env=(Number,)).env == (Number,)

    def test_disabling_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="typedsig.config"):
            Options.from_environ({CHECK_TYPES_VAR: "0"})
        assert "run-time type checking disabled" in caplog.text

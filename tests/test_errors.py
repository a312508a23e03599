"""Tests for routegen._errors — the error hierarchy."""

import pytest

from routegen._errors import ConfigError, OutputError, RouteError, RouteGenError


class TestErrorHierarchy:
    """Every routegen error is catchable as RouteGenError."""

    @pytest.mark.parametrize("error_type", [ConfigError, RouteError, OutputError])
    def test_subclass_of_base(self, error_type: type[Exception]) -> None:
        assert issubclass(error_type, RouteGenError)

    def test_base_is_exception(self) -> None:
        assert issubclass(RouteGenError, Exception)

    def test_message_preserved(self) -> None:
        err = RouteError("Duplicate dynamic segment 'id'")
        assert str(err) == "Duplicate dynamic segment 'id'"

    def test_catch_as_base(self) -> None:
        with pytest.raises(RouteGenError):
            raise OutputError("disk full")

    def test_cause_chained(self) -> None:
        try:
            try:
                raise PermissionError("denied")
            except OSError as exc:
                raise OutputError("cannot write") from exc
        except OutputError as err:
            assert isinstance(err.__cause__, PermissionError)

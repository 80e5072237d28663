"""Tests for rulebundle.core.result module."""

import pytest

from rulebundle.core.errors import BundleIOError, InvalidInputError
from rulebundle.core.result import (
    Err,
    Ok,
    Result,
    collect_results,
    from_bool,
    try_result,
    try_result_with,
)


class TestOk:
    """Test Ok class."""

    def test_create_ok(self):
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap_and_unwrap_or(self):
        assert Ok("hello").unwrap() == "hello"
        assert Ok(10).unwrap_or(99) == 10

    def test_map_chaining(self):
        result = Ok(3).map(lambda x: x * 2).map(lambda x: x + 1)
        assert result.unwrap() == 7

    def test_flat_map(self):
        """flat_map chains Result-returning functions."""
        def double_if_even(x: int) -> Result[int]:
            if x % 2 == 0:
                return Ok(x * 2)
            return Err(ValueError("Odd number"))

        assert Ok(4).flat_map(double_if_even).unwrap() == 8
        assert Ok(3).flat_map(double_if_even).is_err()

    def test_inspect_runs_side_effect(self):
        seen = []
        result = Ok(5).inspect(seen.append)
        assert seen == [5]
        assert result.unwrap() == 5

    def test_inspect_err_is_noop(self):
        seen = []
        Ok(5).inspect_err(seen.append)
        assert seen == []

    def test_to_dict(self):
        assert Ok(1).to_dict() == {"ok": True, "value": 1}


class TestErr:
    """Test Err class."""

    def test_unwrap_raises_wrapped_error(self):
        error = InvalidInputError("bad")
        with pytest.raises(InvalidInputError):
            Err(error).unwrap()

    def test_unwrap_or_returns_default(self):
        assert Err(ValueError("x")).unwrap_or(7) == 7

    def test_map_and_flat_map_pass_error_through(self):
        error = ValueError("x")
        called = []
        result = Err(error).map(called.append).flat_map(lambda v: Ok(v))
        assert result.error is error
        assert called == []

    def test_map_err(self):
        result = Err(ValueError("x")).map_err(lambda e: BundleIOError(str(e)))
        assert isinstance(result.error, BundleIOError)

    def test_or_else_recovers(self):
        assert Err(ValueError("x")).or_else(lambda e: Ok(1)).unwrap() == 1

    def test_inspect_err_runs_side_effect(self):
        seen = []
        error = ValueError("x")
        Err(error).inspect(seen.append).inspect_err(seen.append)
        assert seen == [error]

    def test_to_dict_uses_error_to_dict(self):
        d = Err(InvalidInputError("bad")).to_dict()
        assert d["ok"] is False
        assert d["error"]["category"] == "INPUT"

    def test_to_dict_plain_exception(self):
        d = Err(ValueError("bad")).to_dict()
        assert d["error"] == {"error_type": "ValueError", "message": "bad"}


class TestPatternMatching:
    """Results work with match statements."""

    def test_match(self):
        def describe(result: Result[int]) -> str:
            match result:
                case Ok(value):
                    return f"ok {value}"
                case Err(error):
                    return f"err {error}"
            return "unreachable"

        assert describe(Ok(1)) == "ok 1"
        assert describe(Err(ValueError("x"))) == "err x"


class TestConstructors:
    """Test try_result, try_result_with, collect_results, from_bool."""

    def test_try_result(self):
        assert try_result(lambda: int("42")).unwrap() == 42
        assert isinstance(try_result(lambda: int("x")).error, ValueError)

    def test_try_result_with_maps_error(self):
        result = try_result_with(
            lambda: int("x"),
            lambda e: InvalidInputError(f"not a number: {e}", cause=e),
        )
        assert isinstance(result.error, InvalidInputError)
        assert isinstance(result.error.cause, ValueError)

    def test_try_result_with_no_mapper(self):
        assert isinstance(try_result_with(lambda: int("x")).error, ValueError)

    def test_collect_results_all_ok(self):
        assert collect_results([Ok(1), Ok(2)]).unwrap() == [1, 2]

    def test_collect_results_first_error_wins(self):
        first, second = ValueError("a"), ValueError("b")
        assert collect_results([Ok(1), Err(first), Err(second)]).error is first

    def test_collect_results_is_lazy(self):
        """Nothing after the first Err is consumed."""
        consumed = []

        def gen():
            for item in [Ok(1), Err(ValueError("stop")), Ok(3)]:
                consumed.append(item)
                yield item

        collect_results(gen())
        assert len(consumed) == 2

    def test_from_bool(self):
        assert from_bool(True, "v", ValueError("x")).unwrap() == "v"
        assert from_bool(False, "v", ValueError("x")).is_err()

"""Tests for event key validation and normalization."""

from enum import IntEnum, StrEnum

import pytest

from kevents import InvalidEventKeyError, InvalidListenerError, Symbol, ValidationError
from kevents.core.keys import assert_listener, is_event_key, normalize_keys


class Color(StrEnum):
    RED = "red"


class Code(IntEnum):
    OK = 200


@pytest.mark.parametrize("key", ["name", "", 0, 42, -1, Symbol(), Symbol("x"), Color.RED, Code.OK])
def test_valid_keys(key):
    assert is_event_key(key)


@pytest.mark.parametrize("key", [None, True, False, 1.5, b"bytes", object(), ("a",), ["a"]])
def test_invalid_keys(key):
    assert not is_event_key(key)


def test_symbols_are_distinct_keys():
    first = Symbol("ready")
    second = Symbol("ready")

    assert first != second
    assert len({first, second}) == 2
    assert repr(first) == "Symbol('ready')"
    assert repr(Symbol()) == "Symbol()"


def test_normalize_single_key():
    assert normalize_keys("a") == ["a"]
    assert normalize_keys(7) == [7]


def test_normalize_collection_keeps_order():
    assert normalize_keys(["b", "a", 3]) == ["b", "a", 3]
    assert normalize_keys(("x", "y")) == ["x", "y"]
    assert normalize_keys([]) == []


def test_normalize_rejects_any_invalid_key():
    with pytest.raises(InvalidEventKeyError) as exc_info:
        normalize_keys(["a", 2.5, "b"])

    assert exc_info.value.event_key == 2.5


def test_validation_errors_are_type_errors():
    with pytest.raises(TypeError):
        normalize_keys(None)

    with pytest.raises(ValidationError):
        assert_listener("not callable")

    with pytest.raises(InvalidListenerError):
        assert_listener(None)

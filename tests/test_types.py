"""Tests for _types module."""
import pytest

from devsim._types import check_op, compare


def test_compare_operators():
    assert compare(5, ">=", 3)
    assert compare(3, ">=", 3)
    assert not compare(2, ">=", 3)

    assert compare(3, "<=", 5)
    assert compare(3, "<=", 3)
    assert not compare(4, "<=", 3)

    assert compare(5, ">", 3)
    assert not compare(3, ">", 3)

    assert compare(3, "<", 5)
    assert not compare(3, "<", 3)

    assert compare(3, "==", 3)
    assert not compare(3, "==", 4)

    assert compare(3, "!=", 4)
    assert not compare(3, "!=", 3)


def test_compare_unknown_operator():
    with pytest.raises(ValueError, match="Unknown operator"):
        compare(1, "??", 2)


def test_check_op_passes_known_operator_through():
    assert check_op(">=") == ">="
    with pytest.raises(ValueError):
        check_op("=>")

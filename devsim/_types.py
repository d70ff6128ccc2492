from __future__ import annotations

import operator
from typing import Callable

_OPS: dict[str, Callable[[float, float], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


def check_op(op: str) -> str:
    """Return *op* unchanged, or raise ValueError if it is not a known operator."""
    if op not in _OPS:
        raise ValueError(f"Unknown operator: {op!r}. Expected one of {list(_OPS)}")
    return op


def compare(left: float, op: str, right: float) -> bool:
    """Compare two values using a string operator."""
    return _OPS[check_op(op)](left, right)

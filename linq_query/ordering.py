from __future__ import annotations

import logging
from functools import cmp_to_key
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from .exceptions import LinqUnsupportedTypeException

_logger = logging.getLogger(__name__)

INTEGER = 'int'
TEXT = 'str'
FLOAT = 'float'

_NUMPY_DTYPES = {INTEGER: np.int64, FLOAT: np.float64}


def natural_kind(value: Any) -> Optional[str]:
    """Return the natural-order kind of a value, or None when order() can't sort it.

    bool is an int subclass in Python but has no natural order here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, str):
        return TEXT
    if isinstance(value, float):
        return FLOAT
    return None


def natural_order(values: List[Any]) -> Tuple[Optional[List[Any]], Optional[BaseException]]:
    """Sort int, str or float sequences ascending.

    The kind is taken from the first element. Numeric kinds are ordered with
    numpy.argsort and text with the builtin sort; either way the original
    element objects are returned, only reordered. NaN floats sort last.
    """
    if not values:
        return [], None
    kind = natural_kind(values[0])
    if kind is None:
        return None, LinqUnsupportedTypeException(
            f"linq: sorting {type(values[0]).__name__} with order() is not supported, use order_by()")
    for v in values:
        if natural_kind(v) != kind:
            return None, LinqUnsupportedTypeException(
                f"linq: order() found {type(v).__name__} in a sequence of {kind}, use order_by()")

    if kind == TEXT:
        _logger.debug("order(): sorting %d text values", len(values))
        return sorted(values), None
    try:
        arr = np.array(values, dtype=_NUMPY_DTYPES[kind])
    except OverflowError:
        # ints beyond int64 range
        _logger.debug("order(): %d ints exceed int64, using builtin sort", len(values))
        return sorted(values), None
    _logger.debug("order(): sorting %d %s values with numpy", len(values), kind)
    return [values[i] for i in np.argsort(arr, kind="stable")], None


def sort_with_less(values: List[Any], less: Callable[[Any, Any], bool]) -> List[Any]:
    """Sort a copy of values using a strict less-than predicate."""
    def _cmp(a, b):
        if less(a, b):
            return -1
        if less(b, a):
            return 1
        return 0
    return sorted(values, key=cmp_to_key(_cmp))

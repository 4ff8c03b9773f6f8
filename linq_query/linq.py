from __future__ import annotations

import logging
import warnings
from dataclasses import replace
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Set as TSet, Tuple, TypeVar

from . import ordering
from . import sets
from .common import Policy, Grouping, invoke
from .exceptions import LinqException, LinqNilInputException, LinqNilFuncException, LinqNoElementException, \
    LinqNegativeParamException, LinqUnsupportedTypeException

_logger = logging.getLogger(__name__)

T = TypeVar('T')
K = TypeVar('K')
U = TypeVar('U')
V = TypeVar('V')
Number = float | int
Fault = Optional[BaseException]


class Queryable(Generic[T]):
    """An eager query pipeline over an in-memory list.

    Every intermediate operator evaluates immediately and returns a new
    Queryable; the receiver is never modified. The first fault met along the
    chain (a None input, a missing callback, a failing callback...) is carried
    by every later Queryable unchanged, and terminal operators return it as the
    second item of a (value, fault) tuple instead of raising it.
    """

    def __init__(self, source: Optional[Iterable[T]], policy: Optional[Policy] = None):
        self._policy = policy or Policy()
        self._ops: list[str] = ['from']
        self._less: Optional[Callable[[T, T], bool]] = None
        self._fault_origin: Optional[str] = None
        self._fault: Fault = None
        if source is None:
            self._values: Optional[List[T]] = None
            self._set_fault('from', LinqNilInputException())
        elif isinstance(source, list):
            # Kept by reference: callers must not mutate it while the pipeline is in use
            self._values = source
        else:
            self._values = list(source)

    # Pipeline state plumbing

    def _set_fault(self, op: str, fault: BaseException):
        self._values = None
        self._fault = fault
        self._fault_origin = op
        _logger.debug("%s introduced fault %s: %s", op, type(fault).__name__, fault)

    def _derive(self, op: str, values: Optional[List[Any]] = None, fault: Fault = None) -> 'Queryable':
        q = Queryable.__new__(Queryable)
        q._policy = self._policy
        q._ops = self._ops + [op]
        q._less = None
        q._fault_origin = None
        q._fault = None
        q._values = values
        if fault is not None:
            q._set_fault(op, fault)
        return q

    def _propagate(self, op: str) -> 'Queryable':
        q = self._derive(op)
        q._fault = self._fault
        q._fault_origin = self._fault_origin
        return q

    def _call(self, fn: Callable[..., Any], *args) -> Tuple[Any, Fault]:
        return invoke(fn, self._policy.callback_protocol, *args)

    def _scan(self, fn: Callable[[T], Any]) -> Tuple[Optional[List[Any]], Fault]:
        """Apply fn to every element in order, stopping at the first fault."""
        out = []
        for v in self._values:
            res, fault = self._call(fn, v)
            if fault is not None:
                return None, fault
            out.append(res)
        return out, None

    def _count_param(self, op: str, n: int) -> Tuple[int, Fault]:
        if n < 0:
            mode = self._policy.on_negative
            if mode == 'error':
                return 0, LinqNegativeParamException(f"linq: {op}() parameter cannot be negative, got {n}")
            if mode == 'warn':
                warnings.warn(f"{op}({n}): negative count clamped to 0", RuntimeWarning)
            n = 0
        return min(n, len(self._values)), None

    @property
    def fault(self) -> Fault:
        return self._fault

    @property
    def policy(self) -> Policy:
        return self._policy

    def with_policy(self, policy: Policy) -> 'Queryable[T]':
        q = self._derive('with_policy', self._values)
        q._policy = policy
        q._fault = self._fault
        q._fault_origin = self._fault_origin
        return q

    def on_negative(self, mode: str) -> 'Queryable[T]':
        return self.with_policy(replace(self._policy, on_negative=mode))

    def results(self) -> Tuple[Optional[List[T]], Fault]:
        return self._values, self._fault

    # Filtering & projection

    def where(self, predicate: Callable[[T], bool]) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('where')
        if predicate is None:
            return self._derive('where', fault=LinqNilFuncException())
        flags, fault = self._scan(predicate)
        if fault is not None:
            return self._derive('where', fault=fault)
        return self._derive('where', [v for v, ok in zip(self._values, flags) if ok])

    def select(self, selector: Callable[[T], U]) -> 'Queryable[U]':
        if self._fault is not None:
            return self._propagate('select')
        if selector is None:
            return self._derive('select', fault=LinqNilFuncException())
        out, fault = self._scan(selector)
        return self._derive('select', out, fault)

    def select_many(self, selector: Callable[[T], Iterable[U]]) -> 'Queryable[U]':
        if self._fault is not None:
            return self._propagate('select_many')
        if selector is None:
            return self._derive('select_many', fault=LinqNilFuncException())
        out: list = []
        for v in self._values:
            inner, fault = self._call(selector, v)
            if fault is not None:
                return self._derive('select_many', fault=fault)
            try:
                out.extend(inner)
            except TypeError:
                return self._derive('select_many', fault=LinqUnsupportedTypeException(
                    f"linq: select_many() selector returned non-iterable {type(inner).__name__}"))
        return self._derive('select_many', out)

    def group_by(self, key_selector: Callable[[T], K],
                 element_selector: Optional[Callable[[T], U]] = None) -> 'Queryable[Grouping[K, U]]':
        if self._fault is not None:
            return self._propagate('group_by')
        if key_selector is None:
            return self._derive('group_by', fault=LinqNilFuncException())
        groups: Dict[Any, List[Any]] = {}
        for x in self._values:
            k, fault = self._call(key_selector, x)
            if fault is None and element_selector is not None:
                x, fault = self._call(element_selector, x)
            if fault is not None:
                return self._derive('group_by', fault=fault)
            try:
                groups.setdefault(k, []).append(x)
            except TypeError:
                return self._derive('group_by', fault=LinqUnsupportedTypeException(
                    f"linq: group_by() key {type(k).__name__} is not hashable"))
        return self._derive('group_by', [Grouping(k, v) for k, v in groups.items()])

    # Set algebra

    def _hashed(self, op: str, fn: Callable[..., List[Any]], *args) -> 'Queryable[T]':
        try:
            out = fn(self._values, *args)
        except TypeError as ex:
            return self._derive(op, fault=LinqUnsupportedTypeException(
                f"linq: {op}() requires hashable elements ({ex})"))
        return self._derive(op, out)

    def _hashed_with(self, op: str, fn: Callable[..., List[Any]], other: Optional[Iterable[T]]) -> 'Queryable[T]':
        if other is not None:
            try:
                other = list(other)
            except TypeError:
                return self._derive(op, fault=LinqUnsupportedTypeException(
                    f"linq: {op}() expects an iterable, got {type(other).__name__}"))
        return self._hashed(op, fn, other)

    def distinct(self) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('distinct')
        return self._hashed('distinct', sets.distinct)

    def distinct_by(self, equals: Callable[[T, T], bool]) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('distinct_by')
        if equals is None:
            return self._derive('distinct_by', fault=LinqNilFuncException())
        out, fault = sets.distinct_by(self._values, lambda a, b: self._call(equals, a, b))
        return self._derive('distinct_by', out, fault)

    def union(self, other: Optional[Iterable[T]]) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('union')
        return self._hashed_with('union', sets.union, other)

    def intersect(self, other: Optional[Iterable[T]]) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('intersect')
        return self._hashed_with('intersect', sets.intersect, other)

    def except_(self, other: Optional[Iterable[T]]) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('except')
        return self._hashed_with('except', sets.except_, other)

    # Ordering

    def order(self) -> 'Queryable[T]':
        """Natural ascending order for int, str or float sequences; use order_by() for anything else."""
        if self._fault is not None:
            return self._propagate('order')
        out, fault = ordering.natural_order(self._values)
        return self._derive('order', out, fault)

    def order_by(self, less: Callable[[T, T], bool]) -> 'Queryable[T]':
        """Sort a copy of the elements with less(a, b) meaning "a sorts before b".

        less has no fault channel: it must return a bool, and anything it raises
        propagates to the caller.
        """
        if self._fault is not None:
            return self._propagate('order_by')
        if less is None:
            return self._derive('order_by', fault=LinqNilFuncException())
        q = self._derive('order_by')
        q._less = less
        q._values = ordering.sort_with_less(self._values, q._less)
        return q

    # Windowing

    def take(self, n: int) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('take')
        n, fault = self._count_param('take', n)
        if fault is not None:
            return self._derive('take', fault=fault)
        return self._derive('take', self._values[:n])

    def skip(self, n: int) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('skip')
        n, fault = self._count_param('skip', n)
        if fault is not None:
            return self._derive('skip', fault=fault)
        return self._derive('skip', self._values[n:])

    def reverse(self) -> 'Queryable[T]':
        if self._fault is not None:
            return self._propagate('reverse')
        return self._derive('reverse', self._values[::-1])

    # Quantifiers

    def count(self) -> Tuple[int, Fault]:
        if self._fault is not None:
            return 0, self._fault
        return len(self._values), None

    def count_by(self, predicate: Callable[[T], bool]) -> Tuple[int, Fault]:
        if self._fault is not None:
            return 0, self._fault
        if predicate is None:
            return 0, LinqNilFuncException()
        c = 0
        for v in self._values:
            ok, fault = self._call(predicate, v)
            if fault is not None:
                return 0, fault
            if ok:
                c += 1
        return c, None

    def any(self) -> Tuple[bool, Fault]:
        if self._fault is not None:
            return False, self._fault
        return len(self._values) > 0, None

    def any_with(self, predicate: Callable[[T], bool]) -> Tuple[bool, Fault]:
        if self._fault is not None:
            return False, self._fault
        if predicate is None:
            return False, LinqNilFuncException()
        for v in self._values:
            ok, fault = self._call(predicate, v)
            if fault is not None:
                return False, fault
            if ok:
                return True, None
        return False, None

    def all(self, predicate: Callable[[T], bool]) -> Tuple[bool, Fault]:
        """True if predicate holds for every element (vacuously for none).

        A false result does not stop the scan: every element is still checked
        so that a failure further along is reported.
        """
        if self._fault is not None:
            return False, self._fault
        if predicate is None:
            return False, LinqNilFuncException()
        result = True
        for v in self._values:
            ok, fault = self._call(predicate, v)
            if fault is not None:
                return False, fault
            result = result and bool(ok)
        return result, None

    def single(self, predicate: Callable[[T], bool]) -> Tuple[bool, Fault]:
        if self._fault is not None:
            return False, self._fault
        if predicate is None:
            return False, LinqNilFuncException()
        c, fault = self.count_by(predicate)
        if fault is not None:
            return False, fault
        return c == 1, None

    # Positional access

    def first(self) -> Tuple[Optional[T], Fault]:
        if self._fault is not None:
            return None, self._fault
        if not self._values:
            return None, LinqNoElementException()
        return self._values[0], None

    def first_or_none(self) -> Tuple[Optional[T], Fault]:
        if self._fault is not None:
            return None, self._fault
        return (self._values[0] if self._values else None), None

    def last(self) -> Tuple[Optional[T], Fault]:
        if self._fault is not None:
            return None, self._fault
        if not self._values:
            return None, LinqNoElementException()
        return self._values[-1], None

    def last_or_none(self) -> Tuple[Optional[T], Fault]:
        if self._fault is not None:
            return None, self._fault
        return (self._values[-1] if self._values else None), None

    def _find(self, predicate: Callable[[T], bool], backwards: bool) -> Tuple[Optional[T], bool, Fault]:
        if self._fault is not None:
            return None, False, self._fault
        if predicate is None:
            return None, False, LinqNilFuncException()
        for v in (reversed(self._values) if backwards else self._values):
            ok, fault = self._call(predicate, v)
            if fault is not None:
                return None, False, fault
            if ok:
                return v, True, None
        return None, False, None

    def first_by(self, predicate: Callable[[T], bool]) -> Tuple[Optional[T], Fault]:
        elem, found, fault = self._find(predicate, backwards=False)
        if fault is None and not found:
            fault = LinqNoElementException()
        return elem, fault

    def first_or_none_by(self, predicate: Callable[[T], bool]) -> Tuple[Optional[T], Fault]:
        elem, _, fault = self._find(predicate, backwards=False)
        return elem, fault

    def last_by(self, predicate: Callable[[T], bool]) -> Tuple[Optional[T], Fault]:
        elem, found, fault = self._find(predicate, backwards=True)
        if fault is None and not found:
            fault = LinqNoElementException()
        return elem, fault

    def last_or_none_by(self, predicate: Callable[[T], bool]) -> Tuple[Optional[T], Fault]:
        elem, _, fault = self._find(predicate, backwards=True)
        return elem, fault

    # Conversions

    def to_list(self) -> Tuple[Optional[List[T]], Fault]:
        if self._fault is not None:
            return None, self._fault
        return list(self._values), None

    def to_set(self) -> Tuple[Optional[TSet[T]], Fault]:
        if self._fault is not None:
            return None, self._fault
        try:
            return set(self._values), None
        except TypeError as ex:
            return None, LinqUnsupportedTypeException(f"linq: to_set() requires hashable elements ({ex})")

    def to_dict(self, key_selector: Callable[[T], K],
                value_selector: Optional[Callable[[T], V]] = None) -> Tuple[Optional[Dict[K, V]], Fault]:
        if self._fault is not None:
            return None, self._fault
        if key_selector is None:
            return None, LinqNilFuncException()
        out: Dict[K, V] = {}
        for x in self._values:
            k, fault = self._call(key_selector, x)
            if fault is None and value_selector is not None:
                x, fault = self._call(value_selector, x)
            if fault is not None:
                return None, fault
            try:
                if k in out:
                    return None, LinqException("linq: duplicate key in to_dict(): %r" % (k,))
                out[k] = x
            except TypeError:
                return None, LinqUnsupportedTypeException(
                    f"linq: to_dict() key {type(k).__name__} is not hashable")
        return out, None

    # Aggregates

    def _projected(self, selector: Optional[Callable[[T], Any]]) -> Tuple[Optional[List[Any]], Fault]:
        if self._fault is not None:
            return None, self._fault
        if selector is None:
            return self._values, None
        return self._scan(selector)

    def sum(self, selector: Optional[Callable[[T], Number]] = None) -> Tuple[Number, Fault]:
        vals, fault = self._projected(selector)
        if fault is not None:
            return 0, fault
        total: Number = 0
        for v in vals:
            try:
                total += v or 0
            except TypeError:
                return 0, LinqUnsupportedTypeException(f"linq: sum() cannot add {type(v).__name__}")
        return total, None

    def average(self, selector: Optional[Callable[[T], Number]] = None) -> Tuple[float, Fault]:
        total, fault = self.sum(selector)
        if fault is not None:
            return 0.0, fault
        return (total / len(self._values) if self._values else 0.0), None

    def _extreme(self, op: str, pick: Callable, selector: Optional[Callable[[T], Any]]) -> Tuple[Any, Fault]:
        vals, fault = self._projected(selector)
        if fault is not None:
            return None, fault
        if not vals:
            return None, LinqNoElementException(f"linq: {op}() of empty sequence")
        try:
            return pick(vals), None
        except TypeError as ex:
            return None, LinqUnsupportedTypeException(f"linq: {op}() cannot compare elements ({ex})")

    def min(self, selector: Optional[Callable[[T], Any]] = None) -> Tuple[Any, Fault]:
        return self._extreme('min', min, selector)

    def max(self, selector: Optional[Callable[[T], Any]] = None) -> Tuple[Any, Fault]:
        return self._extreme('max', max, selector)

    def explain(self) -> str:
        text = " -> ".join(self._ops)
        if self._fault is not None:
            text += f" | fault at {self._fault_origin}: {type(self._fault).__name__}"
        return text


def from_collection(source: Optional[Iterable[T]], policy: Optional[Policy] = None) -> Queryable[T]:
    """Entry point to build a queryable over a list or any other iterable."""
    return Queryable(source, policy)

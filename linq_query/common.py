from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

from .exceptions import LinqException

K = TypeVar('K')
U = TypeVar('U')

NEGATIVE_MODES = ('clamp', 'warn', 'error')
CALLBACK_PROTOCOLS = ('plain', 'pair')


@dataclass
class Policy:
    """Execution policy for Queryable pipelines.

    on_negative: 'clamp' | 'warn' | 'error'
        What take()/skip() do with a negative count. 'clamp' treats it as 0,
        'warn' does the same after emitting a RuntimeWarning, 'error' faults the
        pipeline with LinqNegativeParamException.
    callback_protocol: 'plain' | 'pair'
        'plain' callbacks return their result directly and report failure by
        raising. 'pair' callbacks return a (result, fault) tuple; a fault that is
        not None is adopted as the pipeline fault. Raised exceptions are
        captured under both protocols.
    """
    on_negative: str = "clamp"  # 'clamp' | 'warn' | 'error'
    callback_protocol: str = "plain"  # 'plain' | 'pair'

    def __post_init__(self):
        if self.on_negative not in NEGATIVE_MODES:
            raise ValueError(f"on_negative must be one of {NEGATIVE_MODES}, got {self.on_negative!r}")
        if self.callback_protocol not in CALLBACK_PROTOCOLS:
            raise ValueError(f"callback_protocol must be one of {CALLBACK_PROTOCOLS}, got {self.callback_protocol!r}")


class Grouping(Generic[K, U]):
    def __init__(self, key: K, elements: Iterable[U]):
        self.key = key
        self._elements = list(elements)

    def __iter__(self) -> Iterator[U]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self):
        return f"Grouping(key={self.key!r}, elements={self._elements!r})"


def invoke(fn: Callable[..., Any], protocol: str, *args) -> Tuple[Any, Optional[BaseException]]:
    """Call a user callback and split its outcome into (result, fault).

    An exception raised by the callback becomes the fault. Under the 'pair'
    protocol the callback's own (result, fault) tuple is unpacked.
    """
    try:
        outcome = fn(*args)
    except Exception as ex:
        return None, ex
    if protocol == 'pair':
        if not isinstance(outcome, tuple) or len(outcome) != 2:
            return None, LinqException(
                f"linq: callback {getattr(fn, '__name__', fn)!r} must return a (result, fault) pair")
        result, fault = outcome
        if fault is not None:
            return None, fault
        return result, None
    return outcome, None

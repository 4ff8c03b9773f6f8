from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Tuple

# Hash-backed operators compare elements by their own __eq__/__hash__ and make
# no promise about the order of the returned list. Unhashable elements raise
# TypeError, which the caller turns into a fault.

EqualsCall = Callable[[Any, Any], Tuple[Any, Optional[BaseException]]]


def distinct(values: List[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


def distinct_by(values: List[Any], equals: EqualsCall) -> Tuple[Optional[List[Any]], Optional[BaseException]]:
    """Pairwise dedup with a caller supplied equality.

    Every a[i] == a[j] with i < j is checked, so the worst case (all elements
    different) is O(N^2). The left hand side of each match is kept, which
    preserves the relative order of the survivors.
    """
    size = len(values)
    excluded = [False] * size
    kept = []
    for i in range(size):
        if excluded[i]:
            continue
        left = values[i]
        for j in range(i + 1, size):
            same, fault = equals(left, values[j])
            if fault is not None:
                return None, fault
            if same:
                excluded[j] = True
        kept.append(left)
    return kept, None


def union(values: List[Any], other: Optional[Iterable[Any]]) -> List[Any]:
    seen = dict.fromkeys(values)
    if other is not None:
        seen.update(dict.fromkeys(other))
    return list(seen)


def intersect(values: List[Any], other: Optional[Iterable[Any]]) -> List[Any]:
    if other is None:
        return []
    present = set(other)
    return [v for v in dict.fromkeys(values) if v in present]


def except_(values: List[Any], other: Optional[Iterable[Any]]) -> List[Any]:
    remaining = dict.fromkeys(values)
    if other is not None:
        for v in other:
            remaining.pop(v, None)
    return list(remaining)

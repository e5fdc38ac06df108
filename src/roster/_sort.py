"""Merge sort over students.

Stable, comparison-based, O(n log n) comparisons. One scratch buffer the
size of the input is allocated per call and shared by every merge level.
The input sequence is never mutated; the result holds the same student
objects in a new list.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import cmp_to_key

from roster._contracts import against, ensures
from roster._model import Student
from roster._ordering import OrderingRule


def is_permutation(seq: Sequence[Student], result: list[Student]) -> bool:
    """Same objects, same multiplicities, compared by identity."""
    return sorted(map(id, seq)) == sorted(map(id, result))


def is_ordered(result: Sequence[Student], rule: OrderingRule) -> bool:
    return all(not rule.is_before(result[i + 1], result[i]) for i in range(len(result) - 1))


def same_objects(a: Sequence[Student], b: Sequence[Student]) -> bool:
    return len(a) == len(b) and all(x is y for x, y in zip(a, b))


def sort_reference(seq: Sequence[Student], rule: OrderingRule) -> list[Student]:
    # Reference: the builtin stable sort driven by the same three-way compare.
    return sorted(seq, key=cmp_to_key(rule.compare))


@against(sort_reference, eq=same_objects)
@ensures(lambda seq, rule, result: is_ordered(result, rule))
@ensures(lambda seq, rule, result: is_permutation(seq, result))
def merge_sort(seq: Sequence[Student], rule: OrderingRule) -> list[Student]:
    """Return a new list holding the students of *seq* ordered by *rule*.

    Ties keep their input order. Raises ``MissingFieldError`` when *rule*
    compares a student that lacks the field it orders by.
    """
    items = list(seq)
    if len(items) > 1:
        _sort_range(items, list(items), 0, len(items), rule)
    return items


def _sort_range(items: list[Student], scratch: list[Student], lo: int, hi: int, rule: OrderingRule) -> None:
    n = hi - lo
    if n <= 1:
        return
    if n == 2:
        if rule.is_before(items[lo + 1], items[lo]):
            items[lo], items[lo + 1] = items[lo + 1], items[lo]
        return

    mid = lo + n // 2
    _sort_range(items, scratch, lo, mid, rule)
    _sort_range(items, scratch, mid, hi, rule)
    _merge(items, scratch, lo, mid, hi, rule)


def _merge(items: list[Student], scratch: list[Student], lo: int, mid: int, hi: int, rule: OrderingRule) -> None:
    i, j, k = lo, mid, lo
    while i < mid and j < hi:
        # Take the right head only when it is strictly before the left head.
        if rule.is_before(items[j], items[i]):
            scratch[k] = items[j]
            j += 1
        else:
            scratch[k] = items[i]
            i += 1
        k += 1

    # Remainders are [i, mid) and [j, hi); at most one is non-empty.
    while i < mid:
        scratch[k] = items[i]
        i += 1
        k += 1
    while j < hi:
        scratch[k] = items[j]
        j += 1
        k += 1

    items[lo:hi] = scratch[lo:hi]

"""Immutable student collection and its query operations."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from roster._model import SchoolYear, Student
from roster._ordering import BY_ID, BY_NAME_THEN_ID, OrderingRule
from roster._sort import merge_sort


def _year_between(start: int, end: int, year: int) -> bool:
    # An inverted range (start > end) contains nothing.
    return start <= year <= end


class Students:
    """A fixed collection of students.

    Built once from an iterable and never changed afterwards. Every query
    returns a fresh list or dict; callers may mutate those freely.

    The ``ordered_by*`` methods go through ``merge_sort``. Its postconditions
    (an O(n log n) permutation check and an O(n) ordering check) run on every
    call only when ``ROSTER_CONTRACTS`` is switched on.
    """

    __slots__ = ("_students",)

    def __init__(self, students: Iterable[Student] = ()) -> None:
        self._students: tuple[Student, ...] = tuple(students)

    def __len__(self) -> int:
        return len(self._students)

    def __iter__(self) -> Iterator[Student]:
        return iter(self._students)

    def __contains__(self, student: object) -> bool:
        return student in self._students

    def __repr__(self) -> str:
        return f"Students({len(self._students)} students)"

    def starting_between(self, start: int, end: int) -> list[Student]:
        """Students whose start year begins within ``[start, end]``."""
        return [s for s in self._students if _year_between(start, end, s.start_year.start)]

    def finishing_between(self, start: int, end: int) -> list[Student]:
        """Students whose end year finishes within ``[start, end]``."""
        return [s for s in self._students if _year_between(start, end, s.end_year.end)]

    def grouped_by_start_year(self) -> dict[SchoolYear, list[Student]]:
        groups: dict[SchoolYear, list[Student]] = {}
        for s in self._students:
            groups.setdefault(s.start_year, []).append(s)
        return groups

    def count_of_course_length_for_start_year(self, start_year: SchoolYear) -> dict[int, int]:
        return dict(Counter(s.course_length for s in self._students if s.start_year == start_year))

    def count_of_country_code_for_start_year(self, start_year: SchoolYear) -> dict[str, int]:
        return dict(Counter(s.country_code for s in self._students if s.start_year == start_year))

    def ordered_by(self, rule: OrderingRule) -> list[Student]:
        return merge_sort(self._students, rule)

    def ordered_by_id(self) -> list[Student]:
        return self.ordered_by(BY_ID)

    def ordered_by_name_then_id(self) -> list[Student]:
        return self.ordered_by(BY_NAME_THEN_ID)


def students(*records: Student) -> Students:
    return Students(records)

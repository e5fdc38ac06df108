"""Hypothesis strategies for students and the types around them.

Generated data is deliberately collision-heavy: ids and names come from
small pools so ties, shared names and repeated objects show up often.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from hypothesis import strategies as st

from roster._model import SchoolYear, Student
from roster._ordering import RULES, OrderingRule

NAMES = ("Ada", "Alan", "Barbara", "Edsger", "Grace", "Grace Hopper", "alan")
COUNTRY_CODES = ("DE", "FR", "GB", "IE", "JP", "US")


def school_years(min_start: int = 2000, max_start: int = 2030) -> st.SearchStrategy[SchoolYear]:
    return st.integers(min_start, max_start).map(lambda y: SchoolYear(y, y + 1))


@st.composite
def student_records(draw: Callable[..., Any], *, max_course_length: int = 6) -> Student:
    start = draw(school_years())
    length = draw(st.integers(1, max_course_length))
    return Student(
        id=draw(st.text(alphabet="0123456789", min_size=1, max_size=3)),
        name=draw(st.one_of(st.sampled_from(NAMES), st.text(min_size=1, max_size=4))),
        start_year=start,
        end_year=SchoolYear(start.start + length - 1, start.start + length),
        country_code=draw(st.sampled_from(COUNTRY_CODES)),
    )


def student_lists(*, max_size: int = 20) -> st.SearchStrategy[list[Student]]:
    """Lists of students, some of which hold the same object more than once."""
    distinct = st.lists(student_records(), max_size=max_size)
    repeated = st.lists(student_records(), min_size=1, max_size=max(1, max_size // 2)).flatmap(
        lambda pool: st.lists(st.sampled_from(pool), max_size=max_size)
    )
    return st.one_of(distinct, repeated)


def ordering_rules() -> st.SearchStrategy[OrderingRule]:
    return st.sampled_from(list(RULES.values()))

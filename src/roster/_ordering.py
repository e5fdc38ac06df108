"""Ordering rules for the student sorter.

A rule is any object with a three-way ``compare(a, b)``: negative when ``a``
comes strictly before ``b``, zero when they tie, positive otherwise. The
sorter only ever asks whether the right-hand element is strictly before the
left-hand one, so ties always resolve towards the left input.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from roster._model import Student


class MissingFieldError(ValueError):
    """A rule needed a field that the student does not carry."""

    def __init__(self, field: str, student: Any) -> None:
        super().__init__(f"cannot order by {field!r}: field missing on {student!r}")
        self.field = field
        self.student = student


@runtime_checkable
class OrderingRule(Protocol):
    """Protocol for pluggable total preorders over students."""

    name: str

    def compare(self, a: Student, b: Student) -> int:
        ...

    def is_before(self, a: Student, b: Student) -> bool:
        ...


def _require(student: Any, field: str) -> Any:
    value = getattr(student, field, None)
    if value is None:
        raise MissingFieldError(field, student)
    return value


def _three_way(x: Any, y: Any) -> int:
    return (x > y) - (x < y)


class ById:
    name = "by_id"

    def compare(self, a: Student, b: Student) -> int:
        return _three_way(_require(a, "id"), _require(b, "id"))

    def is_before(self, a: Student, b: Student) -> bool:
        return self.compare(a, b) < 0

    def __repr__(self) -> str:
        return "ById()"


class ByNameThenId:
    """Order by name; students sharing a name are ordered by id."""

    name = "by_name_then_id"

    def __init__(self, fallback: OrderingRule | None = None) -> None:
        self.fallback = fallback if fallback is not None else BY_ID

    def compare(self, a: Student, b: Student) -> int:
        c = _three_way(_require(a, "name"), _require(b, "name"))
        if c != 0:
            return c
        return self.fallback.compare(a, b)

    def is_before(self, a: Student, b: Student) -> bool:
        return self.compare(a, b) < 0

    def __repr__(self) -> str:
        return f"ByNameThenId(fallback={self.fallback!r})"


BY_ID = ById()
BY_NAME_THEN_ID = ByNameThenId()

RULES: dict[str, OrderingRule] = {
    BY_ID.name: BY_ID,
    BY_NAME_THEN_ID.name: BY_NAME_THEN_ID,
}

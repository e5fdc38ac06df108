from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True)
class SchoolYear:
    """A school year spanning two calendar years, e.g. ``SchoolYear(2019, 2020)``.

    Compared and hashed structurally, so equal years are interchangeable as
    mapping keys.
    """

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}/{self.end}"


@dataclasses.dataclass(frozen=True)
class Student:
    id: str
    name: str
    start_year: SchoolYear
    end_year: SchoolYear
    country_code: str

    @property
    def course_length(self) -> int:
        return self.end_year.end - self.start_year.start

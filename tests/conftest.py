"""Shared fixtures for roster tests."""

from __future__ import annotations

import pytest

from roster._model import SchoolYear, Student


def make_student(
    id: str | None = "1",
    name: str | None = "Ada",
    start: int = 2020,
    length: int = 3,
    country_code: str = "GB",
) -> Student:
    return Student(
        id=id,
        name=name,
        start_year=SchoolYear(start, start + 1),
        end_year=SchoolYear(start + length - 1, start + length),
        country_code=country_code,
    )


@pytest.fixture
def trio():
    """The three students of the basic ordering scenario."""
    return [
        make_student(id="3", name="B"),
        make_student(id="1", name="A"),
        make_student(id="2", name="A"),
    ]

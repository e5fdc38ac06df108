from roster._contracts import against, ensures
from roster._engine import ObligationResult, verify
from roster._model import SchoolYear, Student
from roster._ordering import BY_ID, BY_NAME_THEN_ID, ById, ByNameThenId, MissingFieldError, OrderingRule
from roster._sort import merge_sort
from roster._students import Students, students

__all__ = [
    "BY_ID",
    "BY_NAME_THEN_ID",
    "ById",
    "ByNameThenId",
    "MissingFieldError",
    "ObligationResult",
    "OrderingRule",
    "SchoolYear",
    "Student",
    "Students",
    "against",
    "ensures",
    "merge_sort",
    "students",
    "verify",
]

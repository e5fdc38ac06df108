from __future__ import annotations

import dataclasses
import time
from collections import defaultdict, deque
from collections.abc import Callable, Sequence
from typing import Any

from hypothesis import HealthCheck, find, given, settings
from hypothesis.errors import FailedHealthCheck, NoSuchExample

from roster._contracts import contract_of, unwrap
from roster._model import Student
from roster._ordering import BY_ID, RULES, OrderingRule
from roster._sort import is_permutation, merge_sort, same_objects
from roster._strategies import student_lists

Sorter = Callable[[Sequence[Student], OrderingRule], list[Student]]


@dataclasses.dataclass
class ObligationResult:
    rule: str
    obligation: str
    status: str  # "pass" | "fail" | "error" | "skip"
    details: dict[str, Any]
    duration_s: float = 0.0

    def to_json(self) -> dict[str, Any]:
        return {
            "rule": self.rule,
            "obligation": self.obligation,
            "status": self.status,
            "details": self.details,
            "duration_s": round(self.duration_s, 3),
        }


class PropertyViolation(AssertionError):
    pass


def _rows(students: Sequence[Student]) -> list[dict[str, Any]]:
    return [dataclasses.asdict(s) for s in students]


def _input_positions(seq: Sequence[Student], result: Sequence[Student]) -> list[int]:
    # Repeated objects are matched to their input occurrences left to right.
    slots: dict[int, deque[int]] = defaultdict(deque)
    for i, s in enumerate(seq):
        slots[id(s)].append(i)
    return [slots[id(s)].popleft() for s in result]


def check_permutation(sorter: Sorter, seq: Sequence[Student], rule: OrderingRule, result: list[Student]) -> None:
    if not is_permutation(seq, result):
        raise PropertyViolation("result is not a permutation of the input")


def check_ordered(sorter: Sorter, seq: Sequence[Student], rule: OrderingRule, result: list[Student]) -> None:
    for i in range(len(result) - 1):
        if rule.is_before(result[i + 1], result[i]):
            raise PropertyViolation(f"inversion at index {i}: {result[i + 1]!r} before {result[i]!r}")


def check_idempotent(sorter: Sorter, seq: Sequence[Student], rule: OrderingRule, result: list[Student]) -> None:
    if not same_objects(sorter(result, rule), result):
        raise PropertyViolation("sorting the sorted output changed it")


def check_stable(sorter: Sorter, seq: Sequence[Student], rule: OrderingRule, result: list[Student]) -> None:
    positions = _input_positions(seq, result)
    for i in range(len(result) - 1):
        if rule.compare(result[i], result[i + 1]) == 0 and positions[i] > positions[i + 1]:
            raise PropertyViolation(
                f"tied students at input positions {positions[i + 1]} and {positions[i]} were swapped"
            )


def check_tie_break(sorter: Sorter, seq: Sequence[Student], rule: OrderingRule, result: list[Student]) -> None:
    fallback = getattr(rule, "fallback", BY_ID)
    for a, b in zip(result, result[1:]):
        if a.name == b.name and fallback.is_before(b, a):
            raise PropertyViolation(f"equal names not ordered by {fallback.name}: {a!r}, {b!r}")


def check_equiv_to_reference(
    sorter: Sorter, seq: Sequence[Student], rule: OrderingRule, result: list[Student]
) -> None:
    contract = contract_of(sorter)
    if contract is None or contract.reference is None:
        raise PropertyViolation("no reference sort attached")
    eq = contract.eq or (lambda x, y: x == y)
    expected = contract.reference(seq, rule)
    if not eq(result, expected):
        raise PropertyViolation("result differs from the reference sort")


PROPERTIES: dict[str, Callable[[Sorter, Sequence[Student], OrderingRule, list[Student]], None]] = {
    "permutation": check_permutation,
    "ordered": check_ordered,
    "idempotent": check_idempotent,
    "stable": check_stable,
    "tie_break": check_tie_break,
    "equiv_to_reference": check_equiv_to_reference,
}


def _applies(prop: str, rule: OrderingRule, sorter: Sorter) -> str | None:
    """Reason to skip *prop* for *rule*, or None when it applies."""
    if prop == "tie_break" and not hasattr(rule, "fallback"):
        return f"{rule.name} has no tie-break"
    contract = contract_of(sorter)
    if prop == "equiv_to_reference" and (contract is None or contract.reference is None):
        return "no reference sort attached"
    return None


def _smoke(root: Sorter, rule: OrderingRule, *, max_size: int) -> ObligationResult:
    t0 = time.monotonic()
    try:
        strat = student_lists(max_size=max_size)
        example = find(strat, lambda xs: len(xs) >= min(3, max_size))
        result = root(example, rule)
        contract = contract_of(root)
        failed = contract.violations((example, rule), {}, result) if contract is not None else []
    except NoSuchExample:
        return ObligationResult(
            rule.name, "contracts_smoke", "error",
            {"error": "no example input found"},
            duration_s=time.monotonic() - t0,
        )
    except Exception as e:
        return ObligationResult(
            rule.name, "contracts_smoke", "error",
            {"error": f"{type(e).__name__}: {e}"},
            duration_s=time.monotonic() - t0,
        )
    details = {"example": _rows(example), "result": _rows(result)}
    if failed:
        return ObligationResult(
            rule.name, "contracts_smoke", "fail",
            {**details, "error": "; ".join(failed)},
            duration_s=time.monotonic() - t0,
        )
    ensures = len(contract.ensures) if contract is not None else 0
    return ObligationResult(
        rule.name, "contracts_smoke", "pass", {**details, "ensures": ensures}, duration_s=time.monotonic() - t0
    )


def _run_property(
    root: Sorter,
    rule: OrderingRule,
    prop_name: str,
    *,
    max_examples: int,
    max_size: int,
) -> ObligationResult:
    check = PROPERTIES[prop_name]
    t0 = time.monotonic()

    # The last failing example Hypothesis replays is the shrunk one.
    shrunk_ce: list[dict[str, Any] | None] = [None]

    @settings(
        max_examples=max_examples,
        deadline=None,
        suppress_health_check=[HealthCheck.too_slow, HealthCheck.filter_too_much],
        database=None,
    )
    @given(student_lists(max_size=max_size))
    def prop(seq: list[Student]) -> None:
        result = root(seq, rule)
        try:
            check(root, seq, rule, result)
        except PropertyViolation as e:
            shrunk_ce[0] = {"seq": _rows(seq), "result": _rows(result), "note": str(e)}
            raise

    try:
        prop()
    except PropertyViolation as e:
        return ObligationResult(
            rule.name, prop_name, "fail",
            {"error": str(e), "counterexample": shrunk_ce[0]},
            duration_s=time.monotonic() - t0,
        )
    except FailedHealthCheck as e:
        return ObligationResult(
            rule.name, prop_name, "fail",
            {"error": f"FailedHealthCheck: {e}"},
            duration_s=time.monotonic() - t0,
        )
    except Exception as e:
        return ObligationResult(
            rule.name, prop_name, "error",
            {"error": f"{type(e).__name__}: {e}"},
            duration_s=time.monotonic() - t0,
        )
    return ObligationResult(
        rule.name, prop_name, "pass",
        {"max_examples": max_examples, "max_size": max_size},
        duration_s=time.monotonic() - t0,
    )


def verify(
    *,
    rules: Sequence[OrderingRule] | None = None,
    sorter: Sorter = merge_sort,
    max_examples: int = 200,
    max_size: int = 20,
    smoke_max_size: int = 5,
    on_result: Callable[[ObligationResult], None] | None = None,
) -> list[ObligationResult]:
    """Check the sorter's properties for every ordering rule.

    Exceptions raised while checking are reported as ``error`` results and
    never escape.
    """
    root = unwrap(sorter)
    active = list(rules) if rules is not None else list(RULES.values())

    results: list[ObligationResult] = []

    def _emit(result: ObligationResult) -> None:
        results.append(result)
        if on_result is not None:
            on_result(result)

    for rule in active:
        _emit(_smoke(root, rule, max_size=smoke_max_size))

        for prop_name in PROPERTIES:
            reason = _applies(prop_name, rule, root)
            if reason is not None:
                _emit(ObligationResult(rule.name, prop_name, "skip", {"reason": reason}))
                continue
            _emit(_run_property(root, rule, prop_name, max_examples=max_examples, max_size=max_size))

    return results


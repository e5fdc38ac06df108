"""Tests for the merge sort."""

from __future__ import annotations

from functools import cmp_to_key

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import make_student
from roster._contracts import contract_of, unwrap
from roster._ordering import BY_ID, BY_NAME_THEN_ID, MissingFieldError
from roster._sort import is_ordered, is_permutation, merge_sort, same_objects, sort_reference
from roster._strategies import ordering_rules, student_lists


def ids(xs):
    return [s.id for s in xs]


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestScenarios:
    def test_by_id(self, trio):
        assert ids(merge_sort(trio, BY_ID)) == ["1", "2", "3"]

    def test_by_name_then_id(self, trio):
        result = merge_sort(trio, BY_NAME_THEN_ID)
        assert [(s.id, s.name) for s in result] == [("1", "A"), ("2", "A"), ("3", "B")]

    @pytest.mark.parametrize("rule", [BY_ID, BY_NAME_THEN_ID])
    def test_empty(self, rule):
        assert merge_sort([], rule) == []

    @pytest.mark.parametrize("rule", [BY_ID, BY_NAME_THEN_ID])
    def test_single(self, rule):
        s = make_student()
        result = merge_sort((s,), rule)
        assert result == [s]
        assert result[0] is s

    def test_two_elements_swapped(self):
        a, b = make_student(id="2"), make_student(id="1")
        assert ids(merge_sort([a, b], BY_ID)) == ["1", "2"]

    def test_odd_length(self):
        xs = [make_student(id=str(i)) for i in (5, 3, 9, 1, 7, 2, 8)]
        assert ids(merge_sort(xs, BY_ID)) == ["1", "2", "3", "5", "7", "8", "9"]


# ---------------------------------------------------------------------------
# Ownership and identity
# ---------------------------------------------------------------------------

class TestIdentity:
    def test_input_not_mutated(self, trio):
        before = list(trio)
        merge_sort(trio, BY_ID)
        assert same_objects(trio, before)

    def test_returns_new_list(self, trio):
        result = merge_sort(trio, BY_ID)
        assert result is not trio
        assert isinstance(result, list)

    def test_same_objects_not_copies(self, trio):
        result = merge_sort(trio, BY_ID)
        assert all(any(r is t for t in trio) for r in result)

    def test_repeated_object_kept(self):
        a, b = make_student(id="2"), make_student(id="1")
        result = merge_sort([a, b, a], BY_ID)
        assert result[0] is b
        assert result[1] is a and result[2] is a

    def test_accepts_tuple(self, trio):
        assert ids(merge_sort(tuple(trio), BY_ID)) == ["1", "2", "3"]


# ---------------------------------------------------------------------------
# Ties and stability
# ---------------------------------------------------------------------------

class TestStability:
    def test_all_equal_keys_keep_order(self):
        xs = [make_student(id="1", name=n) for n in "ZYXWVUTS"]
        result = merge_sort(xs, BY_ID)
        assert same_objects(result, xs)

    def test_equal_ids_do_not_crash(self):
        a = make_student(id="1", name="first")
        b = make_student(id="0")
        c = make_student(id="1", name="second")
        result = merge_sort([a, b, c], BY_ID)
        assert [s.name for s in result] == ["Ada", "first", "second"]

    def test_full_ties_under_name_rule(self):
        xs = [make_student(id="1", name="A", country_code=c) for c in ("GB", "IE", "FR")]
        result = merge_sort(xs, BY_NAME_THEN_ID)
        assert [s.country_code for s in result] == ["GB", "IE", "FR"]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestMissingField:
    def test_null_name_fails_fast(self):
        xs = [make_student(id="1"), make_student(id="2", name=None)]
        with pytest.raises(MissingFieldError) as exc:
            merge_sort(xs, BY_NAME_THEN_ID)
        assert exc.value.field == "name"

    def test_null_id(self):
        xs = [make_student(id="3"), make_student(id="1"), make_student(id=None)]
        with pytest.raises(MissingFieldError):
            merge_sort(xs, BY_ID)

    def test_single_element_not_compared(self):
        s = make_student(id=None)
        assert merge_sort([s], BY_ID) == [s]


# ---------------------------------------------------------------------------
# Contracts attached to merge_sort
# ---------------------------------------------------------------------------

class TestContracts:
    def test_attached(self):
        contract = contract_of(merge_sort)
        assert len(contract.ensures) == 2
        assert contract.reference is sort_reference
        assert contract.eq is same_objects
        assert unwrap(merge_sort) is not merge_sort

    @pytest.mark.parametrize("flag", ["0", "1"])
    def test_runs_with_checks_on_or_off(self, monkeypatch, trio, flag):
        monkeypatch.setenv("ROSTER_CONTRACTS", flag)
        assert ids(merge_sort(trio, BY_ID)) == sorted(s.id for s in trio)

    def test_violations_reported(self, trio):
        contract = contract_of(merge_sort)
        assert contract.violations((trio, BY_ID), {}, trio[:1])
        assert not contract.violations((trio, BY_ID), {}, merge_sort(trio, BY_ID))

    def test_helpers(self, trio):
        assert is_permutation(trio, list(reversed(trio)))
        assert not is_permutation(trio, trio[:2])
        assert not is_permutation(trio, [trio[0], trio[0], trio[1]])
        assert is_ordered(merge_sort(trio, BY_ID), BY_ID)
        assert not is_ordered(trio, BY_ID)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

class TestProperties:
    @settings(max_examples=100, deadline=None)
    @given(student_lists(), ordering_rules())
    def test_permutation(self, xs, rule):
        assert is_permutation(xs, merge_sort(xs, rule))

    @settings(max_examples=100, deadline=None)
    @given(student_lists(), ordering_rules())
    def test_no_inversions(self, xs, rule):
        result = merge_sort(xs, rule)
        assert all(not rule.is_before(b, a) for a, b in zip(result, result[1:]))

    @settings(max_examples=100, deadline=None)
    @given(student_lists(), ordering_rules())
    def test_idempotent(self, xs, rule):
        once = merge_sort(xs, rule)
        assert same_objects(merge_sort(once, rule), once)

    @settings(max_examples=100, deadline=None)
    @given(student_lists(), ordering_rules())
    def test_matches_stable_builtin(self, xs, rule):
        assert same_objects(merge_sort(xs, rule), sorted(xs, key=cmp_to_key(rule.compare)))

    @settings(max_examples=100, deadline=None)
    @given(student_lists())
    def test_tie_break_by_id(self, xs):
        result = merge_sort(xs, BY_NAME_THEN_ID)
        for a, b in zip(result, result[1:]):
            if a.name == b.name:
                assert not BY_ID.is_before(b, a)

    @settings(max_examples=50, deadline=None)
    @given(st.lists(st.integers(0, 3), max_size=12))
    def test_stable_on_tied_ids(self, keys):
        xs = [make_student(id=str(k), name=f"n{i}") for i, k in enumerate(keys)]
        result = merge_sort(xs, BY_ID)
        for a, b in zip(result, result[1:]):
            if a.id == b.id:
                assert int(a.name[1:]) < int(b.name[1:])

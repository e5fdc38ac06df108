"""Postconditions and reference implementations attached to functions.

``@ensures`` records a predicate over a call's arguments and its ``result``;
``@against`` records a reference implementation that ``verify()`` compares
the function with. Postconditions are evaluated at call time only when
``ROSTER_CONTRACTS`` is set to a true value (``1``, ``true``, ``yes``,
``on``); ``verify()`` evaluates them regardless.
"""

from __future__ import annotations

import dataclasses
import functools
import os
from collections.abc import Callable
from typing import Any

_CONTRACT_ATTR = "__roster_contract__"


@dataclasses.dataclass
class Contract:
    target: Callable[..., Any]
    ensures: list[Callable[..., bool]] = dataclasses.field(default_factory=list)
    reference: Callable[..., Any] | None = None
    eq: Callable[[Any, Any], bool] | None = None

    def violations(self, args: tuple[Any, ...], kwargs: dict[str, Any], result: Any) -> list[str]:
        """Messages for every postcondition that does not hold."""
        failed: list[str] = []
        for pred in self.ensures:
            try:
                ok = bool(pred(*args, **kwargs, result=result))
            except Exception as e:
                failed.append(f"{type(e).__name__}: {e}")
                continue
            if not ok:
                failed.append(f"{getattr(pred, '__name__', 'predicate')} returned False")
        return failed


def contract_of(fn: Callable[..., Any]) -> Contract | None:
    return getattr(fn, _CONTRACT_ATTR, None)


def unwrap(fn: Callable[..., Any]) -> Callable[..., Any]:
    """The undecorated function behind *fn* (or *fn* itself)."""
    contract = contract_of(fn)
    return contract.target if contract is not None else fn


def checks_enabled() -> bool:
    return os.environ.get("ROSTER_CONTRACTS", "").strip().lower() in ("1", "true", "yes", "on")


def _attach(fn: Callable[..., Any]) -> Contract:
    contract = contract_of(fn)
    if contract is None:
        contract = Contract(target=fn)
        setattr(fn, _CONTRACT_ATTR, contract)
    return contract


def _checked(contract: Contract) -> Callable[..., Any]:
    target = contract.target

    @functools.wraps(target)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = target(*args, **kwargs)
        if checks_enabled():
            failed = contract.violations(args, kwargs, result)
            if failed:
                raise AssertionError(f"Postcondition failed for {target.__qualname__}: {'; '.join(failed)}")
        return result

    return wrapper


def ensures(pred: Callable[..., bool]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    # Stacked @ensures share one wrapper, so each predicate runs once per call.
    def deco(fn: Callable[..., Any]) -> Callable[..., Any]:
        contract = _attach(fn)
        contract.ensures.append(pred)
        return fn if fn is not contract.target else _checked(contract)

    return deco


def against(
    reference: Callable[..., Any],
    *,
    eq: Callable[[Any, Any], bool] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def deco(fn: Callable[..., Any]) -> Callable[..., Any]:
        contract = _attach(fn)
        contract.reference = reference
        contract.eq = eq
        return fn

    return deco

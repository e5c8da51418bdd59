# payoff/minimums.py
"""
Monthly minimum payment estimates.

Issuers differ, so these are heuristics; every debt type gets its own rule
and anything we don't recognise uses the generic one. A user-supplied floor
can only raise the result, never lower it.
"""
from typing import Callable, Dict, Iterable, List, Union

from .schemas import AnnotatedDebt, Debt, DebtType
from .utils import clamp_number, round2

MIN_PAYMENT_FLOOR = 25.0


def _monthly_rate(interest_rate: float) -> float:
    return max(0.0, interest_rate) / 100.0 / 12.0


def _credit_card_minimum(balance: float, interest_rate: float) -> float:
    interest_only = balance * _monthly_rate(interest_rate)
    return max(MIN_PAYMENT_FLOOR, 0.02 * balance, interest_only + 0.01 * balance)


def _line_of_credit_minimum(balance: float, interest_rate: float) -> float:
    return max(MIN_PAYMENT_FLOOR, balance * _monthly_rate(interest_rate))


def _loan_minimum(balance: float, interest_rate: float) -> float:
    # interest plus a 36-month principal tail
    interest_only = balance * _monthly_rate(interest_rate)
    return max(MIN_PAYMENT_FLOOR, interest_only + balance / 36.0)


def _default_minimum(balance: float, interest_rate: float) -> float:
    interest_only = balance * _monthly_rate(interest_rate)
    return max(MIN_PAYMENT_FLOOR, interest_only + 0.005 * balance, 0.015 * balance)


_HANDLERS: Dict[DebtType, Callable[[float, float], float]] = {
    DebtType.CREDIT_CARD: _credit_card_minimum,
    DebtType.LINE_OF_CREDIT: _line_of_credit_minimum,
    DebtType.LOAN: _loan_minimum,
    DebtType.OTHER: _default_minimum,
}


def estimate_minimum_payment(debt_type: Union[DebtType, str, None], balance, interest_rate) -> float:
    balance = max(0.0, clamp_number(balance, 0.0))
    interest_rate = max(0.0, clamp_number(interest_rate, 0.0))
    kind = DebtType(debt_type) if debt_type else DebtType.OTHER
    return _HANDLERS[kind](balance, interest_rate)


def effective_minimum(debt_type, balance, interest_rate,
                      floor_enabled: bool = False, floor_amount=0.0) -> float:
    est = estimate_minimum_payment(debt_type, balance, interest_rate)
    if floor_enabled:
        return max(est, max(0.0, clamp_number(floor_amount, 0.0)))
    return est


def annotate_debt(debt: Debt) -> AnnotatedDebt:
    est = estimate_minimum_payment(debt.type, debt.balance, debt.interest_rate)
    chosen = effective_minimum(debt.type, debt.balance, debt.interest_rate,
                               debt.min_floor_enabled, debt.min_floor_amount)
    return AnnotatedDebt(
        **debt.model_dump(exclude={"estimated_minimum_payment", "minimum_payment"}),
        estimated_minimum_payment=round2(est),
        minimum_payment=round2(chosen),
    )


def annotate_debts(debts: Iterable[Debt]) -> List[AnnotatedDebt]:
    return [annotate_debt(d) for d in debts]


def minimums_total(debts: Iterable[Debt]) -> float:
    total = 0.0
    for d in debts:
        if d.balance <= 0:
            continue
        total += effective_minimum(d.type, d.balance, d.interest_rate,
                                   d.min_floor_enabled, d.min_floor_amount)
    return round2(total)

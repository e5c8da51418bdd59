# payoff/feasibility.py
"""
Reality check run before any simulation.

If income can't carry bills plus minimums, or month 1 of the plan can't
cover what's owed, we're in survival mode and comparing strategies is
pointless.
"""
import logging
from typing import List, Optional

from .minimums import minimums_total as compute_minimums_total
from .schedule import build_payment_plan
from .schemas import Debt, FundingConfig, PaymentMode, PlanForMonth, RealityCheck, RealityState, UserProfile
from .utils import clamp_number, round2

logger = logging.getLogger(__name__)

TIGHT_BUFFER = 200.0
OPTIMIZING_BUFFER = 1500.0
OPTIMIZING_FREE_CASH = 2000.0


def assess_reality(income: float, bills: float, minimums_total: float, has_debts: bool,
                   payment_mode: PaymentMode = PaymentMode.FIXED,
                   first_month: Optional[PlanForMonth] = None) -> RealityCheck:
    income = clamp_number(income, 0.0)
    bills = clamp_number(bills, 0.0)
    minimums_total = max(0.0, clamp_number(minimums_total, 0.0))
    free_cash = income - bills

    month1_payment = max(0.0, round2(first_month.funding_amount)) if first_month else 0.0
    month1_over_budget = bool(first_month and first_month.over_budget)

    income_missing = income <= 0
    cannot_cover_bills = income < bills
    cannot_cover_minimums = has_debts and free_cash < minimums_total
    schedule_invalid = payment_mode == PaymentMode.SCHEDULE and month1_over_budget
    month1_below_mins = has_debts and month1_payment < minimums_total

    is_at_risk = (income_missing or cannot_cover_bills or cannot_cover_minimums
                  or schedule_invalid or month1_below_mins)

    state = RealityState.STABLE
    if is_at_risk:
        state = RealityState.AT_RISK
    else:
        buffer_after_mins = free_cash - minimums_total
        if buffer_after_mins < TIGHT_BUFFER:
            state = RealityState.TIGHT
        if buffer_after_mins > OPTIMIZING_BUFFER and free_cash > OPTIMIZING_FREE_CASH:
            state = RealityState.OPTIMIZING

    return RealityCheck(
        state=state,
        is_at_risk=is_at_risk,
        has_debts=has_debts,
        income_missing=income_missing,
        cannot_cover_bills=cannot_cover_bills,
        cannot_cover_minimums=cannot_cover_minimums,
        schedule_invalid=schedule_invalid,
        month1_below_mins=month1_below_mins,
        free_cash=round2(free_cash),
        minimums_total=minimums_total,
        shortfall_bills=round2(max(0.0, bills - income)),
        shortfall_minimums=round2(max(0.0, minimums_total - free_cash)) if has_debts else 0.0,
        shortfall_month1=round2(max(0.0, minimums_total - month1_payment)) if has_debts else 0.0,
        min_income_needed=round2(bills + minimums_total if has_debts else bills),
        min_debt_payment_needed=minimums_total,
    )


def check_reality(profile: UserProfile, debts: List[Debt], funding: FundingConfig) -> RealityCheck:
    active = [d for d in debts if d.balance > 0]
    first_month = build_payment_plan(funding, active)(1)
    result = assess_reality(
        income=profile.income,
        bills=profile.bills,
        minimums_total=compute_minimums_total(active),
        has_debts=bool(active),
        payment_mode=funding.mode,
        first_month=first_month,
    )
    if result.is_at_risk:
        logger.warning("survival mode: income %.2f, bills %.2f, minimums %.2f",
                       profile.income, profile.bills, result.minimums_total)
    return result

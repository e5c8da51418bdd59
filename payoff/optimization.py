# payoff/optimization.py
import logging
from typing import Dict, Iterable, List, Optional

from .minimums import effective_minimum
from .schedule import PaymentPlanFn, build_payment_plan
from .schemas import (
    Debt, DebtSummary, FundingConfig, RunResult, SimulationDebtState, Strategy, TimelineEntry,
)
from .utils import EPSILON, clamp_number, round2

logger = logging.getLogger(__name__)

MAX_MONTHS = 600


def _monthly_rate(apr: float) -> float:
    return max(0.0, apr) / 100.0 / 12.0


def _is_active(d: SimulationDebtState) -> bool:
    return d.balance > EPSILON


def _all_paid(ds: List[SimulationDebtState]) -> bool:
    return all(not _is_active(d) for d in ds)


def _initial_state(debts: Iterable[Debt]) -> List[SimulationDebtState]:
    state = []
    for d in debts:
        balance = round2(max(0.0, clamp_number(d.balance, 0.0)))
        if balance <= 0:
            continue
        apr = max(0.0, clamp_number(d.interest_rate, 0.0))
        state.append(SimulationDebtState(
            id=d.id,
            name=d.display_name,
            type=d.type,
            apr=apr,
            monthly_rate=_monthly_rate(apr),
            balance=balance,
            min_floor_enabled=d.min_floor_enabled,
            min_floor_amount=round2(d.min_floor_amount),
        ))
    return state


def pick_target(ds: List[SimulationDebtState], strategy: Strategy) -> Optional[SimulationDebtState]:
    """Snowball: smallest balance, then highest APR. Avalanche: highest APR, then smallest balance."""
    active = [d for d in ds if _is_active(d)]
    if not active:
        return None
    if strategy == Strategy.SNOWBALL:
        active.sort(key=lambda d: (d.balance, -d.apr))
    else:
        active.sort(key=lambda d: (-d.apr, d.balance))
    return active[0]


def _invalid_entry(month: int, plan, ds, total_interest: float) -> TimelineEntry:
    return TimelineEntry(
        month=month,
        funding_amount=max(0.0, round2(plan.funding_amount)),
        required_sum=round2(plan.required_sum or 0),
        unassigned=round2(plan.unassigned or 0),
        interest_this_month=0.0,
        total_interest_to_date=total_interest,
        min_paid=0.0,
        directed_paid=0.0,
        extra_paid=0.0,
        total_remaining=round2(sum(max(0.0, d.balance) for d in ds)),
        invalid=True,
    )


def simulate_strategy(strategy: Strategy, debts: Iterable[Debt], plan_fn: PaymentPlanFn,
                      max_months: int = MAX_MONTHS) -> RunResult:
    """
    Month loop for one strategy.

    Each month: accrue interest, recompute minimums from the new balances,
    pay what is required (minimums, or max(allocation, minimum) in schedule
    mode), then hand whatever is left to the strategy's target until it runs
    out. Debts that start at zero are left out. Stops when everything is
    paid, when a month is over budget (last entry flagged `invalid`), or
    after `max_months`.
    """
    strategy = Strategy(strategy)
    ds = _initial_state(debts)
    by_id = {d.id: d for d in ds}
    total_interest = 0.0
    timeline: List[TimelineEntry] = []
    logger.debug("simulating %s over %d debts", strategy.value, len(ds))

    for month in range(1, max_months + 1):
        if _all_paid(ds):
            break

        plan = plan_fn(month)
        payment = max(0.0, round2(plan.funding_amount))

        if plan.over_budget:
            logger.warning("%s: month %d is over budget, stopping", strategy.value, month)
            timeline.append(_invalid_entry(month, plan, ds, total_interest))
            break

        # 1) interest
        interest_month = 0.0
        for d in ds:
            if not _is_active(d):
                continue
            interest = round2(d.balance * d.monthly_rate)
            d.balance = round2(d.balance + interest)
            d.interest_paid = round2(d.interest_paid + interest)
            interest_month = round2(interest_month + interest)
        total_interest = round2(total_interest + interest_month)

        # 2) minimums follow the post-interest balance
        dynamic_min: Dict[str, float] = {}
        for d in ds:
            if _is_active(d):
                dynamic_min[d.id] = round2(effective_minimum(
                    d.type, d.balance, d.apr, d.min_floor_enabled, d.min_floor_amount))

        # 3) required payments
        remaining = payment
        min_paid = 0.0
        directed_paid = 0.0
        required_sum = 0.0
        required = plan.required_by_debt_id
        paid_by_debt: Dict[str, float] = {}

        for d in ds:
            if not _is_active(d):
                continue
            minimum = dynamic_min.get(d.id, 0.0)
            if required is not None:
                intended = max(max(0.0, clamp_number(required.get(d.id), 0.0)), minimum)
            else:
                intended = minimum
            required_sum = round2(required_sum + intended)

            pay = round2(min(intended, d.balance, remaining))
            if pay <= 0:
                continue
            paid_by_debt[d.id] = round2(paid_by_debt.get(d.id, 0.0) + pay)
            min_paid = round2(min_paid + min(minimum, pay))
            if required is not None:
                directed_paid = round2(directed_paid + pay)
            d.balance = round2(d.balance - pay)
            remaining = round2(remaining - pay)
            if not _is_active(d) and d.payoff_month is None:
                d.payoff_month = month

        unassigned = round2(max(0.0, payment - required_sum))

        # 4) strategy gets the rest; each pass retires a debt or empties `remaining`
        extra_by_debt: Dict[str, float] = {}
        extra_paid = 0.0
        for _ in range(sum(1 for d in ds if _is_active(d))):
            if remaining <= EPSILON:
                break
            target = pick_target(ds, strategy)
            if target is None:
                break
            pay = round2(min(target.balance, remaining))
            if pay <= 0:
                break
            target.balance = round2(target.balance - pay)
            remaining = round2(remaining - pay)
            extra_paid = round2(extra_paid + pay)
            extra_by_debt[target.id] = round2(extra_by_debt.get(target.id, 0.0) + pay)
            paid_by_debt[target.id] = round2(paid_by_debt.get(target.id, 0.0) + pay)
            if not _is_active(target) and target.payoff_month is None:
                target.payoff_month = month

        # whoever received the most this month; first one wins a tie
        target_id, target_paid = None, 0.0
        for debt_id, amount in paid_by_debt.items():
            if amount > target_paid:
                target_id, target_paid = debt_id, amount

        timeline.append(TimelineEntry(
            month=month,
            funding_amount=payment,
            required_sum=required_sum,
            unassigned=unassigned,
            interest_this_month=interest_month,
            total_interest_to_date=total_interest,
            min_paid=min_paid,
            directed_paid=directed_paid,
            extra_paid=extra_paid,
            total_remaining=round2(sum(max(0.0, d.balance) for d in ds)),
            target_debt_id=target_id,
            target_debt_name=by_id[target_id].name if target_id is not None else None,
            applied_to_target=round2(target_paid),
            extra_applied_to_target=round2(extra_by_debt.get(target_id, 0.0)) if target_id is not None else 0.0,
            extra_by_debt_id=extra_by_debt,
        ))

    paid_off = _all_paid(ds)
    halted = bool(timeline) and timeline[-1].invalid
    months_to_debt_free = len(timeline) if paid_off else max_months
    if not paid_off and not halted:
        logger.debug("%s: not paid off within %d months", strategy.value, max_months)

    return RunResult(
        strategy=strategy,
        months_to_debt_free=months_to_debt_free,
        total_interest=total_interest,
        timeline=timeline,
        per_debt=[
            DebtSummary(
                id=d.id,
                name=d.name,
                apr=d.apr,
                payoff_month=d.payoff_month if d.payoff_month is not None else months_to_debt_free,
                interest_paid=d.interest_paid,
                paid_off=d.payoff_month is not None,
            )
            for d in ds
        ],
        reached_horizon=not paid_off and not halted,
    )


def compute_snowball_plan(debts: List[Debt], funding: FundingConfig,
                          max_months: int = MAX_MONTHS) -> RunResult:
    return simulate_strategy(Strategy.SNOWBALL, debts, build_payment_plan(funding, debts), max_months)


def compute_avalanche_plan(debts: List[Debt], funding: FundingConfig,
                           max_months: int = MAX_MONTHS) -> RunResult:
    return simulate_strategy(Strategy.AVALANCHE, debts, build_payment_plan(funding, debts), max_months)

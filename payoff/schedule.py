# payoff/schedule.py
"""
Month-by-month funding.

In schedule mode each row gives the total available for one month plus
optional per-debt allocations. An allocation is the TOTAL to send to that
debt (its minimum included), so the required payment for a debt is
max(minimum, allocation). Missing or zero allocations mean "just the
minimum". Rows are sparse and the last row repeats forever.
"""
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .minimums import annotate_debts
from .schemas import AnnotatedDebt, Debt, FundingConfig, PaymentMode, PlanForMonth, ScheduleRequirement, ScheduleRow
from .utils import EPSILON, clamp_number, round2

EXPORT_AVERAGE_MONTHS = 6

PaymentPlanFn = Callable[[int], PlanForMonth]


def resolve_schedule_month(debts: Iterable[AnnotatedDebt], funding_amount: float,
                           allocations: Optional[Mapping[str, float]] = None) -> ScheduleRequirement:
    pay = max(0.0, round2(clamp_number(funding_amount, 0.0)))
    alloc = allocations or {}

    required_by_debt_id: Dict[str, float] = {}
    required_sum = 0.0
    for d in debts:
        if max(0.0, clamp_number(d.balance, 0.0)) <= 0:
            continue
        minimum = max(0.0, clamp_number(d.minimum_payment, 0.0))
        user = max(0.0, clamp_number(alloc.get(d.id), 0.0))
        required = round2(max(minimum, user))
        required_by_debt_id[d.id] = required
        required_sum = round2(required_sum + required)

    return ScheduleRequirement(
        required_by_debt_id=required_by_debt_id,
        required_sum=required_sum,
        over_budget=required_sum - pay > EPSILON,
        unassigned=round2(max(0.0, pay - required_sum)),
    )


def build_payment_plan(funding: FundingConfig, debts: Iterable[Debt]) -> PaymentPlanFn:
    """
    Turn a funding configuration into `month (1-based) -> PlanForMonth`.

    Schedule months are resolved against the debts as configured now, not
    against mid-simulation balances; the simulator re-derives minimums from
    its own balances every month.
    """
    fixed = max(0.0, round2(funding.monthly_payment))

    if funding.mode != PaymentMode.SCHEDULE:
        def fixed_plan(month: int) -> PlanForMonth:
            return PlanForMonth(funding_amount=fixed)
        return fixed_plan

    annotated = annotate_debts(debts)

    rows: Dict[int, ScheduleRow] = {}
    for row in funding.schedule:
        rows[row.month] = ScheduleRow(month=row.month, amount=round2(row.amount), allocations=row.allocations)

    if rows:
        last_row = rows[max(rows)]
    else:
        last_row = ScheduleRow(month=1, amount=fixed)

    def schedule_plan(month: int) -> PlanForMonth:
        row = rows.get(month, last_row)
        info = resolve_schedule_month(annotated, row.amount, row.allocations)
        return PlanForMonth(
            funding_amount=row.amount,
            required_by_debt_id=info.required_by_debt_id,
            required_sum=info.required_sum,
            over_budget=info.over_budget,
            unassigned=info.unassigned,
        )

    return schedule_plan


def average_payment(funding: FundingConfig, plan_fn: PaymentPlanFn,
                    months: int = EXPORT_AVERAGE_MONTHS) -> float:
    """Single monthly figure for consumers that only understand one payment."""
    if funding.mode != PaymentMode.SCHEDULE:
        return round2(funding.monthly_payment)
    total = sum(max(0.0, round2(plan_fn(m).funding_amount)) for m in range(1, months + 1))
    return round2(total / months)


# ---------- schedule editing ----------

def set_allocation(rows: List[ScheduleRow], index: int, debt_id: str, value) -> List[ScheduleRow]:
    out = []
    for i, row in enumerate(rows):
        if i != index:
            out.append(row)
            continue
        alloc = dict(row.allocations)
        v = max(0.0, clamp_number(value, 0.0))
        if v <= 0:
            alloc.pop(debt_id, None)
        else:
            alloc[debt_id] = v
        out.append(row.model_copy(update={"allocations": alloc}))
    return out


def fill_minimums_for_month(rows: List[ScheduleRow], index: int,
                            debts: Iterable[AnnotatedDebt]) -> List[ScheduleRow]:
    alloc = {d.id: round2(d.minimum_payment) for d in debts if d.balance > 0}
    return [row.model_copy(update={"allocations": dict(alloc)}) if i == index else row
            for i, row in enumerate(rows)]


def clear_allocations_for_month(rows: List[ScheduleRow], index: int) -> List[ScheduleRow]:
    return [row.model_copy(update={"allocations": {}}) if i == index else row
            for i, row in enumerate(rows)]


def add_schedule_month(rows: List[ScheduleRow], fallback_amount: float) -> List[ScheduleRow]:
    if rows:
        last = rows[-1]
        next_month, amount = last.month + 1, last.amount
    else:
        next_month, amount = 1, max(0.0, clamp_number(fallback_amount, 0.0))
    return list(rows) + [ScheduleRow(month=next_month, amount=round2(amount))]


def remove_schedule_month(rows: List[ScheduleRow], index: int) -> List[ScheduleRow]:
    return [row for i, row in enumerate(rows) if i != index]


def quick_fill_schedule(amount: float, months=EXPORT_AVERAGE_MONTHS) -> List[ScheduleRow]:
    count = max(1, int(clamp_number(months, EXPORT_AVERAGE_MONTHS) // 1))
    amt = round2(max(0.0, clamp_number(amount, 0.0)))
    return [ScheduleRow(month=m, amount=amt) for m in range(1, count + 1)]


def allocations_for_month(funding: FundingConfig, month: int) -> Dict[str, float]:
    rows = {r.month: r for r in funding.schedule}
    if funding.mode != PaymentMode.SCHEDULE or not rows:
        return {}
    return dict(rows.get(month, rows[max(rows)]).allocations)

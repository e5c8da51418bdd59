# payoff/export.py
from typing import List, Optional, Tuple

from .feasibility import check_reality
from .minimums import annotate_debts
from .schedule import average_payment, build_payment_plan
from .schemas import Debt, ExportDebt, ExportPayload, FundingConfig, UserProfile


def build_export_payload(debts: List[Debt], profile: UserProfile,
                         funding: FundingConfig) -> Tuple[Optional[ExportPayload], Optional[str]]:
    """
    Inputs for the report service, which only takes one monthly payment:
    the fixed amount, or the average of the first six scheduled months.
    Returns (payload, None) or (None, reason).
    """
    active = [d for d in debts if d.balance > 0]
    if check_reality(profile, active, funding).is_at_risk:
        return None, "Survival Mode: export is locked until bills and minimums are covered."
    if len(active) < 2:
        return None, "Please add at least two active debts to compare strategies."

    plan_fn = build_payment_plan(funding, active)
    return ExportPayload(
        debts=[
            ExportDebt(
                name=d.display_name,
                type=d.type,
                balance=d.balance,
                interest_rate=d.interest_rate,
                minimum_payment=d.minimum_payment,
            )
            for d in annotate_debts(active)
        ],
        income=profile.income,
        bills=profile.bills,
        monthly_payment=average_payment(funding, plan_fn),
    ), None

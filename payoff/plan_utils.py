# payoff/plan_utils.py
from typing import Any, Dict, List, Optional
import pandas as pd
from .schemas import Comparison, RunResult, TimelineEntry
from .utils import money

TIMELINE_COLUMNS = [
    "month", "funding_amount", "required_sum", "unassigned", "interest_this_month",
    "total_interest_to_date", "min_paid", "directed_paid", "extra_paid", "total_remaining",
    "target_debt_name", "applied_to_target", "extra_applied_to_target", "invalid",
]

def timeline_to_dataframe(run: RunResult) -> pd.DataFrame:
    rows = [e.model_dump(include=set(TIMELINE_COLUMNS)) for e in run.timeline]
    if not rows:
        return pd.DataFrame(columns=TIMELINE_COLUMNS)
    return pd.DataFrame(rows, columns=TIMELINE_COLUMNS)

def simulate_total_balance_series(run: RunResult) -> List[float]:
    return [e.total_remaining for e in run.timeline]

def payoff_table(comparison: Comparison) -> pd.DataFrame:
    """Per-debt payoff month and interest, snowball next to avalanche."""
    cols = ["debt", "apr", "snowball_payoff_month", "snowball_interest",
            "avalanche_payoff_month", "avalanche_interest"]
    if not comparison.snowball or not comparison.avalanche:
        return pd.DataFrame(columns=cols)
    aval = {d.id: d for d in comparison.avalanche.per_debt}
    rows = []
    for sd in comparison.snowball.per_debt:
        ad = aval.get(sd.id)
        rows.append({
            "debt": sd.name,
            "apr": sd.apr,
            "snowball_payoff_month": sd.payoff_month,
            "snowball_interest": sd.interest_paid,
            "avalanche_payoff_month": ad.payoff_month if ad else None,
            "avalanche_interest": ad.interest_paid if ad else None,
        })
    return pd.DataFrame(rows, columns=cols)

def month_details(comparison: Comparison, selected_month: int) -> Optional[Dict[str, Any]]:
    if not comparison.available or not comparison.snowball or not comparison.avalanche:
        return None
    last = min(len(comparison.snowball.timeline), len(comparison.avalanche.timeline))
    if last <= 0:
        return None
    m = min(max(1, int(selected_month)), last)
    return {
        "max": last,
        "month": m,
        "snowball": comparison.snowball.timeline[m - 1],
        "avalanche": comparison.avalanche.timeline[m - 1],
    }

def month_explanation(entry: TimelineEntry) -> str:
    extra = entry.unassigned
    target = entry.target_debt_name
    if not target or extra <= 0:
        return "This month, all of your payment goes toward required minimums."
    return (f"This month, after covering minimums, you have {money(extra)} "
            f"that the strategy applies to your {target}.")

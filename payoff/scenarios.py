# payoff/scenarios.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from .feasibility import check_reality
from .optimization import MAX_MONTHS, simulate_strategy
from .schedule import build_payment_plan
from .schemas import Comparison, Debt, FundingConfig, Goal, RunResult, Strategy, UserProfile
from .utils import round2

logger = logging.getLogger(__name__)


def pick_winner(goal: Goal, snow: RunResult, aval: RunResult) -> Strategy:
    # ties go to snowball
    if goal == Goal.SPEED:
        return Strategy.SNOWBALL if snow.months_to_debt_free <= aval.months_to_debt_free else Strategy.AVALANCHE
    if goal == Goal.INTEREST:
        return Strategy.SNOWBALL if snow.total_interest <= aval.total_interest else Strategy.AVALANCHE
    return Strategy.SNOWBALL


def compare_strategies(debts: List[Debt], funding: FundingConfig, profile: UserProfile,
                       goal: Goal = Goal.SPEED, max_months: int = MAX_MONTHS,
                       parallel: bool = True) -> Comparison:
    """
    Run snowball and avalanche on the same inputs and pick a winner for `goal`.

    Nothing is simulated when the reality check fails or fewer than two
    debts carry a balance; the result then has `available=False` and a
    `reason`. A run whose first month is over budget also makes the
    comparison unavailable.
    """
    goal = Goal(goal)
    active = [d for d in debts if d.balance > 0]
    reality = check_reality(profile, active, funding)

    if reality.is_at_risk:
        return Comparison(available=False, reason="Survival Mode: cover bills and minimums first.",
                          goal=goal, reality=reality)
    if len(active) < 2:
        return Comparison(available=False, reason="Add at least two debts with a balance to compare strategies.",
                          goal=goal, reality=reality)

    plan_fn = build_payment_plan(funding, active)
    if parallel:
        with ThreadPoolExecutor(max_workers=2) as pool:
            snow_future = pool.submit(simulate_strategy, Strategy.SNOWBALL, active, plan_fn, max_months)
            aval_future = pool.submit(simulate_strategy, Strategy.AVALANCHE, active, plan_fn, max_months)
            snow, aval = snow_future.result(), aval_future.result()
    else:
        snow = simulate_strategy(Strategy.SNOWBALL, active, plan_fn, max_months)
        aval = simulate_strategy(Strategy.AVALANCHE, active, plan_fn, max_months)

    if snow.invalid or aval.invalid:
        logger.warning("month 1 over budget, comparison unavailable")
        return Comparison(available=False, reason="Month 1 is over budget.",
                          goal=goal, reality=reality, snowball=snow, avalanche=aval)

    return Comparison(
        available=True,
        goal=goal,
        reality=reality,
        snowball=snow,
        avalanche=aval,
        winner=pick_winner(goal, snow, aval),
        months_diff=abs(snow.months_to_debt_free - aval.months_to_debt_free),
        interest_diff=round2(abs(snow.total_interest - aval.total_interest)),
    )

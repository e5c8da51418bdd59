from payoff.plan_utils import (
    TIMELINE_COLUMNS, month_details, month_explanation, payoff_table, simulate_total_balance_series,
    timeline_to_dataframe,
)
from payoff.scenarios import compare_strategies
from payoff.schemas import Debt, FundingConfig, Goal, RunResult, TimelineEntry, UserProfile


def comparison():
    debts = [
        Debt(id="cc", name="Credit Card", type="credit_card", balance=4000, interest_rate=29.99),
        Debt(id="loan", name="Personal Loan", type="loan", balance=6000, interest_rate=7.99),
    ]
    return compare_strategies(debts, FundingConfig(monthly_payment=1500),
                              UserProfile(income=5300, bills=2700), Goal.SPEED)

def _entry(unassigned, target):
    return TimelineEntry(month=1, funding_amount=1000, required_sum=400, unassigned=unassigned,
                         interest_this_month=10, total_interest_to_date=10, min_paid=400,
                         directed_paid=0, extra_paid=unassigned, total_remaining=5000,
                         target_debt_name=target)

def test_timeline_dataframe_has_one_row_per_month():
    c = comparison()
    df = timeline_to_dataframe(c.snowball)
    assert list(df.columns) == TIMELINE_COLUMNS
    assert len(df) == c.snowball.months_to_debt_free
    assert df["total_remaining"].iloc[-1] == 0

def test_empty_timeline_dataframe():
    run = RunResult(strategy="snowball", months_to_debt_free=0, total_interest=0, timeline=[], per_debt=[])
    assert timeline_to_dataframe(run).empty
    assert simulate_total_balance_series(run) == []

def test_balance_series_declines():
    series = simulate_total_balance_series(comparison().avalanche)
    assert series == sorted(series, reverse=True)

def test_payoff_table_lines_up_both_strategies():
    df = payoff_table(comparison())
    assert list(df["debt"]) == ["Credit Card", "Personal Loan"]
    assert (df["snowball_payoff_month"] == df["avalanche_payoff_month"]).all()

def test_month_details_clamps_selection():
    c = comparison()
    details = month_details(c, 999)
    assert details["month"] == details["max"] == c.snowball.months_to_debt_free
    assert month_details(c, -3)["month"] == 1

def test_month_explanation():
    assert month_explanation(_entry(0, "Visa")) == "This month, all of your payment goes toward required minimums."
    text = month_explanation(_entry(600, "Visa"))
    assert "$600.00" in text and text.endswith("your Visa.")

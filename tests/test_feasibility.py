from payoff.feasibility import assess_reality, check_reality
from payoff.scenarios import compare_strategies
from payoff.schemas import Debt, FundingConfig, PlanForMonth, RealityState, ScheduleRow, UserProfile


def sample_debts():
    return [
        Debt(id="cc", name="Credit Card", type="credit_card", balance=4000, interest_rate=29.99),
        Debt(id="loan", name="Personal Loan", type="loan", balance=6000, interest_rate=7.99),
    ]

def test_healthy_budget_is_optimizing():
    r = check_reality(UserProfile(income=5300, bills=2700), sample_debts(),
                      FundingConfig(monthly_payment=1500))
    assert not r.is_at_risk
    assert r.state == RealityState.OPTIMIZING
    assert r.free_cash == 2600
    assert r.minimums_total == 346.58
    assert r.min_income_needed == 3046.58

def test_bills_shortfall_is_at_risk():
    for debts in ([], sample_debts()):
        r = check_reality(UserProfile(income=2000, bills=2700), debts, FundingConfig(monthly_payment=1500))
        assert r.is_at_risk
        assert r.state == RealityState.AT_RISK
        assert r.cannot_cover_bills
        assert r.shortfall_bills == 700

def test_tight_and_stable_buffers():
    tight = check_reality(UserProfile(income=3000, bills=2500), sample_debts(), FundingConfig(monthly_payment=400))
    assert tight.state == RealityState.TIGHT
    stable = check_reality(UserProfile(income=4000, bills=2500), sample_debts(), FundingConfig(monthly_payment=400))
    assert stable.state == RealityState.STABLE

def test_month1_funding_below_minimums():
    r = check_reality(UserProfile(income=5300, bills=2700), sample_debts(), FundingConfig(monthly_payment=300))
    assert r.is_at_risk
    assert r.month1_below_mins
    assert r.shortfall_month1 == 46.58

def test_free_cash_below_minimums():
    r = check_reality(UserProfile(income=3000, bills=2800), sample_debts(), FundingConfig(monthly_payment=400))
    assert r.cannot_cover_minimums
    assert r.shortfall_minimums == 146.58

def test_missing_income():
    r = check_reality(UserProfile(income=0, bills=0), [], FundingConfig())
    assert r.income_missing and r.is_at_risk
    assert not r.has_debts
    assert r.min_income_needed == 0

def test_over_budget_schedule_blocks_simulation():
    funding = FundingConfig(mode="schedule", schedule=[
        ScheduleRow(month=1, amount=1500, allocations={"cc": 1000, "loan": 1000}),
    ])
    profile = UserProfile(income=5300, bills=2700)
    r = check_reality(profile, sample_debts(), funding)
    assert r.schedule_invalid and r.is_at_risk

    comparison = compare_strategies(sample_debts(), funding, profile)
    assert not comparison.available
    assert comparison.snowball is None and comparison.avalanche is None

def test_assess_reality_is_pure():
    first = PlanForMonth(funding_amount=1000, over_budget=True)
    fixed = assess_reality(5000, 2000, 300, True, "fixed", first)
    assert not fixed.schedule_invalid
    scheduled = assess_reality(5000, 2000, 300, True, "schedule", first)
    assert scheduled.schedule_invalid
    assert assess_reality(5000, 2000, 300, True, "fixed", first) == fixed

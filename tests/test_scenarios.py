from payoff.scenarios import compare_strategies, pick_winner
from payoff.schemas import Debt, FundingConfig, Goal, RunResult, Strategy, UserProfile


def sample_debts():
    return [
        Debt(id="cc", name="Credit Card", type="credit_card", balance=4000, interest_rate=29.99),
        Debt(id="loan", name="Personal Loan", type="loan", balance=6000, interest_rate=7.99),
    ]

def split_debts():
    return [
        Debt(id="small", name="Store Card", type="credit_card", balance=1500, interest_rate=9.99),
        Debt(id="big", name="Visa", type="credit_card", balance=7000, interest_rate=26.99),
    ]

def _run(strategy, months, interest):
    return RunResult(strategy=strategy, months_to_debt_free=months, total_interest=interest,
                     timeline=[], per_debt=[])

def test_pick_winner_ties_go_to_snowball():
    snow = _run("snowball", 20, 900.0)
    aval = _run("avalanche", 20, 900.0)
    assert pick_winner(Goal.SPEED, snow, aval) == Strategy.SNOWBALL
    assert pick_winner(Goal.INTEREST, snow, aval) == Strategy.SNOWBALL

def test_pick_winner_by_goal():
    snow = _run("snowball", 22, 1200.0)
    aval = _run("avalanche", 21, 1000.0)
    assert pick_winner(Goal.SPEED, snow, aval) == Strategy.AVALANCHE
    assert pick_winner(Goal.INTEREST, snow, aval) == Strategy.AVALANCHE
    assert pick_winner(Goal.STICK, snow, aval) == Strategy.SNOWBALL

def test_identical_picks_give_zero_deltas():
    c = compare_strategies(sample_debts(), FundingConfig(monthly_payment=1500),
                           UserProfile(income=5300, bills=2700), Goal.SPEED)
    assert c.available
    assert c.months_diff == 0
    assert c.interest_diff == 0
    assert c.winner == Strategy.SNOWBALL

def test_interest_goal_prefers_avalanche_when_it_saves():
    c = compare_strategies(split_debts(), FundingConfig(monthly_payment=800),
                           UserProfile(income=6000, bills=2000), Goal.INTEREST)
    assert c.available
    assert c.winner == Strategy.AVALANCHE
    assert c.interest_diff > 0
    assert c.interest_diff == round(abs(c.snowball.total_interest - c.avalanche.total_interest), 2)

def test_parallel_and_sequential_runs_match():
    args = (split_debts(), FundingConfig(monthly_payment=800), UserProfile(income=6000, bills=2000))
    assert compare_strategies(*args, parallel=True) == compare_strategies(*args, parallel=False)

def test_needs_two_active_debts():
    debts = sample_debts()[:1] + [Debt(id="zero", balance=0)]
    c = compare_strategies(debts, FundingConfig(monthly_payment=1500), UserProfile(income=5300, bills=2700))
    assert not c.available
    assert "two" in c.reason

def test_blocked_in_survival_mode():
    c = compare_strategies(sample_debts(), FundingConfig(monthly_payment=1500),
                           UserProfile(income=2000, bills=2700))
    assert not c.available
    assert c.reality.is_at_risk
    assert c.winner is None

# payoff/schemas.py
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .utils import clamp_number, make_id


class DebtType(str, Enum):
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    LINE_OF_CREDIT = "line_of_credit"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value):
        # older snapshots stored lines of credit as "loc"; anything unknown is "other"
        if isinstance(value, str) and value.strip().lower() == "loc":
            return cls.LINE_OF_CREDIT
        return cls.OTHER


class Strategy(str, Enum):
    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"


class Goal(str, Enum):
    SPEED = "speed"
    INTEREST = "interest"
    STICK = "stick"


class PaymentMode(str, Enum):
    FIXED = "fixed"
    SCHEDULE = "schedule"


class RealityState(str, Enum):
    AT_RISK = "at_risk"
    TIGHT = "tight"
    STABLE = "stable"
    OPTIMIZING = "optimizing"


def _non_negative(v: Any) -> float:
    return max(0.0, clamp_number(v, 0.0))


class Debt(BaseModel):
    """
    A single debt as entered by the user.

    `interest_rate` is the annual rate in percent (29.99 means 29.99%).
    Numeric fields never fail validation: blanks, NaN and junk become 0 and
    negatives are clamped to 0. The minimum floor accepts the older
    `min_override_*` field names so stored inputs keep loading.
    """
    id: str = Field(default_factory=make_id)
    name: str = ""
    type: DebtType = DebtType.CREDIT_CARD
    balance: float = 0.0
    interest_rate: float = 0.0
    min_floor_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("min_floor_enabled", "min_override_enabled"),
    )
    min_floor_amount: float = Field(
        default=0.0,
        validation_alias=AliasChoices("min_floor_amount", "min_override_amount", "min_floor"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        if v is None or v == "":
            return make_id()
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> DebtType:
        if v is None or v == "":
            return DebtType.OTHER
        return DebtType(v)

    @field_validator("balance", "interest_rate", "min_floor_amount", mode="before")
    @classmethod
    def coerce_amounts(cls, v: Any) -> float:
        return _non_negative(v)

    @field_validator("min_floor_enabled", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return bool(v)

    @property
    def display_name(self) -> str:
        return self.name.strip() or "Debt"


class AnnotatedDebt(Debt):
    estimated_minimum_payment: float = 0.0
    minimum_payment: float = 0.0


class ScheduleRow(BaseModel):
    month: int = 1
    amount: float = 0.0
    # debt id -> total payment to that debt this month (minimum included)
    allocations: Dict[str, float] = Field(default_factory=dict)

    @field_validator("month", mode="before")
    @classmethod
    def coerce_month(cls, v: Any) -> int:
        return max(1, int(clamp_number(v, 0.0) // 1))

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return _non_negative(v)

    @field_validator("allocations", mode="before")
    @classmethod
    def coerce_allocations(cls, v: Any) -> Dict[str, float]:
        if not isinstance(v, dict):
            return {}
        return {str(k): _non_negative(amt) for k, amt in v.items()}


def _schedule_rows(v: Any) -> List[Any]:
    # rows that are not objects are dropped, the rest are coerced by ScheduleRow
    if not isinstance(v, (list, tuple)):
        return []
    return [row for row in v if isinstance(row, (dict, ScheduleRow))]


class FundingConfig(BaseModel):
    mode: PaymentMode = PaymentMode.FIXED
    monthly_payment: float = 0.0
    schedule: List[ScheduleRow] = Field(default_factory=list)

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, v: Any) -> PaymentMode:
        return PaymentMode.SCHEDULE if v == PaymentMode.SCHEDULE.value else PaymentMode.FIXED

    @field_validator("monthly_payment", mode="before")
    @classmethod
    def coerce_payment(cls, v: Any) -> float:
        return _non_negative(v)

    @field_validator("schedule", mode="before")
    @classmethod
    def coerce_schedule(cls, v: Any) -> List[Any]:
        return _schedule_rows(v)


class UserProfile(BaseModel):
    income: float = 0.0
    bills: float = 0.0

    @field_validator("income", "bills", mode="before")
    @classmethod
    def coerce_figures(cls, v: Any) -> float:
        return clamp_number(v, 0.0)


# ---------- engine outputs ----------

class ScheduleRequirement(BaseModel):
    required_by_debt_id: Dict[str, float]
    required_sum: float
    over_budget: bool
    unassigned: float


class PlanForMonth(BaseModel):
    funding_amount: float
    required_by_debt_id: Optional[Dict[str, float]] = None
    required_sum: Optional[float] = None
    over_budget: bool = False
    unassigned: Optional[float] = None


class SimulationDebtState(BaseModel):
    """Mutable per-run ledger row. Never shared between strategy runs."""
    id: str
    name: str
    type: DebtType
    apr: float
    monthly_rate: float
    balance: float
    interest_paid: float = 0.0
    payoff_month: Optional[int] = None
    min_floor_enabled: bool = False
    min_floor_amount: float = 0.0


class TimelineEntry(BaseModel):
    month: int
    funding_amount: float
    required_sum: float
    unassigned: float
    interest_this_month: float
    total_interest_to_date: float
    min_paid: float
    directed_paid: float
    extra_paid: float
    total_remaining: float
    target_debt_id: Optional[str] = None
    target_debt_name: Optional[str] = None
    applied_to_target: float = 0.0
    extra_applied_to_target: float = 0.0
    extra_by_debt_id: Dict[str, float] = Field(default_factory=dict)
    invalid: bool = False


class DebtSummary(BaseModel):
    id: str
    name: str
    apr: float
    payoff_month: int
    interest_paid: float
    paid_off: bool


class RunResult(BaseModel):
    strategy: Strategy
    months_to_debt_free: int
    total_interest: float
    timeline: List[TimelineEntry]
    per_debt: List[DebtSummary]
    reached_horizon: bool = False

    @property
    def invalid(self) -> bool:
        return bool(self.timeline) and self.timeline[0].invalid


class RealityCheck(BaseModel):
    state: RealityState
    is_at_risk: bool
    has_debts: bool
    income_missing: bool
    cannot_cover_bills: bool
    cannot_cover_minimums: bool
    schedule_invalid: bool
    month1_below_mins: bool
    free_cash: float
    minimums_total: float
    shortfall_bills: float
    shortfall_minimums: float
    shortfall_month1: float
    min_income_needed: float
    min_debt_payment_needed: float


class Comparison(BaseModel):
    available: bool
    reason: Optional[str] = None
    goal: Goal
    reality: RealityCheck
    snowball: Optional[RunResult] = None
    avalanche: Optional[RunResult] = None
    winner: Optional[Strategy] = None
    months_diff: int = 0
    interest_diff: float = 0.0


# ---------- persisted inputs / export ----------

_LEGACY_SNAPSHOT_KEYS = {
    "monthlyPayment": "monthly_payment",
    "paymentMode": "payment_mode",
    "paymentSchedule": "payment_schedule",
    "lastUpdated": "last_updated",
    "statusMessage": "status_message",
}

class InputSnapshot(BaseModel):
    debts: List[Debt] = Field(default_factory=list)
    income: float = 0.0
    bills: float = 0.0
    monthly_payment: float = 0.0
    goal: Goal = Goal.SPEED
    payment_mode: PaymentMode = PaymentMode.FIXED
    payment_schedule: List[ScheduleRow] = Field(default_factory=list)
    last_updated: Optional[str] = None
    status: str = "idle"
    status_message: str = ""

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_lists(cls, data: Any) -> Any:
        # early snapshots kept income and bills as one-element lists of {"amount": ...}
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for new_key, old_key in (("income", "paycheques"), ("bills", "bills")):
            value = data.get(old_key)
            if isinstance(value, list):
                first = value[0] if value else {}
                data[new_key] = first.get("amount", 0) if isinstance(first, dict) else 0
        # camelCase keys from the same era win over anything merged in beside them
        for old_key, new_key in _LEGACY_SNAPSHOT_KEYS.items():
            if old_key in data:
                data[new_key] = data.pop(old_key)
        return data

    @field_validator("payment_schedule", mode="before")
    @classmethod
    def coerce_schedule(cls, v: Any) -> List[Any]:
        return _schedule_rows(v)

    @field_validator("income", "bills", mode="before")
    @classmethod
    def coerce_figures(cls, v: Any) -> float:
        return clamp_number(v, 0.0)

    @field_validator("monthly_payment", mode="before")
    @classmethod
    def coerce_payment(cls, v: Any) -> float:
        return _non_negative(v)

    @field_validator("goal", mode="before")
    @classmethod
    def coerce_goal(cls, v: Any) -> Goal:
        try:
            return Goal(v)
        except ValueError:
            return Goal.SPEED

    @field_validator("payment_mode", mode="before")
    @classmethod
    def coerce_mode(cls, v: Any) -> PaymentMode:
        return PaymentMode.SCHEDULE if v == PaymentMode.SCHEDULE.value else PaymentMode.FIXED

    def profile(self) -> UserProfile:
        return UserProfile(income=self.income, bills=self.bills)

    def funding(self) -> FundingConfig:
        return FundingConfig(
            mode=self.payment_mode,
            monthly_payment=self.monthly_payment,
            schedule=self.payment_schedule,
        )


class ExportDebt(BaseModel):
    name: str
    type: DebtType
    balance: float
    interest_rate: float
    minimum_payment: float


class ExportPayload(BaseModel):
    debts: List[ExportDebt]
    income: float
    bills: float
    monthly_payment: float

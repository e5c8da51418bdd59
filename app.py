import time
import logging
from typing import List, Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from payoff.config import get_settings
from payoff.export import build_export_payload
from payoff.feasibility import check_reality
from payoff.minimums import annotate_debts, minimums_total
from payoff.optimization import simulate_strategy
from payoff.plan_utils import month_details, month_explanation, payoff_table, simulate_total_balance_series
from payoff.scenarios import compare_strategies
from payoff.schedule import allocations_for_month, build_payment_plan, resolve_schedule_month
from payoff.schemas import Debt, FundingConfig, Goal, InputSnapshot, Strategy, UserProfile
from payoff.storage import default_snapshot, load_snapshot, now_iso, reset_snapshot, save_snapshot
from payoff.utils import money

settings = get_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("payoff.api")

# ======================================
# App + CORS
# ======================================
app = FastAPI(
    title="Debt Payoff Planner",
    description="Snowball vs. avalanche payoff simulation",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ======================================
# Models
# ======================================
class PlanInputs(BaseModel):
    debts: List[Debt] = []
    profile: UserProfile = UserProfile()
    funding: FundingConfig = FundingConfig()
    goal: Goal = Goal.SPEED

class PreviewRequest(PlanInputs):
    month: int = Field(1, ge=1)

class GenerateRequest(PlanInputs):
    strategy: Strategy = Strategy.AVALANCHE

class CompareRequest(PlanInputs):
    selected_month: int = Field(1, ge=1)


def _active(debts: List[Debt]) -> List[Debt]:
    return [d for d in debts if d.balance > 0]


# ======================================
# Routes
# ======================================
@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "timestamp": time.time()}

@app.get("/api/defaults")
async def get_defaults():
    return default_snapshot().model_dump(mode="json")

@app.post("/api/minimums/estimate")
async def estimate_minimums(request: PlanInputs):
    annotated = annotate_debts(request.debts)
    return {
        "debts": [d.model_dump(mode="json") for d in annotated],
        "minimums_total": minimums_total(request.debts),
    }

@app.post("/api/schedule/preview")
async def preview_month(request: PreviewRequest):
    """The "Month N check": what this month's funding has to cover."""
    active = _active(request.debts)
    plan = build_payment_plan(request.funding, active)(request.month)
    info = resolve_schedule_month(annotate_debts(active), plan.funding_amount,
                                  allocations_for_month(request.funding, request.month))
    return {
        "month": request.month,
        "funding_amount": plan.funding_amount,
        **info.model_dump(mode="json"),
        "formatted": {
            "funding_amount": money(plan.funding_amount),
            "required_sum": money(info.required_sum),
            "unassigned": money(info.unassigned),
        },
    }

@app.post("/api/reality")
async def reality_check(request: PlanInputs):
    return check_reality(request.profile, _active(request.debts), request.funding).model_dump(mode="json")

@app.post("/api/plans/generate")
async def generate_repayment_plan(request: GenerateRequest):
    try:
        active = _active(request.debts)
        if not active:
            raise HTTPException(status_code=400, detail="No debts provided")
        plan_fn = build_payment_plan(request.funding, active)
        run = simulate_strategy(request.strategy, active, plan_fn, settings.max_months)
        return {
            "success": not run.invalid,
            "result": run.model_dump(mode="json"),
            "balance_series": simulate_total_balance_series(run),
            "formatted": {
                "months_to_payoff": f"{run.months_to_debt_free} months ({run.months_to_debt_free/12:.1f} years)",
                "total_interest": money(run.total_interest),
            },
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("plan generation failed")
        return {"success": False, "error": f"Error generating plan: {e}"}

@app.post("/api/plans/compare")
async def compare_plans(request: CompareRequest):
    comparison = compare_strategies(
        request.debts, request.funding, request.profile, request.goal,
        max_months=settings.max_months, parallel=settings.parallel,
    )
    if not comparison.available:
        raise HTTPException(status_code=409, detail=comparison.reason)

    # selected month is clamped to the shorter of the two timelines
    details = month_details(comparison, request.selected_month)
    if details:
        explanation = month_explanation(details["snowball"])
        details = {
            **details,
            "snowball": details["snowball"].model_dump(mode="json"),
            "avalanche": details["avalanche"].model_dump(mode="json"),
        }
    else:
        explanation = ""

    table = payoff_table(comparison).astype(object)
    return {
        "success": True,
        "comparison": comparison.model_dump(mode="json"),
        "month_details": details,
        "payoff_table": table.where(table.notna(), None).to_dict(orient="records"),
        "explanation": explanation,
    }

def _record_status(status: str, message: str, exported: bool = False) -> None:
    # status text travels with the saved inputs; no saved inputs, nothing to record
    cfg = get_settings()
    snapshot = load_snapshot(cfg.storage_path, cfg.storage_key)
    if snapshot is None:
        return
    update = {"status": status, "status_message": message}
    if exported:
        update["last_updated"] = now_iso()
    save_snapshot(cfg.storage_path, snapshot.model_copy(update=update), cfg.storage_key)

@app.post("/api/export/payload")
async def export_payload(request: PlanInputs):
    payload, error = build_export_payload(request.debts, request.profile, request.funding)
    if error:
        _record_status("error", error)
        raise HTTPException(status_code=409, detail=error)
    _record_status("success", "Export ready.", exported=True)
    return payload.model_dump(mode="json")

@app.get("/api/inputs")
async def get_inputs():
    cfg = get_settings()
    snapshot: Optional[InputSnapshot] = load_snapshot(cfg.storage_path, cfg.storage_key)
    return (snapshot or default_snapshot()).model_dump(mode="json")

@app.put("/api/inputs")
async def put_inputs(snapshot: InputSnapshot):
    cfg = get_settings()
    save_snapshot(cfg.storage_path, snapshot, cfg.storage_key)
    return snapshot.model_dump(mode="json")

@app.delete("/api/inputs")
async def delete_inputs():
    reset_snapshot(get_settings().storage_path)
    return default_snapshot().model_dump(mode="json")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

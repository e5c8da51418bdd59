# payoff/storage.py
"""
Saved user inputs.

One JSON file, one key (`PAYOFF_STORAGE_KEY`) holding a flat snapshot of
every input field. Older snapshots may lack debt ids or use earlier field
names; those are upgraded on load.
"""
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import DEFAULT_STORAGE_KEY
from .schemas import Debt, DebtType, Goal, InputSnapshot, PaymentMode, ScheduleRow
from .utils import make_id

logger = logging.getLogger(__name__)

DEFAULT_DEBTS = [
    {"id": "d1", "name": "Credit Card", "type": "credit_card", "balance": 4000, "interest_rate": 29.99},
    {"id": "d2", "name": "Personal Loan", "type": "loan", "balance": 6000, "interest_rate": 7.99},
]


def default_snapshot() -> InputSnapshot:
    return InputSnapshot(
        debts=[Debt(**d) for d in DEFAULT_DEBTS],
        income=5300,
        bills=2700,
        monthly_payment=1500,
        goal=Goal.SPEED,
        payment_mode=PaymentMode.FIXED,
        payment_schedule=[ScheduleRow(month=m, amount=1500) for m in range(1, 7)],
    )


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def ensure_debt_ids(raw_debts: Any) -> List[Dict[str, Any]]:
    out = []
    for d in raw_debts or []:
        if not isinstance(d, dict):
            continue
        out.append(d if d.get("id") else {**d, "id": make_id("d")})
    return out


def blank_debt() -> Debt:
    return Debt(id=make_id("d"), name="", type=DebtType.CREDIT_CARD)


def add_debt(debts: List[Debt]) -> List[Debt]:
    return list(debts) + [blank_debt()]


def remove_debt(debts: List[Debt], index: int) -> List[Debt]:
    remaining = [d for i, d in enumerate(debts) if i != index]
    return remaining or [blank_debt()]


def _ensure_dir(path: str) -> None:
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def load_snapshot(path: str, key: str = DEFAULT_STORAGE_KEY) -> Optional[InputSnapshot]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
        if not raw_text:
            return None
        raw = json.loads(raw_text)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("could not read saved inputs from %s: %s", path, e)
        return None

    payload = raw.get(key) if isinstance(raw, dict) else None
    if not isinstance(payload, dict):
        return None

    defaults = default_snapshot().model_dump(mode="json")
    merged = {**defaults, **payload}
    merged["debts"] = ensure_debt_ids(payload.get("debts", defaults["debts"]))
    try:
        return InputSnapshot(**merged)
    except ValidationError as e:
        logger.warning("saved inputs under %r are unusable: %s", key, e)
        return None


def save_snapshot(path: str, snapshot: InputSnapshot, key: str = DEFAULT_STORAGE_KEY) -> None:
    _ensure_dir(path)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump({key: snapshot.model_dump(mode="json")}, f, allow_nan=False)
    os.replace(tmp_path, path)


def reset_snapshot(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)

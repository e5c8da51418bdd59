import json

from payoff.schemas import DebtType, Goal, InputSnapshot, PaymentMode
from payoff.storage import (
    add_debt, default_snapshot, ensure_debt_ids, load_snapshot, remove_debt, reset_snapshot, save_snapshot,
)


def test_save_then_load(tmp_path):
    path = str(tmp_path / "inputs.json")
    snap = default_snapshot().model_copy(update={"goal": Goal.INTEREST, "monthly_payment": 1750.0})
    save_snapshot(path, snap, key="k")

    with open(path, "r", encoding="utf-8") as handle:
        assert list(json.load(handle)) == ["k"]
    assert load_snapshot(path, key="k") == snap

def test_missing_or_corrupt_file_loads_nothing(tmp_path):
    path = tmp_path / "inputs.json"
    assert load_snapshot(str(path)) is None
    path.write_text("{not json", encoding="utf-8")
    assert load_snapshot(str(path)) is None
    path.write_text(json.dumps({"other_key": {}}), encoding="utf-8")
    assert load_snapshot(str(path)) is None

def test_legacy_snapshot_is_upgraded(tmp_path):
    path = tmp_path / "inputs.json"
    legacy = {
        "debts": [
            {"id": "a", "name": "Card", "type": "credit_card", "balance": "4000", "interest_rate": 29.99},
            {"name": "LOC", "type": "loc", "balance": 2000, "interest_rate": 9,
             "min_override_enabled": True, "min_override_amount": "80"},
        ],
        "paycheques": [{"amount": 5300}],
        "bills": [{"amount": 2700}],
        "monthlyPayment": 2222,
        "paymentMode": "schedule",
        "paymentSchedule": [{"month": 1, "amount": 900, "allocations": {"a": 300}}],
        "lastUpdated": "2024-03-01T12:00:00.000Z",
        "status": "success",
        "statusMessage": "Export ready.",
        "showDonate": True,
    }
    path.write_text(json.dumps({"clearpath_debt_inputs_v1": legacy}), encoding="utf-8")

    snap = load_snapshot(str(path))
    assert snap.income == 5300 and snap.bills == 2700
    ids = [d.id for d in snap.debts]
    assert ids[0] == "a" and all(ids) and len(set(ids)) == 2
    assert snap.debts[0].balance == 4000
    assert snap.debts[1].type == DebtType.LINE_OF_CREDIT
    assert snap.debts[1].min_floor_enabled and snap.debts[1].min_floor_amount == 80
    # camelCase fields are kept, not replaced by the defaults
    assert snap.monthly_payment == 2222
    assert snap.payment_mode == PaymentMode.SCHEDULE
    assert len(snap.payment_schedule) == 1
    row = snap.payment_schedule[0]
    assert row.month == 1 and row.amount == 900 and row.allocations == {"a": 300}
    assert snap.last_updated == "2024-03-01T12:00:00.000Z"
    assert snap.status == "success" and snap.status_message == "Export ready."
    assert snap.funding().schedule[0].allocations == {"a": 300}

def test_legacy_snapshot_without_funding_uses_defaults(tmp_path):
    path = tmp_path / "inputs.json"
    legacy = {"debts": [{"name": "Card", "balance": 4000}], "paycheques": [{"amount": 5300}]}
    path.write_text(json.dumps({"clearpath_debt_inputs_v1": legacy}), encoding="utf-8")

    snap = load_snapshot(str(path))
    assert snap.monthly_payment == 1500
    assert snap.payment_mode == PaymentMode.FIXED
    assert len(snap.payment_schedule) == 6

def test_corrupt_schedule_row_keeps_the_rest(tmp_path):
    path = tmp_path / "inputs.json"
    saved = {
        "debts": [{"id": "a", "balance": 4000}],
        "income": 9000,
        "payment_schedule": [None, "junk", {"month": 2, "amount": 800}],
    }
    path.write_text(json.dumps({"clearpath_debt_inputs_v1": saved}), encoding="utf-8")

    snap = load_snapshot(str(path))
    assert snap is not None
    assert [d.id for d in snap.debts] == ["a"] and snap.debts[0].balance == 4000
    assert snap.income == 9000
    assert [(r.month, r.amount) for r in snap.payment_schedule] == [(2, 800)]

def test_schedule_that_is_not_a_list_loads_empty(tmp_path):
    path = tmp_path / "inputs.json"
    saved = {"debts": [{"id": "a", "balance": 4000}], "income": 9000, "payment_schedule": None}
    path.write_text(json.dumps({"clearpath_debt_inputs_v1": saved}), encoding="utf-8")

    snap = load_snapshot(str(path))
    assert snap.income == 9000
    assert snap.payment_schedule == []

def test_ensure_debt_ids_keeps_existing_ids():
    out = ensure_debt_ids([{"id": "keep"}, {"name": "new"}, "junk"])
    assert out[0]["id"] == "keep"
    assert out[1]["id"] and out[1]["id"] != "keep"
    assert len(out) == 2

def test_reset_removes_file(tmp_path):
    path = str(tmp_path / "inputs.json")
    save_snapshot(path, InputSnapshot())
    reset_snapshot(path)
    assert load_snapshot(path) is None
    reset_snapshot(path)

def test_debt_list_never_empty():
    debts = default_snapshot().debts
    grown = add_debt(debts)
    assert len(grown) == 3 and grown[-1].type == DebtType.CREDIT_CARD
    assert grown[-1].id not in {d.id for d in debts}
    left = remove_debt(remove_debt(debts, 0), 0)
    assert len(left) == 1 and left[0].name == "" and left[0].balance == 0

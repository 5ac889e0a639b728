'''
    File Name: test_budget.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
from datetime import date

import pytest

from helpers import make_tx
from models.budget import (
    Budget,
    budget_status,
    check_alert,
    create_budget,
    days_remaining_in_month,
    usage_percentage,
)


def test_create_budget_defaults():
    budget = create_budget({"total_amount": "2500"})
    assert budget.id.startswith("budget_")
    assert budget.period == "monthly"
    assert budget.total_amount == 2500
    assert budget.categories == {}
    assert budget.alerts == {"warn_at_80": True, "alert_at_100": True}


def test_create_budget_with_garbage_amounts():
    budget = create_budget({"total_amount": "lots", "categories": {"Salud": "x", "Vivienda": 700}})
    assert budget.total_amount == 0
    assert budget.categories == {"Salud": 0, "Vivienda": 700}


def test_budget_dict_round_trip():
    budget = create_budget({"id": "budget_1", "total_amount": 1000, "categories": {"Salud": 200},
                            "alerts": {"warn_at_80": False}})
    record = budget.to_dict()
    assert record["totalAmount"] == 1000
    assert record["alerts"] == {"warn_at_80": False, "alert_at_100": True}
    assert Budget.from_dict(record) == budget


def test_usage_percentage():
    assert usage_percentage(50, 200) == 25
    assert usage_percentage(50, 0) == 0


@pytest.mark.parametrize("pct, expected", [(0, None), (79.9, None), (80, "warning"), (99, "warning"),
                                           (100, "danger"), (150, "danger")])
def test_check_alert_thresholds(pct, expected):
    assert check_alert(pct, {"warn_at_80": True, "alert_at_100": True}) == expected


def test_check_alert_respects_disabled_alerts():
    assert check_alert(90, {"warn_at_80": False, "alert_at_100": True}) is None
    assert check_alert(120, {"warn_at_80": True, "alert_at_100": False}) == "warning"


def test_days_remaining_in_month():
    assert days_remaining_in_month(date(2026, 10, 19)) == 12
    assert days_remaining_in_month(date(2028, 2, 1)) == 28
    assert days_remaining_in_month(date(2026, 12, 31)) == 0


def test_budget_status_counts_only_expenses():
    budget = create_budget({"total_amount": 1000, "categories": {"Alimentación": 300, "Salud": 100}})
    txs = [
        make_tx("expense", "Alimentación", 250, "2026-10-01"),
        make_tx("expense", "Vivienda", 600, "2026-10-02"),
        make_tx("income", "Salario", 5000, "2026-10-03"),
    ]
    status = budget_status(budget, txs)
    overall = status["overall"]
    assert overall["spent"] == 850
    assert overall["limit"] == 1000
    assert overall["percentage"] == 85
    assert overall["alert"] == "warning"

    food = status["categories"]["Alimentación"]
    assert food["spent"] == 250
    assert food["alert"] == "warning"
    assert status["categories"]["Salud"] == {"spent": 0, "limit": 100, "percentage": 0, "alert": None}


def test_budget_status_without_limit_has_no_alert():
    status = budget_status(create_budget({}), [make_tx("expense", "Otros", 10)])
    assert status["overall"]["alert"] is None
    assert status["overall"]["percentage"] == 0

'''
    File Name: budget.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
    Description: Monthly budget model and usage alerts.
'''
import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
import time
from typing import Any, Dict, Iterable, Mapping, Optional

from models.transaction import Transaction
from models.validation import parse_amount
from reports import metrics

WARNING_THRESHOLD = 80
DANGER_THRESHOLD = 100


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="milliseconds")


def _to_amount(value: Any) -> float:
    num = parse_amount(value)
    return num if num == num else 0.0  # NaN -> 0


@dataclass
class Budget:
    """
    Spending plan for a period.

    Attributes:
        id: Identifier ('budget_<epoch-ms>')
        period: Only "monthly" is supported
        total_amount: Overall spending limit
        categories: Optional per-category limits (expense categories)
        alerts: Which thresholds raise an alert ('warn_at_80', 'alert_at_100')
    """
    id: str
    period: str = "monthly"
    total_amount: float = 0.0
    categories: Dict[str, float] = field(default_factory=dict)
    alerts: Dict[str, bool] = field(default_factory=lambda: {"warn_at_80": True, "alert_at_100": True})
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "period": self.period,
            "totalAmount": self.total_amount,
            "categories": dict(self.categories),
            "alerts": dict(self.alerts),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Budget":
        return create_budget({
            "id": data.get("id"),
            "period": data.get("period"),
            "total_amount": data.get("totalAmount"),
            "categories": data.get("categories"),
            "alerts": data.get("alerts"),
            "created_at": data.get("createdAt"),
        }, updated_at=data.get("updatedAt"))


def create_budget(data: Mapping[str, Any], updated_at: Optional[str] = None) -> Budget:
    """Build a Budget with defaults for anything missing."""
    alerts = data.get("alerts") or {}
    categories = data.get("categories") or {}
    now = _now_iso()
    return Budget(
        id=data.get("id") or f"budget_{int(time.time() * 1000)}",
        period=data.get("period") or "monthly",
        total_amount=_to_amount(data.get("total_amount")),
        categories={str(k): _to_amount(v) for k, v in categories.items()},
        alerts={
            "warn_at_80": bool(alerts.get("warn_at_80", True)),
            "alert_at_100": bool(alerts.get("alert_at_100", True)),
        },
        created_at=data.get("created_at") or now,
        updated_at=updated_at or now,
    )


def usage_percentage(spent: float, budgeted: float) -> float:
    if budgeted == 0:
        return 0.0
    return spent / budgeted * 100


def check_alert(percentage: float, alerts: Mapping[str, bool]) -> Optional[str]:
    """'danger' at 100 % or more, 'warning' at 80 % or more, otherwise None."""
    if percentage >= DANGER_THRESHOLD and alerts.get("alert_at_100", True):
        return "danger"
    if percentage >= WARNING_THRESHOLD and alerts.get("warn_at_80", True):
        return "warning"
    return None


def days_remaining_in_month(today: Optional[date] = None) -> int:
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return last_day - today.day


def budget_status(budget: Budget, transactions: Iterable[Transaction]) -> Dict[str, Any]:
    """Spending against the budget for the given (already period-filtered) transactions."""
    spent_by_category = metrics.expenses_by_category(transactions)
    spent = sum(spent_by_category.values(), 0.0)

    def _entry(amount: float, limit: float) -> Dict[str, Any]:
        pct = usage_percentage(amount, limit)
        return {
            "spent": amount,
            "limit": limit,
            "percentage": pct,
            "alert": check_alert(pct, budget.alerts) if limit > 0 else None,
        }

    return {
        "overall": _entry(spent, budget.total_amount),
        "categories": {
            name: _entry(spent_by_category.get(name, 0.0), limit)
            for name, limit in budget.categories.items()
        },
    }

'''
    File Name: metrics.py
    Version: 1.1.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
    Description: Financial metrics derived from a collection of transactions.
'''
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from models.transaction import Transaction
from models.validation import parse_date

COLUMNS = ["type", "category", "amount", "date"]


def to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """One row per transaction with the columns the aggregations need."""
    rows = [(t.type, t.category, t.amount, t.date) for t in transactions]
    df = pd.DataFrame(rows, columns=COLUMNS)
    df["amount"] = df["amount"].astype(float)
    return df


def _of_type(df: pd.DataFrame, tx_type: str) -> pd.DataFrame:
    return df[df["type"] == tx_type]


def _total(df: pd.DataFrame, tx_type: str) -> float:
    return float(_of_type(df, tx_type)["amount"].sum())


def total_income(transactions: Iterable[Transaction]) -> float:
    return _total(to_frame(transactions), "income")


def total_expenses(transactions: Iterable[Transaction]) -> float:
    return _total(to_frame(transactions), "expense")


def net_balance(transactions: Iterable[Transaction]) -> float:
    df = to_frame(transactions)
    return _total(df, "income") - _total(df, "expense")


def _savings_rate(df: pd.DataFrame) -> float:
    income = _total(df, "income")
    if income == 0:
        return 0.0
    return (income - _total(df, "expense")) / income * 100


def savings_rate(transactions: Iterable[Transaction]) -> float:
    """Net balance as a percentage of income; 0 when there is no income."""
    return _savings_rate(to_frame(transactions))


def _category_totals(df: pd.DataFrame, tx_type: str) -> pd.Series:
    # sort=False keeps categories in first-seen order
    return _of_type(df, tx_type).groupby("category", sort=False)["amount"].sum()


def _as_dict(series: pd.Series) -> Dict[str, float]:
    return {str(key): float(value) for key, value in series.items()}


def expenses_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Category -> summed expense amount. Categories without expenses are absent."""
    return _as_dict(_category_totals(to_frame(transactions), "expense"))


def income_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    return _as_dict(_category_totals(to_frame(transactions), "income"))


def month_key(value: Any) -> Optional[str]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def monthly_trend(transactions: Iterable[Transaction]) -> Dict[str, Dict[str, float]]:
    """Group by 'YYYY-MM' into {'income', 'expenses', 'balance'} per month.

    Months come out in chronological order. Records whose date does not
    parse are left out.
    """
    df = to_frame(transactions)
    if df.empty:
        return {}

    dates = pd.to_datetime(df["date"].map(parse_date), errors="coerce")
    dated = df.assign(date=dates)
    dated = dated[dated["date"].notna()]
    if dated.empty:
        return {}

    dated = dated.assign(
        month=dated["date"].dt.to_period("M"),
        kind=dated["type"].where(dated["type"] == "income", "expenses"),
    )
    table = (
        dated.groupby(["month", "kind"])["amount"].sum()
        .unstack(fill_value=0.0)
        .reindex(columns=["income", "expenses"], fill_value=0.0)
    )
    table["balance"] = table["income"] - table["expenses"]
    return {str(month): _as_dict(row) for month, row in table.iterrows()}


def _average_daily_expense(df: pd.DataFrame) -> float:
    expenses = _of_type(df, "expense")
    if expenses.empty:
        return 0.0
    return float(expenses["amount"].sum() / expenses["date"].nunique())


def average_daily_expense(transactions: Iterable[Transaction]) -> float:
    """Total expenses divided by the number of distinct days with an expense."""
    return _average_daily_expense(to_frame(transactions))


def _top_expense_category(df: pd.DataFrame) -> Optional[Dict[str, Any]]:
    totals = _category_totals(df, "expense")
    if totals.empty or not totals.max() > 0:
        return None
    # idxmax returns the first label holding the maximum
    top = totals.idxmax()
    return {"category": top, "amount": float(totals[top])}


def top_expense_category(transactions: Iterable[Transaction]) -> Optional[Dict[str, Any]]:
    """Category with the largest expense total, or None without expenses.

    On a tie the category met first in the input wins.
    """
    return _top_expense_category(to_frame(transactions))


def basic_stats(numbers: Iterable[float]) -> Dict[str, float]:
    values = pd.Series(list(numbers), dtype=float)
    if values.empty:
        return {"min": 0, "max": 0, "avg": 0, "median": 0}
    return {
        "min": float(values.min()),
        "max": float(values.max()),
        "avg": float(values.mean()),
        "median": float(values.median()),
    }


def _change(current: float, previous: float) -> Dict[str, float]:
    change = (current - previous) / previous * 100 if previous != 0 else 0.0
    return {"current": current, "previous": previous, "change_percent": change}


def compare_periods(current: Iterable[Transaction], previous: Iterable[Transaction]) -> Dict[str, Dict[str, float]]:
    """Income and expense totals of two periods with the relative change in %."""
    now, before = to_frame(current), to_frame(previous)
    return {
        "income": _change(_total(now, "income"), _total(before, "income")),
        "expenses": _change(_total(now, "expense"), _total(before, "expense")),
    }


def previous_month(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def transactions_in_month(transactions: Iterable[Transaction], year: int, month: int) -> List[Transaction]:
    key = f"{year:04d}-{month:02d}"
    return [t for t in transactions if month_key(t.date) == key]


def summary(transactions: Sequence[Transaction]) -> Dict[str, Any]:
    """KPI bundle shown on the dashboard and in the reports view."""
    df = to_frame(transactions)
    income, expenses = _total(df, "income"), _total(df, "expense")
    return {
        "income": income,
        "expenses": expenses,
        "balance": income - expenses,
        "savings_rate": _savings_rate(df),
        "average_daily_expense": _average_daily_expense(df),
        "top_expense_category": _top_expense_category(df),
        "expense_stats": basic_stats(_of_type(df, "expense")["amount"]),
        "count": len(df),
    }

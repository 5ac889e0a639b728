'''
    File Name: test_formatting.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''
from datetime import date

import pytest

import config
from utils import formatting


def test_format_currency():
    assert formatting.format_currency(1234.5) == "$1,234.50"
    assert formatting.format_currency(-20) == "-$20.00"
    assert formatting.format_currency(0) == "$0.00"
    assert formatting.format_currency(3, symbol="€") == "€3.00"


def test_format_currency_uses_configured_symbol(monkeypatch):
    monkeypatch.setattr(config, "CURRENCY_SYMBOL", "US$")
    assert formatting.format_currency(1) == "US$1.00"


def test_format_percentage_and_numbers():
    assert formatting.format_percentage(12.345) == "12.3%"
    assert formatting.format_percentage(50, decimals=0) == "50%"
    assert formatting.format_number(1500) == "1,500"
    assert formatting.format_number(1500.256) == "1,500.26"


@pytest.mark.parametrize("num, expected", [(950, "950"), (1500, "1.5K"), (2_000_000, "2.0M"), (12.5, "12.5")])
def test_abbreviate_number(num, expected):
    assert formatting.abbreviate_number(num) == expected


def test_format_date():
    assert formatting.format_date("2026-10-05") == "05/10/2026"
    assert formatting.format_date(date(2026, 1, 2)) == "02/01/2026"
    assert formatting.format_date("garbage") == "garbage"
    assert formatting.format_date(None) == ""


def test_month_names():
    assert formatting.month_name(1) == "Enero"
    assert formatting.month_short(10) == "Oct"
    assert formatting.month_label("2026-10") == "Oct 2026"
    assert formatting.month_label("2026-13") == "2026-13"
    assert formatting.month_label("oops") == "oops"


def test_capitalize():
    assert formatting.capitalize("expense") == "Expense"
    assert formatting.capitalize("iNCOME") == "Income"
    assert formatting.capitalize("") == ""

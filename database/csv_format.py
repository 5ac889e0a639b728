'''
    File Name: csv_format.py
    Version: 1.0.0
    Date: 19/10/2026
    Author: Pablo Bartolomé Molina
'''

import csv
import io
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from models.transaction import Transaction
from models.validation import TYPE_ALIASES

logger = logging.getLogger(__name__)

HEADER = ["Type", "Category", "Amount", "Date", "Description"]
MIN_FIELDS = 4


def format_amount(amount: float) -> str:
    """'1500' for whole amounts, shortest round-trip repr otherwise."""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def to_csv(transactions: Iterable[Transaction]) -> str:
    """Serialize transactions with an unquoted header and every field quoted.

    Embedded double quotes are doubled (RFC 4180), so descriptions with commas
    or quotes read back unchanged.
    """
    buf = io.StringIO()
    buf.write(",".join(HEADER))
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    rows = [
        [t.type, t.category, format_amount(t.amount), t.date, t.description or ""]
        for t in transactions
    ]
    if rows:
        buf.write("\n")
        writer.writerows(rows)
    return buf.getvalue().rstrip("\n")


def parse_csv(text: str) -> Tuple[List[Dict[str, Any]], int]:
    """Parse exported CSV text into raw transaction dicts.

    The first non-blank line is the header and is ignored. The reader removes
    the CSV quoting; values are only trimmed of surrounding whitespace. Type
    names are matched case-sensitively. Lines with fewer than four fields are
    skipped. Returns (rows, malformed_line_count); rows are not validated
    here.
    """
    rows: List[Dict[str, Any]] = []
    malformed = 0
    header_seen = False
    reader = csv.reader(io.StringIO(text or ""), skipinitialspace=True)
    while True:
        try:
            values = next(reader)
        except StopIteration:
            break
        except csv.Error:
            malformed += 1
            logger.debug("Skipping unparseable CSV line %d", reader.line_num)
            continue

        if not any(v.strip() for v in values):
            continue
        if not header_seen:
            header_seen = True
            continue

        values = [v.strip() for v in values]
        if len(values) < MIN_FIELDS:
            malformed += 1
            logger.debug("Skipping CSV line with %d field(s)", len(values))
            continue
        tx_type, category, amount, date = values[:4]
        description = values[4] if len(values) > 4 else ""
        rows.append({
            "type": TYPE_ALIASES.get(tx_type, tx_type),
            "category": category,
            "amount": amount,
            "date": date,
            "description": description,
        })
    return rows, malformed


def read_csv_file(path: Path) -> str:
    """Read a CSV file as text (BOM tolerated). Raises OSError on failure."""
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return f.read()


def write_csv_file(path: Path, text: str) -> bool:
    """Write CSV text to `path`. Raises OSError on failure."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
        if text and not text.endswith("\n"):
            f.write("\n")
    return True

# core/csv_utils.py

"""
CSV export / import of record lists.

Export quotes every cell. Import honours quoted cells with embedded commas
and doubled quotes, coerces numeric cells, and drops the id column so every
imported row becomes a new record.
"""

import csv
import io
import re
from typing import Any, Callable, Iterable, List, Tuple

from core.errors import StoreError, ValidationFailure
from core.logging_config import get_logger


logger = get_logger("csv")

LEADING_ZERO = re.compile(r"^-?0\d")


def records_to_csv(records: List[dict]) -> str:
    """Header from the first record's keys; every cell double-quoted."""
    if not records:
        return ""

    header = list(records[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    writer.writerow(header)
    for row in records:
        writer.writerow(["" if row.get(field) is None else row.get(field) for field in header])

    return buffer.getvalue().rstrip("\n")


def coerce_cell(value: str) -> Any:
    """Non-empty numeric cells become numbers, everything else stays text."""
    if value == "":
        return value
    # Phone numbers, tax codes: leading zeros and signs are significant
    if value.startswith("+") or LEADING_ZERO.match(value):
        return value
    try:
        number = float(value)
    except ValueError:
        return value
    if number != number or number in (float("inf"), float("-inf")):
        # "nan" / "inf" are names, not numbers
        return value
    if number.is_integer() and "e" not in value.lower():
        return int(number)
    return number


def csv_to_records(text: str) -> List[dict]:
    """
    First line is the header. Rows whose cell count does not match the
    header are dropped.
    """
    text = (text or "").strip()
    if not text:
        return []

    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    rows = list(reader)
    if len(rows) < 2:
        return []

    header = [h.strip() for h in rows[0]]
    records = []

    for line_no, cells in enumerate(rows[1:], start=2):
        if len(cells) != len(header):
            logger.debug(f"CSV line {line_no}: {len(cells)} cells for {len(header)} columns, skipped")
            continue
        records.append({field: coerce_cell(cell.strip()) for field, cell in zip(header, cells)})

    return records


def import_records(
    text: str,
    required: Iterable[str],
    insert: Callable[[dict], Any],
) -> Tuple[int, int]:
    """
    Insert every parsed row that has all required fields.
    Returns (success, failed).
    """
    required = list(required)
    success = 0
    failed = 0

    for record in csv_to_records(text):
        record.pop("id", None)

        if any(record.get(field) in (None, "") for field in required):
            failed += 1
            continue

        try:
            insert(record)
            success += 1
        except (ValidationFailure, StoreError) as e:
            logger.info(f"CSV row rejected: {e.message}")
            failed += 1

    logger.info(f"CSV import: {success} imported, {failed} failed")
    return success, failed

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from expense_importer.columns import DEFAULT_FIELD_MAP, FieldMap, resolve_row
from expense_importer.logging_setup import get_logger
from expense_importer.models import ImportBatch, ParsedRow
from expense_importer.normalize.amounts import parse_amount
from expense_importer.normalize.dates import parse_date_to_iso
from expense_importer.normalize.text import clean_description, normalize_status

logger = get_logger(__name__)


def parse_row(
    raw: Mapping[str, object],
    field_map: FieldMap = DEFAULT_FIELD_MAP,
    today: Optional[date] = None,
) -> ParsedRow:
    fields = resolve_row(raw, field_map)
    row = ParsedRow(
        description=clean_description(fields["description"]),
        amount=parse_amount(fields["amount"]),
        due_date=parse_date_to_iso(fields["dueDate"], today=today),
        status=normalize_status(fields["status"]),
    )
    logger.debug("Parsed %r -> %r", fields, row)
    return row


def is_valid(row: ParsedRow) -> bool:
    return bool(row.description.strip()) and row.amount > 0


def classify_rows(
    rows: Iterable[Mapping[str, object]],
    field_map: FieldMap = DEFAULT_FIELD_MAP,
    today: Optional[date] = None,
) -> ImportBatch:
    """
    Split raw rows into usable expenses and a count of skipped ones.

    A row is usable when it has a description and a positive amount. Why a
    row was skipped is only logged, never returned.
    """
    batch = ImportBatch()
    for i, raw in enumerate(rows, start=1):
        row = parse_row(raw, field_map, today=today)
        if is_valid(row):
            batch.valid_rows.append(row)
        else:
            batch.invalid_count += 1
            logger.debug(
                "Row %d skipped: description=%r amount=%s", i, row.description, row.amount
            )
    return batch

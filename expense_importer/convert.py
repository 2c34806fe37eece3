from __future__ import annotations

from datetime import date
from typing import List, Mapping, Optional, Tuple

from expense_importer.columns import DEFAULT_FIELD_MAP, FieldMap, match_headers
from expense_importer.logging_setup import get_logger
from expense_importer.models import ImportBatch
from expense_importer.normalize.io import load_rows
from expense_importer.report import ImportReport
from expense_importer.rows import classify_rows
from expense_importer.submit import ExpenseApiClient, submit_batch

logger = get_logger(__name__)


def convert_rows(
    rows: List[Mapping[str, object]],
    source: str = "<rows>",
    field_map: FieldMap = DEFAULT_FIELD_MAP,
    today: Optional[date] = None,
    headers: Optional[List[str]] = None,
) -> Tuple[ImportBatch, ImportReport]:
    """
    Core step shared by the CLI and embedding callers: raw rows -> batch + report.
    """
    if headers is None:
        headers = []
        for row in rows:
            for key in row:
                if key not in headers:
                    headers.append(key)
    match = match_headers(headers, field_map)

    batch = classify_rows(rows, field_map, today=today)

    warnings = list(match.reasons)
    if batch.invalid_count:
        warnings.append(f"Skipped {batch.invalid_count} rows without a description or a positive amount.")

    rep = ImportReport(
        source=source,
        rows_in=len(rows),
        valid_rows=batch.valid_count,
        invalid_rows=batch.invalid_count,
        field_map=match.headers,
        warnings=warnings,
    )
    logger.info("%s: %d valid rows, %d skipped", source, rep.valid_rows, rep.invalid_rows)
    return batch, rep


def prepare_import(
    input_path: str,
    field_map: FieldMap = DEFAULT_FIELD_MAP,
    today: Optional[date] = None,
) -> Tuple[ImportBatch, ImportReport]:
    """Read the first worksheet of ``input_path`` and classify its rows."""
    load_res = load_rows(input_path)
    return convert_rows(
        load_res.rows,
        source=input_path,
        field_map=field_map,
        today=today,
        headers=list(load_res.df.columns),
    )


def run_import(
    input_path: str,
    client: ExpenseApiClient,
    concurrency: int = 8,
    report_path: Optional[str] = None,
    field_map: FieldMap = DEFAULT_FIELD_MAP,
) -> ImportReport:
    """
    Parse ``input_path`` and create one expense per valid row.

    Raises ``ImportSubmissionError`` when any create call fails.
    """
    batch, rep = prepare_import(input_path, field_map=field_map)
    created = submit_batch(batch, client, concurrency=concurrency)
    rep.imported = len(created)

    if report_path:
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(rep.to_json())

    return rep

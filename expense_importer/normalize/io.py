from __future__ import annotations

import csv
import io
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pandas as pd

from expense_importer.logging_setup import get_logger
from expense_importer.normalize.text import clean_header

logger = get_logger(__name__)

RawRow = Dict[str, Any]


@dataclass
class LoadResult:
    df: pd.DataFrame
    encoding: str
    delimiter: str
    header_row_index: int
    raw_text_preview: str
    rows: List[RawRow] = field(default_factory=list)


COMMON_ENCODINGS = ["utf-8-sig", "utf-8", "cp1252", "iso-8859-1"]
COMMON_DELIMS = [",", ";", "\t", "|"]

EXCEL_SUFFIXES = (".xlsx", ".xls")

HEADER_KEYWORDS = [
    "descri", "desc", "valor", "preco", "preço", "vencimento", "data",
    "status", "situa", "amount", "price", "date", "due",
]


def _decode_bytes(data: bytes) -> Tuple[str, str]:
    last_err = None
    for enc in COMMON_ENCODINGS:
        try:
            return data.decode(enc), enc
        except UnicodeDecodeError as e:
            last_err = e
    raise ValueError(f"Failed to decode input bytes with common encodings. Last error: {last_err}")


def _sniff_delimiter(text: str) -> str:
    sample = text[:50_000]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters="".join(COMMON_DELIMS))
        return dialect.delimiter
    except csv.Error:
        lines = [ln for ln in sample.splitlines() if ln.strip()][:20]
        scores = {d: sum(ln.count(d) for ln in lines) for d in COMMON_DELIMS}
        best = max(scores, key=scores.get)
        return best if scores[best] else ","


def _header_score(cells: List[str]) -> int:
    joined = " ".join(cells).lower()
    kw_hits = sum(1 for kw in HEADER_KEYWORDS if kw in joined)
    return kw_hits * 10 + len(cells)


def _find_header_row(rows: List[List[str]], min_columns: int = 2, max_scan: int = 30) -> int:
    """
    Exports sometimes carry a title or a blank line above the header.
    Pick the early row that looks most like a header: keyword hits x 10 +
    number of non-empty cells. Rows without any keyword only win when
    nothing else qualifies.
    """
    best_idx = 0
    best_score = -1

    for i, row in enumerate(rows[:max_scan]):
        cells = [str(c).strip() for c in row if str(c).strip() not in ("", "nan")]
        if len(cells) < min_columns:
            continue
        score = _header_score(cells)
        if score > best_score:
            best_score = score
            best_idx = i

    return best_idx


def _csv_records(text: str, delimiter: str) -> List[Tuple[int, List[str]]]:
    """Each CSV record with the physical line it starts on."""
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    out: List[Tuple[int, List[str]]] = []
    start = 0
    for row in reader:
        out.append((start, row))
        start = reader.line_num
    return out


def _frame_to_rows(df: pd.DataFrame) -> List[RawRow]:
    df = df.astype(object).where(df.notna(), "")
    records = df.to_dict(orient="records")
    out: List[RawRow] = []
    for rec in records:
        if all(isinstance(v, str) and not v.strip() for v in rec.values()):
            continue
        out.append(rec)
    return out


def _strip_columns(df: pd.DataFrame) -> pd.DataFrame:
    df.columns = [clean_header(c) for c in df.columns]
    return df


def load_excel(path: str, sheet: int = 0, header_row: int | None = None) -> LoadResult:
    """
    Load the first worksheet of an ``.xlsx`` / ``.xls`` file.

    Cells keep their native types: numbers stay numbers and typed date cells
    come back as timestamps, so the normalizers can tell them apart from
    text. ``header_row`` (0-indexed) is auto-detected when ``None``.
    """
    try:
        if header_row is None:
            raw = pd.read_excel(path, sheet_name=sheet, header=None, dtype=str, nrows=30)
            header_row = _find_header_row(raw.fillna("").values.tolist())

        df = pd.read_excel(path, sheet_name=sheet, header=header_row, dtype=object)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
        # KeyError also covers pandas' OptionError for zips that are not workbooks
        raise ValueError(f"Could not read spreadsheet {path}: {e}") from e

    df = _strip_columns(df)
    df = df.dropna(how="all").reset_index(drop=True)

    return LoadResult(
        df=df,
        encoding="xlsx",
        delimiter="",
        header_row_index=header_row,
        raw_text_preview=df.head(20).to_string(),
        rows=_frame_to_rows(df),
    )


def load_csv(path: str, header_row: int | None = None) -> LoadResult:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ValueError(f"Could not read spreadsheet {path}: {e}") from e

    text, encoding = _decode_bytes(data)
    delimiter = _sniff_delimiter(text)
    records = _csv_records(text, delimiter)
    if header_row is None:
        header_row = _find_header_row([r for _, r in records])
    # skip physical lines up to the header, so blank or whitespace-only
    # preamble lines count the same way for us and for pandas
    skip = records[header_row][0] if header_row < len(records) else 0

    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            skiprows=skip,
            header=0,
            dtype=str,
            engine="python",
            keep_default_na=False,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"Could not parse CSV {path}: {e}") from e

    df = _strip_columns(df)
    preview = "\n".join(text.splitlines()[:20])

    return LoadResult(
        df=df,
        encoding=encoding,
        delimiter=delimiter,
        header_row_index=header_row,
        raw_text_preview=preview,
        rows=_frame_to_rows(df),
    )


def load_rows(path: str) -> LoadResult:
    """Dispatch on the file suffix; anything that is not Excel is read as CSV."""
    suffix = Path(path).suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        res = load_excel(path)
    else:
        res = load_csv(path)
    logger.info("Loaded %d rows from %s (header row %d)", len(res.rows), path, res.header_row_index)
    return res

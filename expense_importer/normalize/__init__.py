from .io import load_csv, load_excel, load_rows, LoadResult, RawRow
from .dates import parse_date_to_iso
from .amounts import parse_amount
from .text import clean_description, clean_header, normalize_status

__all__ = [
    "load_csv",
    "load_excel",
    "load_rows",
    "LoadResult",
    "RawRow",
    "parse_date_to_iso",
    "parse_amount",
    "clean_description",
    "clean_header",
    "normalize_status",
]

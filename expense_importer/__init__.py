from .columns import DEFAULT_FIELD_MAP, FieldMap, match_headers, resolve_field
from .convert import convert_rows, prepare_import, run_import
from .models import ExpenseDraft, ImportBatch, ParsedRow
from .rows import classify_rows, parse_row

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_FIELD_MAP",
    "FieldMap",
    "match_headers",
    "resolve_field",
    "convert_rows",
    "prepare_import",
    "run_import",
    "ExpenseDraft",
    "ImportBatch",
    "ParsedRow",
    "classify_rows",
    "parse_row",
]

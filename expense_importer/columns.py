from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

FIELDS = ("description", "amount", "dueDate", "status")


@dataclass(frozen=True)
class FieldMap:
    """Candidate header names per semantic field, in priority order."""

    description: Sequence[str] = ("descricao", "descrição", "description", "desc")
    amount: Sequence[str] = ("valor", "amount", "preco", "preço", "price")
    dueDate: Sequence[str] = ("vencimento", "data", "date", "due_date", "duedate")
    status: Sequence[str] = ("status", "situacao", "situação")

    def candidates(self, name: str) -> Sequence[str]:
        return getattr(self, name)


DEFAULT_FIELD_MAP = FieldMap()


@dataclass
class HeaderMatch:
    headers: Dict[str, Optional[str]]
    reasons: List[str] = field(default_factory=list)

    @property
    def unresolved(self) -> List[str]:
        return [f for f, h in self.headers.items() if h is None]


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        # whitespace-only text still claims the header and resolves to ""
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _find_header(headers: Iterable[str], candidates: Sequence[str], usable) -> Optional[str]:
    keys = [(str(h), str(h).lower()) for h in headers]

    for name in candidates:
        name = name.lower()
        for key, low in keys:
            if low.strip() == name and usable(key):
                return key

    for name in candidates:
        name = name.lower()
        for key, low in keys:
            if name in low and usable(key):
                return key

    return None


def resolve_field(row: Mapping[str, object], candidates: Sequence[str]):
    """
    Raw value for the first header matching ``candidates``, or ``""``.

    Exact (case-insensitive, trimmed) matches win over substring matches.
    Headers whose cell is empty (None, NaN or "") are skipped. Text is
    returned trimmed; numbers and dates are returned as-is.
    """
    by_key = {str(k): v for k, v in row.items()}
    key = _find_header(by_key, candidates, lambda k: not _is_blank(by_key[k]))
    if key is None:
        return ""
    value = by_key[key]
    return value.strip() if isinstance(value, str) else value


def resolve_row(row: Mapping[str, object], field_map: FieldMap = DEFAULT_FIELD_MAP) -> Dict[str, object]:
    return {name: resolve_field(row, field_map.candidates(name)) for name in FIELDS}


def match_headers(headers: Iterable[object], field_map: FieldMap = DEFAULT_FIELD_MAP) -> HeaderMatch:
    """Which header each field resolves to, judged on header names alone."""
    cols = [str(h).strip() for h in headers]
    resolved: Dict[str, Optional[str]] = {}
    reasons: List[str] = []
    for name in FIELDS:
        hit = _find_header(cols, field_map.candidates(name), lambda k: True)
        resolved[name] = hit
        if hit is None:
            reasons.append(f"No header found for {name}; tried {list(field_map.candidates(name))}")
    return HeaderMatch(headers=resolved, reasons=reasons)

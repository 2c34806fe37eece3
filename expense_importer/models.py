from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

DEFAULT_CATEGORY = "Outros"
DEFAULT_ADDED_BY = "Contratante"


@dataclass(frozen=True)
class ParsedRow:
    description: str
    amount: Decimal
    due_date: str
    status: str


@dataclass
class ImportBatch:
    valid_rows: List[ParsedRow] = field(default_factory=list)
    invalid_count: int = 0

    @property
    def valid_count(self) -> int:
        return len(self.valid_rows)


@dataclass(frozen=True)
class ExpenseDraft:
    """Body of one create-expense call. The API assigns id and project."""

    description: str
    amount: Decimal
    due_date: str
    status: str
    category: str = DEFAULT_CATEGORY
    added_by: str = DEFAULT_ADDED_BY

    @classmethod
    def from_row(cls, row: ParsedRow) -> "ExpenseDraft":
        return cls(
            description=row.description,
            amount=row.amount,
            due_date=row.due_date,
            status=row.status,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "category": self.category,
            "amount": float(self.amount),
            "dueDate": self.due_date,
            "status": self.status,
            "addedBy": self.added_by,
        }

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Dict, List, Optional
import json


@dataclass
class ImportReport:
    source: str
    rows_in: int
    valid_rows: int
    invalid_rows: int
    imported: int = 0
    field_map: Dict[str, Optional[str]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2)

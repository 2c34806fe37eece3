from __future__ import annotations

from pathlib import Path

import pandas as pd

TEMPLATE_COLUMNS = ["Vencimento", "Descrição", "Valor", "Status"]

TEMPLATE_ROWS = [
    ["20/12/2024", "Cimento 50kg", "35,00", "Pendente"],
    ["25/12/2024", "Pintura externa", "1500,00", "Pago"],
    ["30/12/2024", "Areia para construção", "250,00", "Pendente"],
]

SHEET_NAME = "Despesas"
COLUMN_WIDTHS = {"A": 15, "B": 35, "C": 12, "D": 12}


def template_frame() -> pd.DataFrame:
    return pd.DataFrame(TEMPLATE_ROWS, columns=TEMPLATE_COLUMNS)


def write_template(path: str) -> str:
    """
    Write the example spreadsheet users fill in before importing.

    Values are stored as text in the Brazilian convention so the file reads
    back exactly as written. ``.csv`` paths get a CSV, anything else ``.xlsx``.
    """
    df = template_frame()
    if Path(path).suffix.lower() == ".csv":
        df.to_csv(path, index=False, encoding="utf-8-sig")
        return path

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        ws = writer.sheets[SHEET_NAME]
        for col, width in COLUMN_WIDTHS.items():
            ws.column_dimensions[col].width = width
    return path

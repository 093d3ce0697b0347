from __future__ import annotations
import io
from typing import Iterable

import pandas as pd

from logic.consulta import a_dataframe
from logic.modelos import Movimiento


def movimientos_a_excel_bytes(
    movs: Iterable[Movimiento],
    sheet_name: str = "Movimientos",
    formato_fecha: str | None = None,
) -> bytes:
    """
    Exporta los movimientos a Excel con la columna ``date`` como fecha real (no texto).
    Si se pasa `formato_fecha` (p.ej. "DD/MM/YYYY"), se aplica como number_format.
    """
    df = a_dataframe(movs)
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")

    buff = io.BytesIO()
    with pd.ExcelWriter(buff, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]
        headers = [c.value for c in ws[1]]
        if formato_fecha and "date" in headers:
            col_letter = ws.cell(row=1, column=headers.index("date") + 1).column_letter
            for cell in ws[col_letter][1:]:
                cell.number_format = formato_fecha
        if "amount" in headers:
            col_letter = ws.cell(row=1, column=headers.index("amount") + 1).column_letter
            for cell in ws[col_letter][1:]:
                cell.number_format = "#,##0.00"
    return buff.getvalue()

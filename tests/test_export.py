import io

from openpyxl import load_workbook

from infra.export import movimientos_a_excel_bytes
from logic.modelos import Movimiento


def test_excel_con_fechas_reales():
    movs = [
        Movimiento(id=1, date="2025-01-05", account="A", amount=10.5),
        Movimiento(id=2, date="", account="B", amount=-3.0, type="DEBIT"),
    ]
    data = movimientos_a_excel_bytes(movs, formato_fecha="DD/MM/YYYY")
    ws = load_workbook(io.BytesIO(data))["Movimientos"]
    headers = [c.value for c in ws[1]]
    assert headers[:3] == ["id", "date", "account"]
    fecha = ws.cell(row=2, column=2)
    assert fecha.value.year == 2025 and fecha.value.month == 1 and fecha.value.day == 5
    assert fecha.number_format == "DD/MM/YYYY"
    assert ws.cell(row=3, column=2).value is None
    assert ws.cell(row=3, column=headers.index("amount") + 1).value == -3.0

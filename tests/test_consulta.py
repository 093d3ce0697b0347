import pytest

from logic.consulta import Filtro, a_dataframe, cuentas, filtrar, ordenar, paginar, resumen
from logic.modelos import CAMPOS, Movimiento


MOVS = [
    Movimiento(id=1, date="2025-01-05", account="CC 001", description="Cobro Cliente A", document="FC-123",
               type="CREDIT", amount=1500.0, status="PENDING"),
    Movimiento(id=2, date="2025-01-05", account="CC 001", description="Pago Proveedor Z", document="OP-998",
               type="DEBIT", amount=-750.0, status="RECONCILED"),
    Movimiento(id=3, date="", account="Ahorro", description="Intereses", type="CREDIT", amount=12.35,
               status="RECONCILED"),
    Movimiento(id=4, date="2025-02-01", account="", description="Sin cuenta", type="DEBIT", amount=-50.0),
]


def test_filtro_por_texto_en_varios_campos():
    assert [m.id for m in filtrar(MOVS, Filtro(texto="op-998"))] == [2]
    assert [m.id for m in filtrar(MOVS, Filtro(texto="  ahorro "))] == [3]


def test_filtro_por_estado_tipo_y_cuenta():
    assert [m.id for m in filtrar(MOVS, Filtro(estado="RECONCILED", tipo="CREDIT"))] == [3]
    assert [m.id for m in filtrar(MOVS, Filtro(cuenta="CC 001"))] == [1, 2]


def test_filtro_por_fechas_inclusivo():
    res = filtrar(MOVS, Filtro(fecha_desde="2025-01-05", fecha_hasta="2025-01-31"))
    assert [m.id for m in res] == [1, 2]
    # fecha vacía cuenta como "" y queda antes de cualquier fecha
    assert 3 in [m.id for m in filtrar(MOVS, Filtro(fecha_hasta="2025-01-01"))]


def test_filtro_por_importe_con_formato_local():
    res = filtrar(MOVS, Filtro(importe_min="-100", importe_max="1.000,00"))
    assert [m.id for m in res] == [3, 4]


def test_ordenar():
    assert [m.id for m in ordenar(MOVS, "amount", "asc")] == [2, 4, 3, 1]
    assert [m.id for m in ordenar(MOVS, "date", "desc")] == [4, 1, 2, 3]
    assert [m.id for m in ordenar(MOVS, "account", "asc")] == [4, 3, 1, 2]


def test_ordenar_clave_invalida():
    with pytest.raises(ValueError):
        ordenar(MOVS, "id")


def test_paginar_ajusta_la_pagina():
    p = paginar(MOVS, pagina=9, tamano=3)
    assert (p.pagina, p.total_paginas, p.total) == (2, 2, 4)
    assert [m.id for m in p.items] == [4]
    vacia = paginar([], pagina=0, tamano=0)
    assert (vacia.pagina, vacia.total_paginas, vacia.items) == (1, 1, [])


def test_resumen():
    r = resumen(MOVS)
    assert r.creditos == pytest.approx(1512.35)
    assert r.debitos == pytest.approx(800.0)
    assert r.saldo == pytest.approx(712.35)
    assert r.porcentaje_conciliado == 50
    assert resumen([]).porcentaje_conciliado == 0


def test_cuentas():
    assert cuentas(MOVS) == ["Ahorro", "CC 001"]


def test_a_dataframe():
    df = a_dataframe(MOVS)
    assert list(df.columns) == ["id", *CAMPOS]
    assert df["amount"].sum() == pytest.approx(712.35)
    assert list(a_dataframe([]).columns) == ["id", *CAMPOS]

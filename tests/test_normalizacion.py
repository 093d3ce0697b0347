from logic.modelos import Movimiento
from logic.normalizacion import (
    ReglasNormalizacion,
    mapear_estado,
    normalizar_movimiento,
    normalizar_movimientos,
)


SUCIOS = [
    Movimiento(id=1, date="25/12/2020", account="  Cuenta 1 ", description=" Pago ",
               document=" NF-1 ", type=" credit ", amount=10.0, status=" ok ", notes=" x "),
    Movimiento(id=2, date="fecha mala", account="Cuenta 1", type="???", amount=-3.0, status="ERRO"),
    Movimiento(id=3, date="2021-01-02", account="Cuenta 2", type="DEBIT", amount=-5.0, status="raro"),
    Movimiento(id=4, date="12/31/2020", type="debit", amount=7.0, status="em andamento"),
]


def test_normaliza_todos_los_campos():
    m = normalizar_movimiento(SUCIOS[0])
    assert m == Movimiento(id=1, date="2020-12-25", account="Cuenta 1", description="Pago",
                           document="NF-1", type="CREDIT", amount=10.0, status="RECONCILED", notes="x")


def test_tipo_invalido_se_infiere_por_signo():
    assert normalizar_movimiento(SUCIOS[1]).type == "DEBIT"
    assert normalizar_movimiento(SUCIOS[3]).type == "DEBIT"


def test_estados():
    assert mapear_estado("ERRO") == "DIVERGENT"
    assert mapear_estado("em andamento") == "IN_PROGRESS"
    assert mapear_estado("Match") == "RECONCILED"
    assert mapear_estado("DIVERGENT") == "DIVERGENT"
    assert mapear_estado("raro") == "PENDING"
    assert mapear_estado("") == "PENDING"


def test_fecha_invalida_queda_vacia():
    assert normalizar_movimiento(SUCIOS[1]).date == ""


def test_reglas_desactivadas():
    reglas = ReglasNormalizacion(recortar=False, tipo_mayusculas=False, mapear_estados=False, corregir_fechas=False)
    m = normalizar_movimiento(SUCIOS[0], reglas)
    assert m == SUCIOS[0]


def test_solo_recortar():
    reglas = ReglasNormalizacion(tipo_mayusculas=False, mapear_estados=False, corregir_fechas=False)
    m = normalizar_movimiento(SUCIOS[0], reglas)
    assert m.type == "credit"
    assert m.status == "ok"
    assert m.date == "25/12/2020"


def test_idempotencia():
    una = normalizar_movimientos(SUCIOS)
    dos = normalizar_movimientos(una.movimientos)
    assert dos.movimientos == una.movimientos
    assert dos.modificados == []


def test_informa_solo_los_modificados():
    limpio = Movimiento(id=9, date="2021-01-01", account="A", type="CREDIT", amount=1.0, status="PENDING")
    res = normalizar_movimientos([limpio, SUCIOS[0]])
    assert [m.id for m in res.modificados] == [1]
    assert len(res.movimientos) == 2

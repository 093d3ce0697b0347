import sqlite3

import pytest

from infra.almacen import Almacen
from logic.errores import ErrorAlmacen
from logic.modelos import Movimiento


@pytest.fixture
def almacen():
    with Almacen(":memory:") as a:
        yield a


def test_agregar_asigna_id(almacen):
    m = almacen.agregar(Movimiento(id=99, account="A", amount=10.0))
    assert m.id is not None and m.id != 99
    assert almacen.obtener_todos() == [m]


def test_agregar_varios_y_orden(almacen):
    n = almacen.agregar_varios([Movimiento(account="A"), Movimiento(account="B"), Movimiento(account="C")])
    assert n == 3
    todos = almacen.obtener_todos()
    assert [m.account for m in todos] == ["A", "B", "C"]
    assert [m.id for m in todos] == sorted(m.id for m in todos)


def test_actualizar_es_upsert(almacen):
    m = almacen.agregar(Movimiento(account="A", status="PENDING"))
    almacen.actualizar(Movimiento(id=m.id, account="A", status="RECONCILED"))
    almacen.actualizar(Movimiento(id=500, account="Z"))
    todos = almacen.obtener_todos()
    assert [(x.id, x.status) for x in todos] == [(m.id, "RECONCILED"), (500, "PENDING")]


def test_actualizar_sin_id_falla(almacen):
    with pytest.raises(ErrorAlmacen):
        almacen.actualizar(Movimiento(account="A"))


def test_eliminar_y_limpiar(almacen):
    a = almacen.agregar(Movimiento(account="A"))
    almacen.agregar(Movimiento(account="B"))
    almacen.eliminar(a.id)
    almacen.eliminar(12345)  # inexistente: no hace nada
    assert [m.account for m in almacen.obtener_todos()] == ["B"]
    almacen.limpiar()
    assert almacen.obtener_todos() == []


def test_reemplazar_todos(almacen):
    almacen.agregar_varios([Movimiento(account="viejo")])
    almacen.reemplazar_todos([Movimiento(account="N1"), Movimiento(account="N2")])
    assert [m.account for m in almacen.obtener_todos()] == ["N1", "N2"]


def test_agregar_varios_es_atomico(almacen):
    almacen.agregar(Movimiento(account="A"))
    almacen.conn.execute(
        "CREATE TRIGGER falla BEFORE INSERT ON movimientos WHEN NEW.account = 'malo' "
        "BEGIN SELECT RAISE(ABORT, 'rechazado'); END"
    )
    with pytest.raises(ErrorAlmacen) as exc:
        almacen.agregar_varios([Movimiento(account="ok"), Movimiento(account="malo")])
    assert isinstance(exc.value.__cause__, sqlite3.Error)
    assert [m.account for m in almacen.obtener_todos()] == ["A"]


def test_sin_abrir_falla():
    with pytest.raises(ErrorAlmacen):
        Almacen(":memory:").obtener_todos()


def test_persistencia_en_archivo(tmp_path):
    ruta = tmp_path / "base.db"
    with Almacen(ruta) as a:
        a.agregar(Movimiento(date="2025-01-01", account="A", amount=-3.5, type="DEBIT"))
    with Almacen(ruta) as b:
        (m,) = b.obtener_todos()
    assert (m.date, m.account, m.amount, m.type) == ("2025-01-01", "A", -3.5, "DEBIT")

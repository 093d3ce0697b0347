from logic.modelos import Movimiento, inferir_tipo, validar_estado


def test_desde_dict_aplica_invariantes():
    m = Movimiento.desde_dict({
        "id": 7, "date": "05/01/2025", "account": "CC", "type": "xx",
        "amount": "-1.500,00", "status": "whatever", "notes": None,
    })
    assert m == Movimiento(id=7, date="2025-01-05", account="CC", type="DEBIT",
                           amount=-1500.0, status="PENDING", notes="")


def test_desde_dict_vacio_usa_valores_por_defecto():
    m = Movimiento.desde_dict({})
    assert m == Movimiento()
    assert m.type == "CREDIT" and m.status == "PENDING" and m.amount == 0


def test_desde_respaldo_descarta_id_y_aplica_invariantes():
    m = Movimiento.desde_respaldo({"id": 3, "type": "x", "status": "ok", "date": "25/12/2020", "amount": -3})
    assert m == Movimiento(date="2020-12-25", type="DEBIT", amount=-3.0, status="PENDING")
    assert m.id is None


def test_inferir_tipo_y_estado():
    assert inferir_tipo("debit", 10) == "DEBIT"
    assert inferir_tipo("", 0) == "CREDIT"
    assert inferir_tipo(None, -0.01) == "DEBIT"
    assert validar_estado("reconciled") == "RECONCILED"
    assert validar_estado(None) == "PENDING"


def test_a_dict_sin_id():
    d = Movimiento(id=1, account="A").a_dict(incluir_id=False)
    assert "id" not in d
    assert d["account"] == "A"

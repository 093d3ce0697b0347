from pathlib import Path

import pytest

from infra.config import load_config


RAIZ = Path(__file__).resolve().parents[1]


def test_config_del_repo():
    cfg = load_config(RAIZ / "config.yaml")
    assert cfg.almacen.ruta.endswith(".db")
    assert cfg.consulta.tamano_pagina in cfg.consulta.tamanos_pagina
    assert cfg.consulta.orden_direccion in ("asc", "desc")
    assert cfg.normalizacion.recortar is True


def test_config_incompleta(tmp_path):
    ruta = tmp_path / "config.yaml"
    ruta.write_text("app:\n  title: x\n  page_layout: wide\n  fecha_vista_formato: DD/MM/YYYY\n", encoding="utf-8")
    with pytest.raises(KeyError):
        load_config(ruta)

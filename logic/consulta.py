"""Consultas sobre la copia en memoria de los movimientos.

Todas las funciones son puras: reciben la lista explícita y devuelven una
nueva, sin tocar el almacén.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Literal

import pandas as pd

from logic.lectura import parsear_importe
from logic.modelos import CAMPOS, Movimiento


Direccion = Literal["asc", "desc"]


@dataclass(frozen=True)
class Filtro:
    texto: str = ""
    estado: str = ""
    tipo: str = ""
    cuenta: str = ""
    fecha_desde: str = ""
    fecha_hasta: str = ""
    importe_min: str = ""    # texto crudo, se interpreta con parsear_importe
    importe_max: str = ""


@dataclass(frozen=True)
class Pagina:
    items: list[Movimiento]
    pagina: int
    total_paginas: int
    total: int


@dataclass(frozen=True)
class Resumen:
    creditos: float
    debitos: float
    saldo: float
    porcentaje_conciliado: int


def filtrar(movs: Iterable[Movimiento], filtro: Filtro) -> list[Movimiento]:
    q = filtro.texto.strip().lower()
    vmin = parsear_importe(filtro.importe_min) if filtro.importe_min else None
    vmax = parsear_importe(filtro.importe_max) if filtro.importe_max else None

    def ok(m: Movimiento) -> bool:
        if q and q not in " ".join((m.description, m.document, m.account)).lower():
            return False
        if filtro.estado and m.status != filtro.estado:
            return False
        if filtro.tipo and m.type != filtro.tipo:
            return False
        if filtro.cuenta and m.account != filtro.cuenta:
            return False
        if filtro.fecha_desde and (m.date or "") < filtro.fecha_desde:
            return False
        if filtro.fecha_hasta and (m.date or "") > filtro.fecha_hasta:
            return False
        if vmin is not None and m.amount < vmin:
            return False
        if vmax is not None and m.amount > vmax:
            return False
        return True

    return [m for m in movs if ok(m)]


def ordenar(movs: Iterable[Movimiento], clave: str = "date", direccion: Direccion = "desc") -> list[Movimiento]:
    """Orden estable por un campo; ``amount`` se compara como número."""
    if clave not in CAMPOS:
        raise ValueError(f"Campo de orden desconocido: {clave}")
    def key(m: Movimiento):
        if clave == "amount":
            return m.amount
        return getattr(m, clave) or ""

    return sorted(movs, key=key, reverse=(direccion == "desc"))


def paginar(movs: list[Movimiento], pagina: int = 1, tamano: int = 25) -> Pagina:
    if tamano < 1:
        tamano = 25
    total = len(movs)
    total_paginas = max(1, math.ceil(total / tamano))
    pagina = min(max(1, pagina), total_paginas)
    inicio = (pagina - 1) * tamano
    return Pagina(items=movs[inicio:inicio + tamano], pagina=pagina,
                  total_paginas=total_paginas, total=total)


def resumen(movs: Iterable[Movimiento]) -> Resumen:
    """KPIs: créditos, débitos (en valor absoluto), saldo y % conciliado."""
    lista = list(movs)
    creditos = sum(m.amount for m in lista if m.type == "CREDIT")
    debitos = sum(abs(m.amount) for m in lista if m.type == "DEBIT")
    conciliados = sum(1 for m in lista if m.status == "RECONCILED")
    porcentaje = round(conciliados * 100 / len(lista)) if lista else 0
    return Resumen(
        creditos=round(creditos, 2),
        debitos=round(debitos, 2),
        saldo=round(creditos - debitos, 2),
        porcentaje_conciliado=porcentaje,
    )


def cuentas(movs: Iterable[Movimiento]) -> list[str]:
    return sorted({m.account for m in movs if m.account})


def a_dataframe(movs: Iterable[Movimiento]) -> pd.DataFrame:
    columnas = ["id", *CAMPOS]
    return pd.DataFrame([m.a_dict() for m in movs], columns=columnas)

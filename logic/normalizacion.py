from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable

from logic.lectura import a_fecha_iso, parsear_importe
from logic.modelos import ESTADOS, Movimiento, inferir_tipo


@dataclass(frozen=True)
class ReglasNormalizacion:
    recortar: bool = True
    tipo_mayusculas: bool = True
    mapear_estados: bool = True
    corregir_fechas: bool = True


SINONIMOS_ESTADO: dict[str, str] = {
    "PENDING": "PENDING", "PEND": "PENDING", "PENDENTE": "PENDING", "PENDIENTE": "PENDING",
    "IN_PROGRESS": "IN_PROGRESS", "IN PROGRESS": "IN_PROGRESS", "EM ANDAMENTO": "IN_PROGRESS",
    "ANDAMENTO": "IN_PROGRESS", "ABERTO": "IN_PROGRESS", "EN CURSO": "IN_PROGRESS",
    "RECONCILED": "RECONCILED", "CONCILIADO": "RECONCILED", "CONC": "RECONCILED",
    "OK": "RECONCILED", "MATCH": "RECONCILED",
    "DIVERGENT": "DIVERGENT", "DIVERGÊNCIA": "DIVERGENT", "DIVERGENCIA": "DIVERGENT",
    "ERRO": "DIVERGENT", "ERROR": "DIVERGENT", "ALERTA": "DIVERGENT",
}

_RECORTABLES = ("account", "description", "document", "notes", "status", "type")


@dataclass(frozen=True)
class ResultadoNormalizacion:
    movimientos: list[Movimiento]
    modificados: list[Movimiento]


def mapear_estado(estado: str) -> str:
    s = (estado or "").upper()
    return SINONIMOS_ESTADO.get(s) or (s if s in ESTADOS else "PENDING")


def normalizar_movimiento(mov: Movimiento, reglas: ReglasNormalizacion = ReglasNormalizacion()) -> Movimiento:
    """Aplica las reglas activas a un movimiento y devuelve uno nuevo."""
    cambios: dict[str, object] = {}
    if reglas.recortar:
        cambios.update({k: getattr(mov, k).strip() for k in _RECORTABLES})

    amount = parsear_importe(mov.amount)
    if reglas.tipo_mayusculas:
        cambios["type"] = inferir_tipo(cambios.get("type", mov.type), amount)
    if reglas.mapear_estados:
        cambios["status"] = mapear_estado(cambios.get("status", mov.status))
    if reglas.corregir_fechas:
        cambios["date"] = a_fecha_iso(mov.date)
    # El importe se fuerza siempre
    cambios["amount"] = amount
    return replace(mov, **cambios)


def normalizar_movimientos(
    movs: Iterable[Movimiento],
    reglas: ReglasNormalizacion = ReglasNormalizacion(),
) -> ResultadoNormalizacion:
    """Normaliza toda la colección. Es idempotente: aplicarla dos veces no cambia nada más."""
    todos: list[Movimiento] = []
    modificados: list[Movimiento] = []
    for m in movs:
        nuevo = normalizar_movimiento(m, reglas)
        todos.append(nuevo)
        if nuevo != m:
            modificados.append(nuevo)
    return ResultadoNormalizacion(movimientos=todos, modificados=modificados)

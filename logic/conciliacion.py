from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass, field, replace
from typing import Iterable

from logic.modelos import Movimiento


@dataclass
class GrupoConciliacion:
    """Movimientos no conciliados de una misma cuenta y mismo importe absoluto."""
    cuenta: str
    importe: str                      # |amount| con 2 decimales
    creditos: list[Movimiento] = field(default_factory=list)
    debitos: list[Movimiento] = field(default_factory=list)

    @property
    def pares(self) -> int:
        return min(len(self.creditos), len(self.debitos))


@dataclass
class ResultadoConciliacion:
    grupos: list[GrupoConciliacion]
    actualizados: list[Movimiento]

    @property
    def marcados(self) -> int:
        return len(self.actualizados)


def _key_base(m: Movimiento) -> tuple[str, str]:
    """Clave de agrupamiento: cuenta + importe absoluto redondeado."""
    return (m.account, f"{abs(m.amount):.2f}")


def agrupar(movs: Iterable[Movimiento]) -> list[GrupoConciliacion]:
    """Agrupa por (cuenta, |importe|) los movimientos que aún no están conciliados.

    Los ya RECONCILED no participan; los de tipo desconocido tampoco.
    """
    grupos: dict[tuple[str, str], GrupoConciliacion] = {}
    for m in movs:
        if m.status == "RECONCILED":
            continue
        key = _key_base(m)
        if key not in grupos:
            grupos[key] = GrupoConciliacion(cuenta=key[0], importe=key[1])
        if m.type == "CREDIT":
            grupos[key].creditos.append(m)
        elif m.type == "DEBIT":
            grupos[key].debitos.append(m)
    return list(grupos.values())


def sugerir_conciliaciones(movs: Iterable[Movimiento]) -> ResultadoConciliacion:
    """Empareja créditos y débitos de igual cuenta e importe absoluto.

    Dentro de cada grupo el i-ésimo crédito va con el i-ésimo débito; los
    sobrantes quedan como estaban. Es una heurística greedy que depende del
    orden: no mira fechas, descripciones ni combinaciones de varios
    movimientos, así que puede dejar sin marcar pares reales.
    """
    grupos = agrupar(movs)
    actualizados: list[Movimiento] = []
    for g in grupos:
        for c, d in zip(g.creditos, g.debitos):
            actualizados.append(replace(c, status="RECONCILED"))
            actualizados.append(replace(d, status="RECONCILED"))
    return ResultadoConciliacion(grupos=grupos, actualizados=actualizados)


def conteo_por_cuenta(resultado: ResultadoConciliacion) -> dict[str, int]:
    """Cantidad de movimientos marcados por cuenta (para el resumen de la UI)."""
    out: dict[str, int] = defaultdict(int)
    for g in resultado.grupos:
        if g.pares:
            out[g.cuenta] += 2 * g.pares
    return dict(out)

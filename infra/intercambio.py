from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Mapping

from infra.csv_codec import a_csv, parsear_csv
from logic.errores import ErrorValidacion
from logic.lectura import importe_a_texto
from logic.modelos import CAMPOS, Movimiento


@dataclass(frozen=True)
class TablaCSV:
    encabezados: list[str]
    filas: list[list[str]]


@dataclass(frozen=True)
class ContenidoJSON:
    items: list[Movimiento]
    reemplazar: bool     # True = respaldo completo (restaurar), False = agregar


# ==========================================================
# CSV
# ==========================================================

def _fila_export(m: Movimiento) -> list[str]:
    return [
        m.date, m.account, m.description, m.document, m.type,
        importe_a_texto(m.amount), m.status, m.notes or "",
    ]


def exportar_csv(movs: Iterable[Movimiento], separador: str = ",") -> str:
    """CSV con encabezado fijo e importes con 2 decimales."""
    filas: list[list[str]] = [list(CAMPOS)]
    filas.extend(_fila_export(m) for m in movs)
    return a_csv(filas, separador)


def plantilla_csv(separador: str = ",") -> str:
    """Archivo modelo para completar a mano e importar."""
    filas = [
        list(CAMPOS),
        ["2025-01-05", "Cuenta Corriente 001", "Cobro Cliente A", "FC-123", "CREDIT", "1500,00", "PENDING", ""],
        ["2025-01-05", "Cuenta Corriente 001", "Pago Proveedor Z", "OP-998", "DEBIT", "-750,00", "PENDING", ""],
        ["2025-01-06", "Caja de Ahorro", "Intereses mensuales", "", "CREDIT", "12,35", "RECONCILED", "Automático"],
    ]
    return a_csv(filas, separador)


def leer_csv(texto: str, separador: str = ",") -> TablaCSV:
    filas = parsear_csv(texto, separador)
    if not filas:
        raise ErrorValidacion("CSV vacío.")
    return TablaCSV(encabezados=[h.strip() for h in filas[0]], filas=filas[1:])


def importar_csv(tabla: TablaCSV, mapeo: Mapping[str, str | None]) -> list[Movimiento]:
    """Convierte las filas del CSV en movimientos según el mapeo campo -> columna.

    Los campos sin columna (o con celda faltante) quedan vacíos y se completan
    con las reglas del modelo. Ningún movimiento sale con id.
    """
    indices: dict[str, int] = {}
    for campo, col in mapeo.items():
        if campo in CAMPOS and col and col in tabla.encabezados:
            indices[campo] = tabla.encabezados.index(col)

    out: list[Movimiento] = []
    for fila in tabla.filas:
        datos = {campo: (fila[idx] if idx < len(fila) else "") for campo, idx in indices.items()}
        out.append(Movimiento.desde_dict(datos))
    return out


# ==========================================================
# JSON
# ==========================================================
def exportar_json(movs: Iterable[Movimiento], ahora: datetime | None = None) -> str:
    """Respaldo completo: ``{"exportedAt": ..., "items": [...]}``."""
    ahora = ahora or datetime.now(timezone.utc)
    dump = {
        "exportedAt": ahora.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "items": [m.a_dict() for m in movs],
    }
    return json.dumps(dump, indent=2, ensure_ascii=False)


def leer_json(texto: str) -> ContenidoJSON:
    """Interpreta un JSON de respaldo o de importación parcial.

    - ``{"exportedAt": ..., "items": [...]}``: respaldo completo, reemplaza la base
    - ``{"items": [...]}`` sin ``exportedAt`` o una lista: se agrega a lo existente
    """
    try:
        data = json.loads(texto)
    except json.JSONDecodeError as e:
        raise ErrorValidacion(f"JSON inválido: {e}") from e

    if isinstance(data, list):
        items, reemplazar = data, False
    elif isinstance(data, dict) and isinstance(data.get("items"), list):
        items, reemplazar = data["items"], "exportedAt" in data
    else:
        raise ErrorValidacion("Archivo inválido: JSON sin array de items.")

    if not all(isinstance(it, dict) for it in items):
        raise ErrorValidacion("Archivo inválido: cada item debe ser un objeto.")
    return ContenidoJSON(items=[Movimiento.desde_respaldo(it) for it in items], reemplazar=reemplazar)

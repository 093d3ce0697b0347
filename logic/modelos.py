from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping

from logic.lectura import a_fecha_iso, parsear_importe


Tipo = Literal["CREDIT", "DEBIT"]
Estado = Literal["PENDING", "IN_PROGRESS", "RECONCILED", "DIVERGENT"]

TIPOS: tuple[str, ...] = ("CREDIT", "DEBIT")
ESTADOS: tuple[str, ...] = ("PENDING", "IN_PROGRESS", "RECONCILED", "DIVERGENT")

# Orden fijo de columnas para CSV / respaldo
CAMPOS: tuple[str, ...] = (
    "date", "account", "description", "document", "type", "amount", "status", "notes",
)


def _texto(valor: Any) -> str:
    if valor is None:
        return ""
    return valor if isinstance(valor, str) else str(valor)


def inferir_tipo(tipo: Any, amount: float) -> str:
    """Tipo en mayúsculas si es válido; si no, se infiere por el signo del importe."""
    t = _texto(tipo).upper()
    if t in TIPOS:
        return t
    return "CREDIT" if amount >= 0 else "DEBIT"


def validar_estado(estado: Any) -> str:
    e = _texto(estado).upper() or "PENDING"
    return e if e in ESTADOS else "PENDING"


@dataclass(frozen=True)
class Movimiento:
    date: str = ""           # ISO YYYY-MM-DD o vacío
    account: str = ""
    description: str = ""
    document: str = ""
    type: str = "CREDIT"     # CREDIT / DEBIT
    amount: float = 0.0      # con signo, sin moneda
    status: str = "PENDING"
    notes: str = ""
    id: int | None = None    # lo asigna el almacén

    @classmethod
    def desde_dict(cls, datos: Mapping[str, Any]) -> "Movimiento":
        """Construye un movimiento aplicando todas las invariantes del modelo.

        Se usa al agregar, editar e importar CSV. Conserva el ``id`` si viene.
        """
        amount = parsear_importe(datos.get("amount"))
        return cls(
            date=a_fecha_iso(datos.get("date")),
            account=_texto(datos.get("account")),
            description=_texto(datos.get("description")),
            document=_texto(datos.get("document")),
            type=inferir_tipo(datos.get("type"), amount),
            amount=amount,
            status=validar_estado(datos.get("status")),
            notes=_texto(datos.get("notes")),
            id=datos.get("id"),
        )

    @classmethod
    def desde_respaldo(cls, datos: Mapping[str, Any]) -> "Movimiento":
        """Para importar JSON: mismas invariantes que ``desde_dict``, sin ``id``."""
        return cls.desde_dict({k: datos.get(k) for k in CAMPOS})

    def a_dict(self, incluir_id: bool = True) -> dict[str, Any]:
        out = {f.name: getattr(self, f.name) for f in fields(self)}
        if not incluir_id:
            out.pop("id")
        return out

from __future__ import annotations

import math
import re
import unicodedata
from datetime import date, datetime
from numbers import Real
from typing import Any, Iterable

import pandas as pd


_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DMY = re.compile(r"^(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})$")


def parsear_importe(valor: Any) -> float:
    """Convierte un importe con formato local ("1.234,56") a float.

    Convención: punto = miles, coma = decimal. Nunca lanza; lo que no se
    puede interpretar vale 0.
    """
    if isinstance(valor, bool):
        return 0.0
    if isinstance(valor, Real):
        numero = float(valor)
        return numero if math.isfinite(numero) else 0.0
    if not valor:
        return 0.0
    s = str(valor).replace(".", "").replace(",", ".", 1)
    s = re.sub(r"[^0-9.\-]", "", s)
    try:
        numero = float(s)
    except ValueError:
        return 0.0
    return numero if math.isfinite(numero) else 0.0


def importe_a_texto(amount: float) -> str:
    """Dos decimales con coma decimal ("1500,00"); parsear_importe lo lee igual."""
    return f"{amount:.2f}".replace(".", ",")


def _componer(anio: str, mes: str, dia: str) -> str:
    try:
        return date(int(anio), int(mes), int(dia)).isoformat()
    except ValueError:
        return ""


def a_fecha_iso(valor: Any) -> str:
    """Normaliza una fecha a ``YYYY-MM-DD``; devuelve "" si no es una fecha.

    - ``YYYY-MM-DD`` se devuelve sin cambios
    - ``a/b/aaaa`` (también con ``.`` o ``-``): si a > 12 es día/mes, si b > 12
      es mes/día, y si ambos son <= 12 se asume día/mes
    - cualquier otra cosa pasa por ``pd.to_datetime``
    """
    if isinstance(valor, datetime):
        return valor.date().isoformat()
    if isinstance(valor, date):
        return valor.isoformat()
    if valor is None or valor == "":
        return ""
    s = str(valor)
    if _ISO.match(s):
        return s

    m = _DMY.match(s)
    if m:
        a, b, anio = m.groups()
        if int(a) > 12:
            return _componer(anio, b, a)
        if int(b) > 12:
            return _componer(anio, a, b)
        return _componer(anio, b, a)

    try:
        ts = pd.to_datetime(s, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return ""
    if pd.isna(ts):
        return ""
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.strftime("%Y-%m-%d")


def _sanitize_header(value: str) -> str:
    lowered = str(value).strip().lower()
    normalized = unicodedata.normalize("NFKD", lowered)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


# Palabras clave por campo (pt / es / en), ya sin tildes
_PALABRAS_CAMPO: dict[str, list[str]] = {
    "date": ["data", "fecha", "date"],
    "account": ["conta", "cuenta", "account", "banco"],
    "description": ["descri", "historico", "concepto", "detalle", "memo"],
    "document": ["documento", "document", "comprobante", "nro", "doc", "ref"],
    "type": ["tipo", "type", "natureza"],
    "amount": ["valor", "importe", "monto", "amount", "value"],
    "status": ["status", "estado", "situacao", "situacion"],
    "notes": ["observ", "obs", "notas", "notes", "nota", "coment"],
}


def detectar_columnas(encabezados: Iterable[str]) -> dict[str, str | None]:
    """Sugiere un mapeo campo -> columna a partir de los encabezados del CSV.

    Cada columna se asigna como máximo a un campo; los campos sin
    coincidencia quedan en ``None``.
    """
    cols = list(encabezados)
    sanitized = [_sanitize_header(c) for c in cols]
    usados: set[int] = set()

    def pick(keywords: list[str]) -> str | None:
        # Primero coincidencia exacta, luego por contenido
        for exacto in (True, False):
            for kw in keywords:
                for idx, clean in enumerate(sanitized):
                    if idx in usados:
                        continue
                    if (clean == kw) if exacto else (kw in clean):
                        usados.add(idx)
                        return cols[idx]
        return None

    return {campo: pick(palabras) for campo, palabras in _PALABRAS_CAMPO.items()}

from __future__ import annotations
from typing import Any, Iterable, Sequence


def parsear_csv(texto: str, separador: str = ",") -> list[list[str]]:
    """Parsea texto delimitado respetando comillas y saltos de línea dentro de campos.

    - Dentro de comillas, ``""`` es una comilla literal; cualquier otra comilla cierra
    - Fuera de comillas: el separador corta campo, ``\\n`` corta fila, ``\\r`` se ignora
    - La última fila se emite aunque no termine en salto de línea
    No convierte tipos: todos los campos son ``str``.
    """
    filas: list[list[str]] = []
    fila: list[str] = []
    campo: list[str] = []
    en_comillas = False
    fila_abierta = False  # se leyó algo de la fila actual

    i, n = 0, len(texto)
    while i < n:
        c = texto[i]
        if en_comillas:
            if c == '"':
                if i + 1 < n and texto[i + 1] == '"':
                    campo.append('"')
                    i += 1
                else:
                    en_comillas = False
            else:
                campo.append(c)
        elif c == '"':
            en_comillas = True
            fila_abierta = True
        elif c == separador:
            fila.append("".join(campo))
            campo = []
            fila_abierta = True
        elif c == "\n":
            fila.append("".join(campo))
            filas.append(fila)
            fila, campo = [], []
            fila_abierta = False
        elif c == "\r":
            pass
        else:
            campo.append(c)
            fila_abierta = True
        i += 1

    if fila_abierta or campo or fila:
        fila.append("".join(campo))
        filas.append(fila)
    return filas


def _escapar(valor: Any, separador: str) -> str:
    if valor is None:
        return ""
    v = str(valor)
    if any(ch in v for ch in (separador, '"', ",", ";", "\n", "\r")):
        v = '"' + v.replace('"', '""') + '"'
    return v


def a_csv(filas: Iterable[Sequence[Any]], separador: str = ",") -> str:
    """Inverso de :func:`parsear_csv`. Filas unidas con ``\\n``, sin salto final."""
    lineas = []
    for fila in filas:
        celdas = [_escapar(v, separador) for v in fila]
        # Una fila de un único campo vacío se escribe "" para no perderla
        if celdas == [""]:
            celdas = ['""']
        lineas.append(separador.join(celdas))
    return "\n".join(lineas)

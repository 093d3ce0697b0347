from __future__ import annotations


class ErrorValidacion(ValueError):
    """El archivo no tiene la estructura esperada (CSV vacío, JSON sin items, ...)."""


class ErrorAlmacen(RuntimeError):
    """Una operación de persistencia fue rechazada por el almacén."""

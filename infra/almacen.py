"""
Almacén local de movimientos (SQLite).

Una única tabla ``movimientos`` con el layout persistido:

    id           INTEGER PRIMARY KEY AUTOINCREMENT  -- lo asigna el almacén
    date         TEXT     -- ISO "YYYY-MM-DD" o vacío
    account      TEXT
    description  TEXT
    document     TEXT
    type         TEXT     -- CREDIT / DEBIT
    amount       REAL
    status       TEXT     -- PENDING / IN_PROGRESS / RECONCILED / DIVERGENT
    notes        TEXT

Operaciones: abrir, agregar, agregar_varios (atómica), obtener_todos,
actualizar (upsert por id), eliminar, limpiar y reemplazar_todos (atómica).
Cualquier ``sqlite3.Error`` se re-lanza como ``ErrorAlmacen``.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable

from infra.logger import get_logger
from logic.errores import ErrorAlmacen
from logic.modelos import CAMPOS, Movimiento


_COLUMNAS = ", ".join(CAMPOS)
_MARCAS = ", ".join("?" for _ in CAMPOS)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS movimientos (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    date        TEXT NOT NULL DEFAULT '',
    account     TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    document    TEXT NOT NULL DEFAULT '',
    type        TEXT NOT NULL DEFAULT 'CREDIT',
    amount      REAL NOT NULL DEFAULT 0,
    status      TEXT NOT NULL DEFAULT 'PENDING',
    notes       TEXT NOT NULL DEFAULT ''
);
"""

logger = get_logger()


def _valores(m: Movimiento) -> tuple:
    return tuple(getattr(m, c) for c in CAMPOS)


def _fila_a_movimiento(row: sqlite3.Row) -> Movimiento:
    return Movimiento(id=row["id"], **{c: row[c] for c in CAMPOS})


class Almacen:
    """Colaborador de persistencia. ``ruta`` puede ser ``":memory:"``."""

    def __init__(self, ruta: str | Path):
        self.ruta = str(ruta)
        self._conn: sqlite3.Connection | None = None

    # ------------------------------------------------------------------
    # Conexión
    # ------------------------------------------------------------------
    def abrir(self) -> "Almacen":
        if self._conn is not None:
            return self
        try:
            # Streamlit puede atender cada rerun en otro hilo
            conn = sqlite3.connect(self.ruta, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute(_SCHEMA)
            conn.commit()
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudo abrir la base {self.ruta}: {e}") from e
        self._conn = conn
        logger.debug("Almacén abierto en %s", self.ruta)
        return self

    def cerrar(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Almacen":
        return self.abrir()

    def __exit__(self, *exc) -> None:
        self.cerrar()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ErrorAlmacen("El almacén no está abierto")
        return self._conn

    # ------------------------------------------------------------------
    # Operaciones
    # ------------------------------------------------------------------
    def agregar(self, mov: Movimiento) -> Movimiento:
        """Inserta ignorando el id recibido y devuelve el registro con su id nuevo."""
        try:
            with self.conn:
                cur = self.conn.execute(
                    f"INSERT INTO movimientos ({_COLUMNAS}) VALUES ({_MARCAS})",
                    _valores(mov),
                )
            row = self.conn.execute(
                "SELECT * FROM movimientos WHERE id = ?", (cur.lastrowid,)
            ).fetchone()
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudo agregar el movimiento: {e}") from e
        return _fila_a_movimiento(row)

    def agregar_varios(self, movs: Iterable[Movimiento]) -> int:
        """Alta masiva en una sola transacción: o entran todos o ninguno."""
        filas = [_valores(m) for m in movs]
        try:
            with self.conn:
                self.conn.executemany(
                    f"INSERT INTO movimientos ({_COLUMNAS}) VALUES ({_MARCAS})", filas
                )
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudieron agregar {len(filas)} movimientos: {e}") from e
        return len(filas)

    def obtener_todos(self) -> list[Movimiento]:
        try:
            rows = self.conn.execute("SELECT * FROM movimientos ORDER BY id").fetchall()
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudieron leer los movimientos: {e}") from e
        return [_fila_a_movimiento(r) for r in rows]

    def actualizar(self, mov: Movimiento) -> None:
        """Upsert por id."""
        if mov.id is None:
            raise ErrorAlmacen("No se puede actualizar un movimiento sin id")
        asignaciones = ", ".join(f"{c} = excluded.{c}" for c in CAMPOS)
        try:
            with self.conn:
                self.conn.execute(
                    f"INSERT INTO movimientos (id, {_COLUMNAS}) VALUES (?, {_MARCAS}) "
                    f"ON CONFLICT(id) DO UPDATE SET {asignaciones}",
                    (mov.id, *_valores(mov)),
                )
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudo actualizar el movimiento {mov.id}: {e}") from e

    def eliminar(self, id_: int) -> None:
        try:
            with self.conn:
                self.conn.execute("DELETE FROM movimientos WHERE id = ?", (id_,))
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudo eliminar el movimiento {id_}: {e}") from e

    def limpiar(self) -> None:
        try:
            with self.conn:
                self.conn.execute("DELETE FROM movimientos")
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudo vaciar la base: {e}") from e

    def reemplazar_todos(self, movs: Iterable[Movimiento]) -> int:
        """Vacía la tabla y carga ``movs`` en la misma transacción (restauración)."""
        filas = [_valores(m) for m in movs]
        try:
            with self.conn:
                self.conn.execute("DELETE FROM movimientos")
                self.conn.executemany(
                    f"INSERT INTO movimientos ({_COLUMNAS}) VALUES ({_MARCAS})", filas
                )
        except sqlite3.Error as e:
            raise ErrorAlmacen(f"No se pudo restaurar la base: {e}") from e
        return len(filas)

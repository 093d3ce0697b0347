from __future__ import annotations
from dataclasses import replace
from datetime import date
from typing import Callable, Mapping, TypeVar

from infra.almacen import Almacen
from infra.intercambio import ContenidoJSON, TablaCSV, importar_csv, leer_json
from infra.logger import get_logger
from logic.conciliacion import ResultadoConciliacion, sugerir_conciliaciones
from logic.consulta import Direccion, Filtro, filtrar, ordenar
from logic.errores import ErrorAlmacen
from logic.modelos import Movimiento
from logic.normalizacion import ReglasNormalizacion, normalizar_movimientos


logger = get_logger()

T = TypeVar("T")


class Libro:
    """Sesión de trabajo: copia en memoria de los movimientos + almacén.

    ``movimientos`` refleja siempre lo persistido. Cada acción escribe en el
    almacén y, si la escritura falla, recarga la copia desde el almacén antes
    de propagar el ``ErrorAlmacen`` (así no quedan cambios optimistas).
    """

    def __init__(self, almacen: Almacen):
        self.almacen = almacen
        self.movimientos: list[Movimiento] = []

    # ------------------------------------------------------------------
    # Infraestructura
    # ------------------------------------------------------------------
    def cargar(self) -> list[Movimiento]:
        self.almacen.abrir()
        self.movimientos = self.almacen.obtener_todos()
        logger.info("Cargados %d movimientos", len(self.movimientos))
        return self.movimientos

    def _resincronizar(self) -> None:
        try:
            self.movimientos = self.almacen.obtener_todos()
        except ErrorAlmacen:
            logger.exception("No se pudo recargar la copia en memoria")

    def _accion(self, nombre: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except ErrorAlmacen:
            logger.exception("Falló '%s'; se recarga desde el almacén", nombre)
            self._resincronizar()
            raise

    def _indice(self, id_: int) -> int:
        for i, m in enumerate(self.movimientos):
            if m.id == id_:
                return i
        raise KeyError(id_)

    def obtener(self, id_: int) -> Movimiento:
        return self.movimientos[self._indice(id_)]

    # ------------------------------------------------------------------
    # Altas, ediciones y bajas
    # ------------------------------------------------------------------
    def agregar(self, mov: Movimiento | None = None) -> Movimiento:
        """Agrega un movimiento; sin argumento crea uno en blanco con fecha de hoy."""
        if mov is None:
            mov = Movimiento(date=date.today().isoformat())
        nuevo = Movimiento.desde_dict(mov.a_dict(incluir_id=False))

        def _run() -> Movimiento:
            guardado = self.almacen.agregar(nuevo)
            self.movimientos.append(guardado)
            return guardado

        return self._accion("agregar", _run)

    def guardar(self, mov: Movimiento) -> Movimiento:
        """Edición en el lugar: valida, persiste y reemplaza en la copia."""
        idx = self._indice(mov.id)
        limpio = Movimiento.desde_dict(mov.a_dict())

        def _run() -> Movimiento:
            self.almacen.actualizar(limpio)
            self.movimientos[idx] = limpio
            return limpio

        return self._accion("guardar", _run)

    def duplicar(self, id_: int) -> Movimiento:
        return self.agregar(replace(self.obtener(id_), id=None))

    def eliminar(self, id_: int) -> None:
        idx = self._indice(id_)

        def _run() -> None:
            self.almacen.eliminar(id_)
            del self.movimientos[idx]

        self._accion("eliminar", _run)

    def limpiar(self) -> None:
        def _run() -> None:
            self.almacen.limpiar()
            self.movimientos = []

        self._accion("limpiar", _run)
        logger.info("Base local vaciada")

    # ------------------------------------------------------------------
    # Importación
    # ------------------------------------------------------------------
    def importar_csv(self, tabla: TablaCSV, mapeo: Mapping[str, str | None]) -> int:
        nuevos = importar_csv(tabla, mapeo)

        def _run() -> int:
            n = self.almacen.agregar_varios(nuevos)
            self.movimientos = self.almacen.obtener_todos()
            return n

        n = self._accion("importar CSV", _run)
        logger.info("Importados %d movimientos desde CSV", n)
        return n

    def importar_json(self, texto: str) -> ContenidoJSON:
        """Restaura (respaldo completo) o agrega (importación parcial) desde JSON.

        La validación ocurre antes de tocar el almacén.
        """
        contenido = leer_json(texto)

        def _run() -> None:
            if contenido.reemplazar:
                self.almacen.reemplazar_todos(contenido.items)
            else:
                self.almacen.agregar_varios(contenido.items)
            self.movimientos = self.almacen.obtener_todos()

        self._accion("importar JSON", _run)
        logger.info(
            "JSON: %d movimientos (%s)",
            len(contenido.items), "restauración" if contenido.reemplazar else "agregados",
        )
        return contenido

    # ------------------------------------------------------------------
    # Procesos masivos
    # ------------------------------------------------------------------
    def normalizar(self, reglas: ReglasNormalizacion = ReglasNormalizacion()) -> int:
        """Normaliza toda la base; cada registro se persiste por separado, sin rollback.

        Ante un error de escritura el proceso se detiene: lo ya escrito queda
        y la copia en memoria se recarga.
        """
        resultado = normalizar_movimientos(self.movimientos, reglas)

        def _run() -> int:
            for m in resultado.modificados:
                self.almacen.actualizar(m)
            self.movimientos = self.almacen.obtener_todos()
            return len(resultado.modificados)

        n = self._accion("normalizar", _run)
        logger.info("Normalización aplicada: %d movimientos modificados", n)
        return n

    def sugerir_conciliaciones(self) -> ResultadoConciliacion:
        resultado = sugerir_conciliaciones(self.movimientos)

        def _run() -> None:
            for m in resultado.actualizados:
                self.almacen.actualizar(m)
            self.movimientos = self.almacen.obtener_todos()

        self._accion("sugerir conciliaciones", _run)
        logger.info("Conciliación sugerida: %d movimientos marcados", resultado.marcados)
        return resultado

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    def consultar(
        self,
        filtro: Filtro = Filtro(),
        clave: str = "date",
        direccion: Direccion = "desc",
    ) -> list[Movimiento]:
        return ordenar(filtrar(self.movimientos, filtro), clave, direccion)

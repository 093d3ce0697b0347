from datetime import date

import streamlit as st

from infra.almacen import Almacen
from infra.config import load_config
from infra.export import movimientos_a_excel_bytes
from infra.intercambio import exportar_csv, exportar_json, leer_csv, leer_json, plantilla_csv
from infra.logger import get_logger
from logic.conciliacion import conteo_por_cuenta
from logic.consulta import Filtro, a_dataframe, cuentas, paginar, resumen
from logic.errores import ErrorAlmacen, ErrorValidacion
from logic.lectura import detectar_columnas, importe_a_texto
from logic.libro import Libro
from logic.modelos import CAMPOS, ESTADOS, TIPOS, Movimiento
from logic.normalizacion import ReglasNormalizacion


# =========================
# Configuración inicial
# =========================
cfg = load_config("config.yaml")
get_logger(level=cfg.app.log_level)
st.set_page_config(page_title=cfg.app.title, layout=cfg.app.page_layout)
st.title(cfg.app.title)


def formato_moneda(x: float) -> str:
    return f"{x:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def obtener_libro() -> Libro:
    """Un Libro por sesión de navegador, cargado una sola vez."""
    if "libro" not in st.session_state:
        libro = Libro(Almacen(cfg.almacen.ruta))
        libro.cargar()
        st.session_state["libro"] = libro
    return st.session_state["libro"]


try:
    libro = obtener_libro()
except ErrorAlmacen as e:
    st.error(f"No se pudo abrir la base local: {e}")
    st.stop()

sep = cfg.intercambio.separador_csv

# =========================
# Instrucciones
# =========================
with st.expander("ℹ️ Cómo usar"):
    st.markdown("""
    - **Importar**: CSV (con mapeo de columnas) o JSON. Un respaldo completo reemplaza la base;
      un JSON parcial (lista o `{items: [...]}`) se agrega.
    - **Normalizar**: limpia espacios, tipos, estados y fechas de toda la base.
    - **Sugerir conciliaciones**: marca como RECONCILED los pares crédito/débito
      de la misma cuenta y mismo importe absoluto.
    - **Exportar**: CSV (lo filtrado), respaldo JSON (todo) o Excel.
    """)

# =========================
# Filtros (sidebar)
# =========================
with st.sidebar:
    st.header("Filtros")
    filtro = Filtro(
        texto=st.text_input("Buscar (descripción, documento, cuenta)"),
        estado=st.selectbox("Estado", ["", *ESTADOS], format_func=lambda x: x or "Todos"),
        tipo=st.selectbox("Tipo", ["", *TIPOS], format_func=lambda x: x or "Todos"),
        cuenta=st.selectbox("Cuenta", ["", *cuentas(libro.movimientos)], format_func=lambda x: x or "Todas"),
        fecha_desde=st.text_input("Fecha desde (AAAA-MM-DD)"),
        fecha_hasta=st.text_input("Fecha hasta (AAAA-MM-DD)"),
        importe_min=st.text_input("Importe mínimo"),
        importe_max=st.text_input("Importe máximo"),
    )
    st.header("Orden")
    clave = st.selectbox("Ordenar por", list(CAMPOS), index=list(CAMPOS).index(cfg.consulta.orden_clave))
    direccion = st.radio("Dirección", ["asc", "desc"], horizontal=True,
                         index=["asc", "desc"].index(cfg.consulta.orden_direccion))

filtrados = libro.consultar(filtro, clave, direccion)

# =========================
# KPIs
# =========================
kpi = resumen(filtrados)
c1, c2, c3, c4 = st.columns(4)
c1.metric("Créditos", formato_moneda(kpi.creditos))
c2.metric("Débitos", formato_moneda(kpi.debitos))
c3.metric("Saldo", formato_moneda(kpi.saldo))
c4.metric("Conciliado", f"{kpi.porcentaje_conciliado}%")

# =========================
# Tabla paginada
# =========================
cp1, cp2 = st.columns(2)
with cp1:
    tamano = st.selectbox("Filas por página", cfg.consulta.tamanos_pagina,
                          index=cfg.consulta.tamanos_pagina.index(cfg.consulta.tamano_pagina))
with cp2:
    pagina_sel = st.number_input("Página", min_value=1, value=1, step=1)
pagina = paginar(filtrados, int(pagina_sel), int(tamano))
st.caption(f"Mostrando {pagina.total} de {len(libro.movimientos)} · página {pagina.pagina}/{pagina.total_paginas}")
st.dataframe(a_dataframe(pagina.items), width="stretch", hide_index=True)

# =========================
# Edición de un movimiento
# =========================
st.subheader("Editar movimiento")
ids = [m.id for m in pagina.items]
col_a, col_b, col_c = st.columns(3)
if col_a.button("➕ Agregar"):
    try:
        libro.agregar()
        st.rerun()
    except ErrorAlmacen as e:
        st.error(f"Falló el alta: {e}")

if ids:
    id_sel = st.selectbox("Movimiento", ids)
    actual = libro.obtener(id_sel)
    with st.form(f"editar_{id_sel}"):
        e1, e2, e3, e4 = st.columns(4)
        fecha = e1.text_input("Fecha", actual.date)
        cuenta = e2.text_input("Cuenta", actual.account)
        descripcion = e3.text_input("Descripción", actual.description)
        documento = e4.text_input("Documento", actual.document)
        e5, e6, e7, e8 = st.columns(4)
        tipo = e5.selectbox("Tipo", TIPOS, index=TIPOS.index(actual.type) if actual.type in TIPOS else 0)
        importe = e6.text_input("Importe", importe_a_texto(actual.amount))
        estado = e7.selectbox("Estado", ESTADOS, index=ESTADOS.index(actual.status) if actual.status in ESTADOS else 0)
        notas = e8.text_input("Notas", actual.notes)
        if st.form_submit_button("💾 Guardar"):
            try:
                libro.guardar(Movimiento.desde_dict({
                    "id": actual.id, "date": fecha, "account": cuenta, "description": descripcion,
                    "document": documento, "type": tipo, "amount": importe, "status": estado, "notes": notas,
                }))
                st.rerun()
            except ErrorAlmacen as e:
                st.error(f"No se pudo guardar: {e}")

    if col_b.button("📄 Duplicar"):
        try:
            libro.duplicar(id_sel)
            st.rerun()
        except ErrorAlmacen as e:
            st.error(f"No se pudo duplicar: {e}")
    if col_c.button("🗑️ Eliminar"):
        try:
            libro.eliminar(id_sel)
            st.rerun()
        except ErrorAlmacen as e:
            st.error(f"No se pudo eliminar: {e}")

# =========================
# Importación
# =========================
st.subheader("Importar")
archivo = st.file_uploader("CSV o JSON", type=["csv", "json"], key="importar")
if archivo is not None:
    texto = archivo.getvalue().decode(cfg.intercambio.encoding, errors="replace")
    if archivo.name.lower().endswith(".json"):
        try:
            previa = leer_json(texto)
        except ErrorValidacion as e:
            st.error(f"Falla en el JSON: {e}")
            previa = None
        if previa is not None:
            confirmado = True
            if previa.reemplazar:
                st.warning(f"Esto reemplazará la base actual por {len(previa.items)} registros.")
                confirmado = st.checkbox("Entiendo que se reemplazará la base actual")
            if st.button("Importar JSON", disabled=not confirmado):
                try:
                    contenido = libro.importar_json(texto)
                    accion = "Restaurados" if contenido.reemplazar else "Importados"
                    st.success(f"{accion} {len(contenido.items)} registros del JSON.")
                except ErrorValidacion as e:
                    st.error(f"Falla en el JSON: {e}")
                except ErrorAlmacen as e:
                    st.error(f"No se pudo guardar: {e}")
    else:
        try:
            tabla = leer_csv(texto, sep)
        except ErrorValidacion as e:
            st.error(str(e))
            tabla = None
        if tabla is not None:
            sugerido = detectar_columnas(tabla.encabezados)
            opciones = ["", *tabla.encabezados]
            mapeo: dict[str, str | None] = {}
            cols = st.columns(4)
            for i, campo in enumerate(CAMPOS):
                sel = cols[i % 4].selectbox(
                    campo, opciones,
                    index=opciones.index(sugerido[campo]) if sugerido.get(campo) else 0,
                    format_func=lambda x: x or "-- no importar --",
                    key=f"map_{campo}",
                )
                mapeo[campo] = sel or None
            if st.button("Confirmar importación"):
                try:
                    n = libro.importar_csv(tabla, mapeo)
                    st.success(f"Importados {n} registros del CSV.")
                except ErrorAlmacen as e:
                    st.error(f"No se pudo importar: {e}")

# =========================
# Normalización y conciliación
# =========================
st.subheader("Procesos")
col_n, col_s = st.columns(2)
with col_n:
    with st.form("normalizar"):
        reglas = ReglasNormalizacion(
            recortar=st.checkbox("Recortar espacios", value=cfg.normalizacion.recortar),
            tipo_mayusculas=st.checkbox("Tipo en mayúsculas", value=cfg.normalizacion.tipo_mayusculas),
            mapear_estados=st.checkbox("Mapear sinónimos de estado", value=cfg.normalizacion.mapear_estados),
            corregir_fechas=st.checkbox("Corregir fechas", value=cfg.normalizacion.corregir_fechas),
        )
        if st.form_submit_button("Aplicar normalización"):
            try:
                n = libro.normalizar(reglas)
                st.success(f"Normalización aplicada ({n} movimientos modificados).")
            except ErrorAlmacen as e:
                st.error(f"La normalización se detuvo: {e}")
with col_s:
    if st.button("Sugerir conciliaciones"):
        try:
            res = libro.sugerir_conciliaciones()
            if res.marcados:
                st.success(f"Marcados {res.marcados} movimientos como RECONCILED.")
                st.dataframe(
                    [{"Cuenta": k, "Marcados": v} for k, v in conteo_por_cuenta(res).items()],
                    width="stretch",
                )
            else:
                st.info("No se encontraron sugerencias.")
        except ErrorAlmacen as e:
            st.error(f"La conciliación se detuvo: {e}")

# =========================
# Exportación
# =========================
st.subheader("Exportar")
hoy = date.today().isoformat()
x1, x2, x3, x4 = st.columns(4)
x1.download_button("CSV (filtrado)", data=exportar_csv(filtrados, sep),
                   file_name=f"conciliacion_{hoy}.csv", mime="text/csv")
x2.download_button("Respaldo JSON", data=exportar_json(libro.movimientos),
                   file_name=f"respaldo_conciliacion_{hoy}.json", mime="application/json")
x3.download_button("Excel (filtrado)",
                   data=movimientos_a_excel_bytes(filtrados, formato_fecha=cfg.app.fecha_vista_formato),
                   file_name=f"conciliacion_{hoy}.xlsx")
x4.download_button("Modelo CSV", data=plantilla_csv(sep), file_name="modelo_conciliacion.csv", mime="text/csv")

# =========================
# Zona peligrosa
# =========================
with st.expander("⚠️ Borrar toda la base local"):
    confirmar = st.checkbox("Entiendo que se borrarán TODOS los registros")
    if st.button("Borrar todo", disabled=not confirmar):
        try:
            libro.limpiar()
            st.rerun()
        except ErrorAlmacen as e:
            st.error(f"No se pudo vaciar la base: {e}")

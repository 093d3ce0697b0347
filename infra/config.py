from __future__ import annotations
import yaml
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    title: str
    page_layout: str
    fecha_vista_formato: str
    log_level: str = "INFO"


@dataclass(frozen=True)
class AlmacenConfig:
    ruta: str


@dataclass(frozen=True)
class IntercambioConfig:
    separador_csv: str
    encoding: str


@dataclass(frozen=True)
class ConsultaConfig:
    tamano_pagina: int
    tamanos_pagina: list[int]
    orden_clave: str
    orden_direccion: str


@dataclass(frozen=True)
class NormalizacionConfig:
    recortar: bool
    tipo_mayusculas: bool
    mapear_estados: bool
    corregir_fechas: bool


@dataclass(frozen=True)
class Config:
    app: AppConfig
    almacen: AlmacenConfig
    intercambio: IntercambioConfig
    consulta: ConsultaConfig
    normalizacion: NormalizacionConfig


def load_config(path: str | Path = "config.yaml") -> Config:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    app = AppConfig(**data["app"])
    alm = AlmacenConfig(**data["almacen"])
    inter = IntercambioConfig(**data["intercambio"])
    cons = ConsultaConfig(**data["consulta"])
    nmz = NormalizacionConfig(**data["normalizacion"])

    return Config(app=app, almacen=alm, intercambio=inter, consulta=cons, normalizacion=nmz)

import logging
from typing import Optional


_logger: Optional[logging.Logger] = None

_FORMATO = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str = "conciliador", level: Optional[str] = None) -> logging.Logger:
    """Logger único de la aplicación.

    Streamlit re-ejecuta el script en cada interacción, por eso el handler se
    agrega una sola vez. ``level`` (p.ej. "DEBUG") permite ajustar el nivel
    desde config.yaml.
    """
    global _logger
    if _logger is None:
        logger = logging.getLogger(name)
        logger.setLevel(logging.INFO)
        if not logger.handlers:
            ch = logging.StreamHandler()
            ch.setFormatter(logging.Formatter(_FORMATO))
            logger.addHandler(ch)
        _logger = logger

    if level:
        _logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return _logger

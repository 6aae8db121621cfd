"""
Configuración de logging del almacén
Un archivo por día en LOG_DIR (almacen_AAAA-MM-DD.log) más salida a consola.
"""
import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from pathlib import Path

from ..config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 10MB por archivo, 5 respaldos
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5


def _preparar(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(log_dir: str | None = None):
    """Configura el logging raíz; se puede llamar varias veces sin duplicar handlers."""
    carpeta = Path(log_dir or settings.log_dir)
    carpeta.mkdir(parents=True, exist_ok=True)
    archivo = carpeta / f"almacen_{datetime.now():%Y-%m-%d}.log"

    level = getattr(logging, settings.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_preparar(
        RotatingFileHandler(archivo, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"),
        level,
    ))
    root_logger.addHandler(_preparar(logging.StreamHandler(), level))

    for nombre in ("almacen", "almacen.api"):
        logging.getLogger(nombre).setLevel(level)
    # Movimientos de stock: en modo debug se ve cada comando
    logging.getLogger("almacen.application").setLevel(logging.DEBUG if settings.debug else level)

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    logging.info(f"Logging del almacén configurado. Archivo: {archivo}")
    return root_logger


def get_logger(name: str = None):
    """Logger bajo el espacio "almacen" (almacen.<name>)."""
    return logging.getLogger(f"almacen.{name}" if name else "almacen")

# ==============================================================================
# CONFIGURACIÓN DE LOGGING
# ==============================================================================
# Un único punto donde se configuran los handlers:
#   - logs/storefront.log   → todo lo de nivel LOG_LEVEL o superior (rotativo)
#   - logs/performance.log  → tiempos de rutas (ver performance_logger.py)
#   - consola               → mismo formato, útil con gunicorn
#
# Los módulos solo hacen: logger = logging.getLogger(__name__)
# ==============================================================================

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

APP_LOG_FILE = 'storefront.log'
PERFORMANCE_LOG_FILE = 'performance.log'

PERFORMANCE_LOGGER = 'storefront.performance'

_MAX_BYTES = 2_000_000
_BACKUP_COUNT = 3


def _rotating_handler(path: str, level: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(log_dir: str, level: str = 'INFO', console: bool = True) -> logging.Logger:
    """
    Configura el logger raíz del paquete 'storefront'.

    Es idempotente: si se llama de nuevo (tests, recarga) reemplaza los
    handlers en lugar de duplicarlos.

    Args:
        log_dir: Directorio donde se escriben los archivos de log
        level: Nivel mínimo ('DEBUG', 'INFO', ...)
        console: Si True, también escribe a stderr

    Returns:
        Logger 'storefront'
    """
    level = (level or 'INFO').upper()
    os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger('storefront')
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(level)
    root.addHandler(_rotating_handler(os.path.join(log_dir, APP_LOG_FILE), level))

    if console:
        stream = logging.StreamHandler()
        stream.setLevel(level)
        stream.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(stream)

    # Los tiempos de rutas van a su propio archivo y no ensucian el log general
    perf = logging.getLogger(PERFORMANCE_LOGGER)
    for handler in list(perf.handlers):
        perf.removeHandler(handler)
        handler.close()
    perf.setLevel(logging.INFO)
    perf.propagate = False
    perf.addHandler(_rotating_handler(os.path.join(log_dir, PERFORMANCE_LOG_FILE), 'INFO'))

    return root

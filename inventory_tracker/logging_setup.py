# ==============================================================================
# CONFIGURACIÓN DE LOGGING
# ==============================================================================
# Un único handler de consola para el logger raíz del paquete.
# Cada módulo usa logging.getLogger(__name__).
# ==============================================================================

import logging


LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

PACKAGE_LOGGER = 'inventory_tracker'


def configure_logging(level: str = 'INFO') -> logging.Logger:
    """
    Configura el logger del paquete (idempotente).

    Args:
        level: Nombre del nivel (DEBUG, INFO, WARNING...)

    Returns:
        Logger raíz del paquete
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not any(getattr(h, '_inventory_handler', False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._inventory_handler = True
        logger.addHandler(handler)

    return logger

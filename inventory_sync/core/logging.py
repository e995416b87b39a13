"""
Configuracion de sinks de loguru para el comando.
"""
import sys

from loguru import logger


def setup_logging(level: str = "INFO", log_file: str = "") -> None:
    """
    Reemplaza el sink por defecto de loguru.
    
    Args:
        level: Nivel minimo de log
        log_file: Ruta de archivo de log adicional (vacio = sin archivo)
    """
    logger.remove()
    logger.add(sys.stderr, level=level)
    
    if log_file:
        logger.add(
            log_file,
            rotation="500 MB",
            retention="10 days",
            level=level
        )

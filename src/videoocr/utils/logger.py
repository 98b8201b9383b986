# utils/logger.py
# Configuración simple y reutilizable del logger para todo el proyecto.
# Los handlers (fichero rotativo + consola) se añaden una sola vez al logger raíz
# "videoocr"; los módulos piden loggers hijos con get_logger().
import logging
import logging.handlers
import os

ROOT_LOGGER = "videoocr"
DEFAULT_LOG_FILE = "videoocr.log"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
DEFAULT_BACKUP_COUNT = 3
FORMAT = '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
DATEFMT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str = ROOT_LOGGER):
    """
    Devuelve un logger dentro de la jerarquía "videoocr". Llamar desde otros módulos:
        logger = get_logger("videoocr.processing")
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(verbose: bool = False, log_folder: str = None, log_file: str = DEFAULT_LOG_FILE):
    """
    Configura el logger raíz del proyecto. Idempotente: si ya tiene handlers,
    solo ajusta el nivel.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    # evitar añadir handlers múltiples si ya fue configurado
    if logger.handlers:
        return logger

    formatter = logging.Formatter(FORMAT, datefmt=DATEFMT)

    if log_folder:
        if not os.path.exists(log_folder):
            os.makedirs(log_folder, exist_ok=True)
        # Handler rotativo a fichero
        fh = logging.handlers.RotatingFileHandler(os.path.join(log_folder, log_file),
                                                  maxBytes=DEFAULT_MAX_BYTES,
                                                  backupCount=DEFAULT_BACKUP_COUNT,
                                                  encoding='utf-8')
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    # Handler a consola (stderr, stdout queda para los resultados)
    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    logger.addHandler(ch)
    logger.propagate = False

    return logger

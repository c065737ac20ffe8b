import logging
import logging.handlers
from pathlib import Path

from .config import settings

# Rotate the log file at 10MB, keeping five old files
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _file_handler(path: str) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )


def setup_logging() -> logging.Logger:
    """
    Configure the application logger.

    Everything logs under ``settings.APP_NAME``: to the console always, and
    to a rotating file when LOG_FILE is set. A file that cannot be opened
    only costs the file handler.

    Returns:
        logging.Logger: The application's root logger
    """
    level = getattr(logging, settings.LOG_LEVEL)
    formatter = logging.Formatter(fmt=settings.LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    app_logger = logging.getLogger(settings.APP_NAME)
    app_logger.setLevel(level)
    app_logger.handlers.clear()
    app_logger.propagate = False

    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE:
        try:
            handlers.append(_file_handler(settings.LOG_FILE))
        except OSError as e:
            app_logger.warning(f"Failed to setup file logging: {e}")

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    return app_logger


logger = setup_logging()


def get_logger(module_name: str) -> logging.Logger:
    """Child of the application logger for a module (pass ``__name__``)"""
    return logger.getChild(module_name)


def log_startup_info():
    """Log the settings a chat request depends on"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug Mode: {settings.DEBUG}")
    logger.info(f"LLM: {settings.LLM_MODEL_NAME} at {settings.OLLAMA_BASE_URL}")
    logger.info(f"Catalog: {settings.CATALOG_PATH}")
    logger.info(f"Auth Enabled: {settings.AUTH_ENABLED}")
    logger.info("=" * 60)


def log_shutdown_info():
    logger.info(f"Shutting down {settings.APP_NAME}")

import logging
import logging.config
import os

from feedback_app.core.config.settings import get_settings

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _rotating_file(log_dir: str, filename: str, level: str = "NOTSET") -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "filename": os.path.join(log_dir, filename),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
        "encoding": "utf-8",
        "level": level,
    }


def setup_logging() -> logging.Logger:
    """
    Configure console and file logging for the service.

    ``app.log`` receives everything from the ``feedback_app`` loggers as
    JSON lines; ``error.log`` receives only ``feedback_app.errors``, which
    the exception handlers write to. Returns the application logger.
    """
    settings = get_settings()
    os.makedirs(settings.LOG_DIR, exist_ok=True)

    console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    if settings.is_production:
        console_format = "%(levelname)s %(name)s: %(message)s"

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": console_format, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(module)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": "ext://sys.stdout",
            },
            "app_file": _rotating_file(settings.LOG_DIR, "app.log"),
            "error_file": _rotating_file(settings.LOG_DIR, "error.log", level="ERROR"),
        },
        "loggers": {
            "feedback_app": {
                "handlers": ["console", "app_file"],
                "level": settings.LOG_LEVEL,
                "propagate": False,
            },
            "feedback_app.errors": {
                "handlers": ["console", "app_file", "error_file"],
                "level": "ERROR",
                "propagate": False,
            },
            # SQL echo stays off unless explicitly raised
            "sqlalchemy.engine": {"level": "WARNING"},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    })
    return logging.getLogger("feedback_app")

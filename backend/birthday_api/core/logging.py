import logging
import logging.config
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_logging_config(level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": LOG_FORMAT,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "birthday_api": {"level": level.upper(), "propagate": True},
            # SQL echo is controlled by the engine, keep the library quiet
            "sqlalchemy.engine": {"level": "WARNING"},
        },
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install the console logging configuration and return the app logger."""
    logging.config.dictConfig(build_logging_config(level))
    logger = logging.getLogger("birthday_api")
    logger.debug("Logging configured at %s", level.upper())
    return logger

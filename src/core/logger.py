import json
import logging
import logging.config
import sys

from core.config import configs


class JsonFormatter(logging.Formatter):
    """
    Formatter for logging in JSON format.
    """

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


def _build_logging_config(formatter: str, handler: str, server_error_level: str) -> dict:
    formatters = {
        "default": {
            "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": JsonFormatter,
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    }

    def logger_entry(level: str) -> dict:
        return {"level": level, "handlers": [handler], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {formatter: formatters[formatter]},
        "handlers": {
            handler: {
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": formatter,
            },
        },
        "loggers": {
            # Root Logger: Catches everything not caught by specific loggers
            "root": {
                "level": configs.LOG_LEVEL,
                "handlers": [handler],
            },
            # Application Loggers
            "geometa": logger_entry(configs.LOG_LEVEL),
            "api": logger_entry(configs.LOG_LEVEL),
            # Uvicorn (FastAPI Server) Loggers
            "uvicorn": logger_entry("INFO"),
            "uvicorn.access": logger_entry("INFO"),
            "uvicorn.error": logger_entry(server_error_level),
            # External Libraries Noise Reduction
            "multipart": logger_entry("WARNING"),
            "python_multipart": logger_entry("WARNING"),
            "asyncio": logger_entry("WARNING"),
        },
    }


# -----------------------------------------------------------------------------
# Development Logging Configuration
# -----------------------------------------------------------------------------
# Console-friendly, readable text format.
DEV_LOGGING_CONFIG = _build_logging_config("default", "console", "INFO")

# -----------------------------------------------------------------------------
# Production Logging Configuration
# -----------------------------------------------------------------------------
# JSON structured, machine-parsable, suitable for aggregation (ELK, CloudWatch, etc.)
PROD_LOGGING_CONFIG = _build_logging_config("json", "console_json", "ERROR")


def setup_logging():
    """
    Set up logging configuration based on the environment.
    """
    env = configs.ENVIRONMENT.lower()

    if env == "production":
        log_config = PROD_LOGGING_CONFIG
    else:
        log_config = DEV_LOGGING_CONFIG

    logging.config.dictConfig(log_config)

    logger = logging.getLogger("geometa")
    logger.info(f"Logging setup complete for {env} environment with level {configs.LOG_LEVEL}")

"""Structured JSON logging configuration."""
import logging
import sys
from pythonjsonlogger import jsonlogger
from assetbridge.core.config import settings


def setup_logging() -> None:
    """JSON lines on stdout in production; plain text elsewhere."""
    if settings.APP_ENV == "production":
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            static_fields={"service": settings.EXPORT_PRODUCT_NAME, "env": settings.APP_ENV},
        )
        handler.setFormatter(formatter)
        logging.root.handlers = [handler]
        logging.root.setLevel(settings.LOG_LEVEL)
    else:
        logging.basicConfig(
            level=logging.DEBUG if settings.APP_ENV == "development" else settings.LOG_LEVEL,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    # Per-statement SQL would drown out the row-level import logs.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

"""
Application Logging Module.

Configures the application logger used across miners, analyzers and storage.
Log call sites pass either plain strings or dict records, e.g.

    logger.info({"message": "Starting repository mining", "repository": name})

Dict records are flattened into a JSON document so log files stay
machine-readable, while the console output stays readable during development.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            log_data.update(record.msg)
        else:
            log_data["message"] = record.getMessage()

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human readable formatter that expands dict records into key=value pairs."""

    def __init__(self):
        super().__init__(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            fields = dict(record.msg)
            message = fields.pop("message", "")
            extra = " ".join(f"{key}={value}" for key, value in fields.items())
            record.message = f"{message} {extra}".strip()
        return super().formatMessage(record)


class LogManager:
    """
    Build and own the application logger.

    Attributes:
        app_name (str): Logger name, also used for the log file name
        log_dir (str): Directory where the rotating log file is written
        development (bool): Human readable console output when True
        level (int): Logging level applied to logger and handlers
        logger (logging.Logger): The configured logger
    """

    def __init__(
        self,
        app_name: str,
        log_dir: str = "logs",
        development: bool = False,
        level: int = logging.DEBUG,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ):
        self.app_name = app_name
        self.log_dir = log_dir
        self.development = development
        self.level = level
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.logger = self._configure()

    def _configure(self) -> logging.Logger:
        logger = logging.getLogger(self.app_name)
        logger.setLevel(self.level)
        logger.propagate = False

        # Re-importing config must not stack handlers
        if logger.handlers:
            return logger

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.level)
        console_handler.setFormatter(
            ConsoleFormatter() if self.development else JsonFormatter()
        )
        logger.addHandler(console_handler)

        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(self.log_dir, f"{self.app_name}.log"),
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(self.level)
            file_handler.setFormatter(JsonFormatter())
            logger.addHandler(file_handler)

        return logger

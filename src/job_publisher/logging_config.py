# logging_config.py
import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

import psutil

# Get the project root directory
project_root = Path(__file__).parent.parent.parent

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

_SENSITIVE_PATTERNS = [
    re.compile(r"AIza[0-9A-Za-z_\-]{20,}"),  # Google API keys
    re.compile(r"sk-or-[0-9A-Za-z_\-]{10,}"),  # OpenRouter keys
    re.compile(r"1//[0-9A-Za-z_\-]{20,}"),  # Google refresh tokens
    re.compile(r"(?i)(bearer\s+)[0-9A-Za-z._\-]+"),
    re.compile(r"(?i)((?:api_key|key|token|secret|password)=)[^&\s\"']+"),
]


def redact(text: str) -> str:
    """Mask credentials that look like API keys or tokens."""
    for pattern in _SENSITIVE_PATTERNS:
        if pattern.groups:
            text = pattern.sub(lambda m: f"{m.group(1)}****REDACTED****", text)
        else:
            text = pattern.sub("****REDACTED****", text)
    return text


class SensitiveDataFilter(logging.Filter):
    """Filter to remove credentials from log records."""

    def filter(self, record):
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        # Add extra fields if present
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return redact(json.dumps(log_data, default=str, ensure_ascii=False))


def setup_logging(name: str, level: Optional[str] = None) -> logging.Logger:
    """Set up logging configuration."""
    # Get log level from environment variable or use default
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    # Get log directory from environment variable or use default
    log_dir = os.getenv("LOG_DIR", str(project_root / "logs"))

    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers = []

    formatter = JSONFormatter()
    sensitive_filter = SensitiveDataFilter()

    # Create file handler
    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=10485760,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)
    except OSError as e:
        # Read-only filesystems (containers) still get console logging
        sys.stderr.write(f"File logging disabled for {name}: {e}\n")

    # Create console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if log_level == "DEBUG":
        logger.debug("Debug logging enabled")

    return logger


class MetricsLogger:
    """Logs process and system resource usage."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.process = psutil.Process()

    def log_process_metrics(self) -> Dict[str, float]:
        rss_mb = round(self.process.memory_info().rss / 1024 / 1024, 1)
        metrics = {
            "rss_mb": rss_mb,
            "cpu_percent": self.process.cpu_percent(),
            "threads": self.process.num_threads(),
        }
        self.logger.info(f"RAM usage: {rss_mb}MB", extra={"metrics": metrics})
        return metrics

    def log_system_metrics(self) -> Dict[str, float]:
        metrics = {
            "cpu_percent": psutil.cpu_percent(),
            "memory_percent": psutil.virtual_memory().percent,
        }
        self.logger.info("System metrics", extra={"metrics": metrics})
        return metrics


def get_metrics_logger(name: str) -> MetricsLogger:
    """Return a metrics logger writing through ``setup_logging``."""
    return MetricsLogger(setup_logging(f"{name}.metrics"))

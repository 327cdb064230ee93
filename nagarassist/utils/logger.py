"""Centralized logging configuration for the assistant services."""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class ServiceLogger:
    """Structured logger that also keeps recent entries for the /logs endpoint."""

    def __init__(self, service_name: str, log_dir: str = "logs", level: str = "INFO",
                 max_buffer_size: int = 100):
        self.service_name = service_name
        self.logger = logging.getLogger(service_name)
        self.logger.setLevel(logging.DEBUG)

        # Re-instantiating for the same service must not stack handlers
        if not self.logger.handlers:
            formatter = logging.Formatter(
                '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path / f'{service_name}.log')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        self.log_buffer = []
        self.max_buffer_size = max_buffer_size

    def _add_to_buffer(self, level: str, message: str, extra: Optional[dict] = None):
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "service": self.service_name,
            "message": message,
            "extra": extra or {}
        }
        self.log_buffer.append(entry)
        if len(self.log_buffer) > self.max_buffer_size:
            self.log_buffer.pop(0)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message)
        self._add_to_buffer("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message)
        self._add_to_buffer("INFO", message, kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message)
        self._add_to_buffer("WARNING", message, kwargs)

    def get_recent_logs(self, limit: int = 50):
        """Get recent log entries, newest last."""
        return self.log_buffer[-limit:]

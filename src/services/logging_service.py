"""
Logging and performance monitoring for the certificate toolkit.
"""
import json
import logging
import logging.handlers
import sys
import time
import traceback
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict
from contextlib import contextmanager
import threading


@dataclass
class LogEntry:
    """One JSON log line."""
    timestamp: str
    level: str
    logger_name: str
    message: str
    location: str
    stage: Optional[str] = None
    metric: Optional[Dict[str, Any]] = None
    exception_info: Optional[Dict[str, Any]] = None


@dataclass
class PerformanceMetric:
    """Duration of one certificate operation."""
    operation: str
    duration_ms: float
    timestamp: str
    success: bool
    error_message: Optional[str] = None


class JSONFormatter(logging.Formatter):
    """Formats records as JSON, keeping generator stages and timings as fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created).isoformat(),
            level=record.levelname,
            logger_name=record.name,
            message=record.getMessage(),
            location=f"{record.module}:{record.funcName}:{record.lineno}",
            stage=getattr(record, 'stage', None),
            metric=getattr(record, 'metric', None)
        )

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            log_entry.exception_info = {
                'type': exc_type.__name__ if exc_type else None,
                'message': str(exc_value) if exc_value else None,
                'errors': getattr(exc_value, 'errors', None),
                'traceback': traceback.format_exception(exc_type, exc_value, exc_tb)
            }

        return json.dumps(asdict(log_entry), default=str)


class PerformanceMonitor:
    """Timing of certificate operations such as key and chain generation.

    Only the most recent measurement of each operation is kept.
    """

    def __init__(self):
        self._latest: Dict[str, PerformanceMetric] = {}
        self.lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    @contextmanager
    def measure_operation(self, operation: str):
        """Context manager to measure operation performance."""
        start_time = time.perf_counter()
        success = True
        error_message = None

        try:
            yield
        except Exception as e:
            success = False
            error_message = str(e)
            raise
        finally:
            metric = PerformanceMetric(
                operation=operation,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                timestamp=datetime.now().isoformat(),
                success=success,
                error_message=error_message
            )

            with self.lock:
                self._latest[operation] = metric

            self.logger.debug(
                f"{operation} took {metric.duration_ms:.0f} ms",
                extra={'metric': asdict(metric)}
            )

    def last_metric(self, operation: str) -> Optional[PerformanceMetric]:
        """Get the latest measurement of an operation, if any."""
        with self.lock:
            return self._latest.get(operation)


class LoggingService:
    """Installs the toolkit log handlers and exposes performance monitoring."""

    def __init__(self, config):
        """Initialize logging service with configuration."""
        self.config = config
        self.performance_monitor = PerformanceMonitor()
        self._setup_logging()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("Logging service initialized")

    def _setup_logging(self):
        """Setup console and optional rotating file handlers."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        root_logger.setLevel(log_level)

        json_formatter = JSONFormatter()
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(json_formatter if self.config.json_logs else console_formatter)
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)

        if self.config.log_file_path:
            Path(self.config.log_file_path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=self.config.log_file_path,
                maxBytes=5 * 1024 * 1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            file_handler.setFormatter(json_formatter)
            file_handler.setLevel(log_level)
            root_logger.addHandler(file_handler)

    def measure_performance(self, operation: str):
        """Get performance measurement context manager."""
        return self.performance_monitor.measure_operation(operation)

    def last_duration_ms(self, operation: str) -> Optional[float]:
        metric = self.performance_monitor.last_metric(operation)
        return metric.duration_ms if metric else None

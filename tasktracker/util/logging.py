"""
Structured logging for store operations and validation outcomes.
Field values are never written to the log, only identifiers and messages.
"""

import logging
import os
from typing import Any, Dict, List, Mapping


class StructuredLogger:
    """Structured logger for resource store and validation operations."""

    def __init__(self, name: str = "task_tracker", level: str = None):
        self.logger = logging.getLogger(name)
        level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        self.logger.setLevel(getattr(logging, level_name, logging.INFO))

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_store_operation(self, operation: str, record_id: str, entity: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a store operation against a single record."""
        log_details = {"entity": entity, "record_id": record_id}
        if details:
            log_details.update(details)

        self.log_operation(f"store.{operation}", status, log_details, level=logging.DEBUG)

    def log_batch_operation(self, operation: str, entity: str, requested: int, found: int):
        """Log a batch read with its hit/miss counts."""
        log_details = {
            "entity": entity,
            "requested": requested,
            "found": found,
            "missing": requested - found
        }
        self.log_operation(f"store.{operation}", "success", log_details, level=logging.DEBUG)

    def log_schema_validation_success(self, operation: str, entity: str, field_count: int):
        """Log successful validation."""
        log_details = {
            "operation": operation,
            "entity": entity,
            "field_count": field_count
        }
        self.log_operation("validation.success", "validated", log_details, level=logging.DEBUG)

    def log_schema_validation_error(self, operation: str, entity: str, errors: Mapping[str, str], stage: str = "schema"):
        """Log validation errors. Only field names and messages are recorded."""
        sanitized_errors: List[str] = []
        for field_name, message in errors.items():
            sanitized_errors.append(f"{field_name}: {str(message)[:100]}")

        log_details = {
            "operation": operation,
            "entity": entity,
            "stage": stage,
            "errors": sanitized_errors,
            "error_count": len(sanitized_errors)
        }
        self.log_operation("validation.error", "rejected", log_details)

    def log_contract_violation(self, operation: str, entity: str, record_id: str, error: Exception):
        """Log a failure that validation should have prevented."""
        log_details = {
            "entity": entity,
            "record_id": record_id,
            "error_type": type(error).__name__,
            "error": str(error)[:200]
        }
        self.log_operation(f"store.{operation}", "contract_violation", log_details, level=logging.ERROR)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()

"""Error reporting collaborators."""

import logging
from dataclasses import dataclass
from typing import Protocol


class ErrorReporter(Protocol):
    """Interface for sending caught exceptions to telemetry."""

    def capture(self, error: BaseException, context: str) -> None:
        """Report an exception caught at an operation boundary."""


@dataclass
class LoggingErrorReporter(ErrorReporter):
    """Reports exceptions through the application logger."""

    logger_name: str = "hairstyle_helper.telemetry"

    def capture(self, error: BaseException, context: str) -> None:
        """Log the exception with its traceback."""
        logger = logging.getLogger(self.logger_name)
        logger.error("%s failed", context, exc_info=error)

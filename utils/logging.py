import os
import logging
import sys
import json
from datetime import datetime
from typing import Dict, Any, Optional

GREEN = "\x1b[32m"
ORANGE = "\x1b[33m"
RED = "\x1b[31m"
BOLD = "\x1b[1m"
RESET = "\x1b[0m"


class StructuredLogFormatter(logging.Formatter):
    """Custom formatter for structured logging with JSON output."""

    def __init__(self, include_timestamp: bool = True, include_level: bool = True):
        """
        Initialize the structured log formatter.

        Args:
            include_timestamp (bool): Whether to include timestamp in logs
            include_level (bool): Whether to include log level in logs
        """
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON object.

        Args:
            record (logging.LogRecord): Log record to format

        Returns:
            str: JSON formatted log entry
        """
        log_data = {}

        if self.include_timestamp:
            log_data['timestamp'] = datetime.fromtimestamp(record.created).isoformat()

        if self.include_level:
            log_data['level'] = record.levelname

        log_data['logger'] = record.name
        log_data['message'] = record.getMessage()

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Context attached by log_with_context
        if hasattr(record, 'data') and isinstance(record.data, dict):
            log_data.update(record.data)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Short console lines, colored by level when writing to a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: BOLD,
        logging.INFO: GREEN,
        logging.WARNING: ORANGE,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def __init__(self, use_color: bool = True):
        super().__init__('%(levelname)s: %(message)s')
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if self.use_color and color:
            return f"{color}{line}{RESET}"
        return line


class LoggerFactory:
    """Factory class for creating configured loggers."""

    @staticmethod
    def create_logger(name: str = "slide2pdf",
                      level: int = logging.INFO,
                      output_file: Optional[str] = None,
                      console_output: bool = True,
                      structured: bool = False,
                      log_dir: str = "logs") -> logging.Logger:
        """
        Create and configure a logger.

        Args:
            name (str): Logger name
            level (int): Logging level
            output_file (str, optional): File to write logs to
            console_output (bool): Whether to output logs to console
            structured (bool): Whether to use structured JSON logging
            log_dir (str): Directory for log files

        Returns:
            logging.Logger: Configured logger
        """
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False

        # Clear existing handlers
        logger.handlers = []

        file_formatter = StructuredLogFormatter() if structured else logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            if structured:
                console_handler.setFormatter(file_formatter)
            else:
                console_handler.setFormatter(ConsoleFormatter(use_color=sys.stdout.isatty()))
            logger.addHandler(console_handler)

        if output_file:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(log_dir, output_file))
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

        return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, context: Dict[str, Any]) -> None:
    """
    Log a message with additional context data.

    The context is visible in structured (JSON) output; plain formatters
    print only the message.

    Args:
        logger (logging.Logger): Logger to use
        level (int): Logging level (e.g. logging.INFO)
        msg (str): Log message
        context (dict): Additional context data
    """
    if logger.isEnabledFor(level):
        logger.log(level, msg, extra={'data': context})

"""
StakeSim Logging System
=======================

A unified, thread-safe logging utility for the staking simulator. This module
integrates with the standard Python `logging` library and the `rich` library to
provide structured, safe, and visually distinct logging outputs.

Usage:
    >>> from stakesim.logger import configure_logging, get_logger
    >>> configure_logging()  # once, from the entry point
    >>> logger = get_logger(__name__)
    >>> logger.info("Simulation started")
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_LEVEL,
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_MAX_FILE_SIZE,
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_FILE_OUTPUT,
)


# Define log file location relative to the project root
PROJECT_ROOT = Path(__file__).parent.parent
LOG_FILE_PATH = PROJECT_ROOT / "logs" / "stakesim.log"


class LogManager:
    """
    Manages logging configuration via the Singleton pattern.

    This class ensures that the logging subsystem is initialized exactly once.
    It handles the setup of 'Rich' console and rotating file handlers for
    persistent storage.

    Attributes:
        _instance (LogManager): The singleton instance.
        _lock (threading.Lock): Thread lock for atomic initialization.
    """

    _instance: Optional["LogManager"] = None
    _lock: threading.Lock = threading.Lock()


    def __new__(cls) -> "LogManager":
        """Creates or returns the existing singleton instance."""
        # Double-checked locking pattern for thread-safe singleton initialization
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance


    def __init__(self) -> None:
        """Initializes the LogManager instance."""
        if self._initialized:
            return
        self._configured = False
        self._handlers: list = []
        self._initialized = True


    @staticmethod
    def validate_log_format(log_format: str) -> str:
        """
        Validates the syntax of a logging format string.

        Attempts to format a dummy record to catch runtime errors.

        Args:
            log_format (str): The logging format string (e.g., "%(asctime)s - %(message)s").

        Returns:
            str: The validated format string, or the default `LOG_FORMAT` if validation fails.
        """
        try:
            if not log_format:
                return str(LOG_FORMAT.default())

            log_format = str(log_format)

            format_specifier_pattern = r"\([a-zA-Z_][a-zA-Z0-9_]*\)[a-zA-Z]"
            paren_pattern = re.compile(format_specifier_pattern)

            # Ensure every match is preceded by a '%' char
            for match in paren_pattern.finditer(log_format):
                start_pos = match.start()
                if start_pos == 0 or log_format[start_pos - 1] != "%":
                    raise ValueError("Malformed format specifier.")

            formatter = logging.Formatter(fmt=log_format)
            record = logging.LogRecord(
                name="test", level=logging.INFO, pathname="", lineno=0,
                msg="test", args=(), exc_info=None,
            )
            formatted_output = formatter.format(record)

            if re.search(format_specifier_pattern, formatted_output):
                raise ValueError("Format specifiers not properly processed.")

            return log_format
        except (ValueError, KeyError, TypeError) as e:
            print(
                f"{time.strftime(str(LOG_DATE_FORMAT.default()))} - stakesim.logger - "
                f"Validation Error: {e}. Using default.",
                file=sys.stderr,
            )
            return str(LOG_FORMAT.default())


    @staticmethod
    def validate_date_format(date_format: str) -> str:
        """
        Validates the syntax of a date format string against strftime directives.

        Args:
            date_format (str): The date format string (e.g., "%Y-%m-%d").

        Returns:
            str: The validated date format string, or default if validation fails.
        """
        if not date_format:
            return str(LOG_DATE_FORMAT.default())

        date_format = str(date_format)

        date_format_pattern = re.compile(
            rf"^(?=.*%(?!%)(?:[EO])?(?:[-_0^#])*(?:[A-DF-HIM-NPR-VW-Za-hj-lm-npr-uw-z]))"
            rf"(?:%%|%(?:[EO])?(?:[-_0^#])*(?:[A-DF-HIM-NPR-VW-Za-hj-lm-npr-uw-z])|[0-9 \t:\-\/\.,TZ+])+$"
        )

        if not date_format_pattern.match(date_format):
            print(
                f"{time.strftime(str(LOG_DATE_FORMAT.default()))} - stakesim.logger - "
                f"Invalid date format. Using default.",
                file=sys.stderr,
            )
            return str(LOG_DATE_FORMAT.default())

        return date_format


    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        console_output: bool = True,
        file_output: Optional[bool] = None,
    ) -> None:
        """
        Configures the root logger with console and file handlers.

        Args:
            log_level (Optional[str]): Logging level (DEBUG, INFO, etc.). Defaults to env var.
            log_file (Optional[Path]): Absolute path to log file. Defaults to `logs/stakesim.log`.
            console_output (bool): Enable stdout logging. Defaults to True.
            file_output (Optional[bool]): Enable rotating file logging. Defaults to env var.
        """
        with self._lock:
            if self._configured:
                return

            level_str = log_level or LOG_LEVEL
            numeric_level = getattr(logging, str(level_str).upper(), logging.INFO)

            root_logger = logging.getLogger()
            root_logger.setLevel(numeric_level)

            # Hypothesis reports through logging at INFO; keep test output readable
            logging.getLogger("hypothesis").setLevel(logging.WARNING)

            # Only handlers installed here are replaced; the host process keeps its own
            for handler in self._handlers:
                root_logger.removeHandler(handler)
            self._handlers.clear()

            log_format = self.validate_log_format(LOG_FORMAT)
            date_format = self.validate_date_format(LOG_DATE_FORMAT)

            # Uses UTC for consistency across machines replaying the same seed
            formatter = TerminalSafeFormatter(fmt=log_format, datefmt=date_format + " UTC")
            formatter.converter = time.gmtime

            if console_output:
                if LOG_CONSOLE_HIGHLIGHTING:
                    stakesim_theme = Theme(
                        {
                            "stakesim.address":        "cyan",
                            "stakesim.amount":         "bold white",
                            "stakesim.level_critical": "bold red reverse",
                            "stakesim.level_debug":    "bold dim",
                            "stakesim.level_error":    "bold red",
                            "stakesim.level_info":     "bold green",
                            "stakesim.level_warning":  "bold yellow",
                            "stakesim.logger_name":    "magenta",
                            "stakesim.noop":           "dim",
                            "stakesim.outcome_error":  "bold red",
                            "stakesim.outcome_ok":     "bold green",
                            "stakesim.tag":            "bold magenta",
                            "stakesim.timestamp":      "bold cyan",
                        }
                    )

                    console = Console(theme=stakesim_theme, highlight=False, stderr=True)

                    rich_handler = RichHandler(
                        console=console,
                        highlighter=StakeSimLogHighlighter(),
                        keywords=[],
                        rich_tracebacks=True,
                        omit_repeated_times=False,
                        show_path=False,
                        show_time=False,
                        show_level=False,
                        markup=False,
                    )
                    rich_handler.setLevel(numeric_level)
                    rich_handler.setFormatter(formatter)
                    self._add_handler(root_logger, rich_handler)
                else:
                    # Fallback to standard stream handler if highlighting is disabled
                    console_handler = logging.StreamHandler(sys.stderr)
                    console_handler.setLevel(numeric_level)
                    console_handler.setFormatter(formatter)
                    self._add_handler(root_logger, console_handler)

            if file_output is None:
                file_output = bool(LOG_FILE_OUTPUT)

            if file_output:
                log_file_path = log_file or LOG_FILE_PATH
                log_file_path.parent.mkdir(parents=True, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    filename=str(log_file_path),
                    maxBytes=LOG_MAX_FILE_SIZE,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                )

                file_handler.setLevel(numeric_level)
                file_handler.setFormatter(formatter)
                self._add_handler(root_logger, file_handler)

            self._configured = True


    def get_logger(self, name: str) -> logging.Logger:
        """
        Retrieves a logger instance for a specific module.

        Does not configure logging; records propagate to whatever handlers
        the host process (or `configure`) installed.

        Args:
            name (str): The name of the logger (typically `__name__`).

        Returns:
            logging.Logger: The standard Python logger for `name`.
        """
        return logging.getLogger(name)


    def _add_handler(self, root_logger: logging.Logger, handler: logging.Handler) -> None:
        root_logger.addHandler(handler)
        self._handlers.append(handler)


    @property
    def is_configured(self) -> bool:
        """Returns True if the logging system has been successfully configured."""
        return self._configured


class TerminalSafeFormatter(logging.Formatter):
    """
    A formatter class that sanitizes log output.

    Random description strings and pipeline logs end up in log lines, so ANSI
    escape sequences and non-printable control characters are stripped.
    """

    # Matches ANSI CSI sequences (colors, cursor moves) and single ESC chars
    _ansi_escape_re = re.compile(
        r"\x1b\[[0-?]*[ -/]*[@-~]"
        r"|\x1b[@-Z\\-_]"
    )
    # Matches control chars (0x00-0x1F) excluding Tab and Newline
    _control_chars_re = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
    _carriage_return_re = re.compile(r"\r")


    @classmethod
    def sanitize(cls, text: str) -> str:
        """
        Removes potentially dangerous characters from the provided text.

        Args:
            text (str): The raw log message.

        Returns:
            str: The sanitized message safe for terminal output.
        """
        if not text:
            return text
        text = cls._ansi_escape_re.sub("", text)
        text = cls._carriage_return_re.sub("", text)
        text = cls._control_chars_re.sub("", text)
        return text


    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class StakeSimLogHighlighter(RegexHighlighter):
    """
    Custom Rich Highlighter for simulation logs.

    Colours operation tags, outcomes, chain addresses and coin amounts.
    """

    base_style = "stakesim."
    highlights = [
        r"(?P<address>\b(?:acct|valoper)1[0-9a-f]{8,}\b)",
        r"(?P<amount>\b\d+[a-z][a-z0-9]{1,15}\b)",
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_info>\bINFO\b)",
        r"(?P<level_warning>\bWARNING\b)",
        r"\-\s+\w+\s+-\s+(?P<logger_name>[\w.]+)(?=\s-\s)",
        r"(?P<noop>\bno-op\b)",
        r"(?P<outcome_error>\bfailed\b)",
        r"(?P<outcome_ok>\bdelivered\b)",
        r"(?P<tag>\[.*?\])",
        r"(?P<timestamp>^(.*?)UTC)",
    ]


_manager = LogManager()

# Silent until a host process or `configure_logging` installs handlers
logging.getLogger("stakesim").addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Public accessor of the logging system.
    Importing a module that calls this never touches the root logger.

    Args:
        name (str): The name of the module requesting the logger.

    Returns:
        logging.Logger: The logger instance.
    """
    return _manager.get_logger(name)


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    console_output: bool = True,
    file_output: Optional[bool] = None,
) -> None:
    """
    Opt-in setup of the rich console and rotating file handlers.

    Meant for entry points such as a simulation harness; handlers already on
    the root logger are left in place.

    Args:
        log_level (Optional[str]): Logging level. Defaults to env var.
        log_file (Optional[Path]): Log file path. Defaults to `logs/stakesim.log`.
        console_output (bool): Enable console logging.
        file_output (Optional[bool]): Enable rotating file logging. Defaults to env var.
    """
    _manager.configure(
        log_level=log_level,
        log_file=log_file,
        console_output=console_output,
        file_output=file_output,
    )

"""
ethrpc Logging System
=====================

A thread-safe logging utility for the SDK. This module integrates with the
standard Python `logging` library and the `rich` library to provide
readable console output for RPC traffic, connection lifecycle and decode
failures.

Only the ``ethrpc`` logger hierarchy is configured; the root logger of the
host application is left alone.

Usage:
    >>> from ethrpc.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Client started")
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional, Tuple

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
)


PACKAGE_LOGGER = "ethrpc"


def _report_fallback(problem: str) -> None:
    # Logging is not configured yet, so report straight to stderr
    print(
        f"{time.strftime(str(LOG_DATE_FORMAT.default()))} - ethrpc.logger - {problem}. Using default.",
        file=sys.stderr,
    )


class LogManager:
    """
    Manages logging configuration via the Singleton pattern.

    The first call to :meth:`configure` (explicit, or implicit through
    :meth:`get_logger`) installs the handlers. Later calls are ignored unless
    ``force=True`` is passed, which is how a client applies the ``[logging]``
    section of its configuration.

    Attributes:
        _instance (LogManager): The singleton instance.
        _lock (threading.Lock): Thread lock for atomic initialization.
    """

    _instance: Optional["LogManager"] = None
    _lock: threading.Lock = threading.Lock()


    def __new__(cls) -> "LogManager":
        """Creates or returns the existing singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance


    def __init__(self) -> None:
        if self._initialized:
            return
        self._configured = False
        self._initialized = True


    @staticmethod
    def validate_log_format(log_format: str) -> str:
        """
        Checks that a logging format string renders a sample record.

        Args:
            log_format (str): The format string read from the environment.

        Returns:
            str: ``log_format``, or the default `LOG_FORMAT` when it does not render.
        """
        if not log_format:
            return str(LOG_FORMAT.default())
        sample = logging.LogRecord(
            name="ethrpc", level=logging.INFO, pathname="", lineno=0,
            msg="sample", args=(), exc_info=None,
        )
        try:
            rendered = logging.Formatter(fmt=str(log_format)).format(sample)
        except (ValueError, KeyError, TypeError) as e:
            _report_fallback(f"invalid LOG_FORMAT ({e})")
            return str(LOG_FORMAT.default())
        # A "(name)s" left in the output means a '%' was missing
        if re.search(r"\([a-zA-Z_]\w*\)[a-zA-Z]", rendered):
            _report_fallback("LOG_FORMAT has a specifier without '%'")
            return str(LOG_FORMAT.default())
        return str(log_format)


    @staticmethod
    def validate_date_format(date_format: str) -> str:
        """
        Checks that a date format contains at least one strftime directive.

        Returns:
            str: ``date_format``, or the default `LOG_DATE_FORMAT`.
        """
        if not date_format:
            return str(LOG_DATE_FORMAT.default())
        date_format = str(date_format)
        if not re.search(r"%[a-zA-Z]", date_format):
            _report_fallback(f"LOG_DATE_FORMAT {date_format!r} has no strftime directive")
            return str(LOG_DATE_FORMAT.default())
        try:
            time.strftime(date_format)
        except ValueError as e:
            _report_fallback(f"invalid LOG_DATE_FORMAT ({e})")
            return str(LOG_DATE_FORMAT.default())
        return date_format


    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        console_output: bool = True,
        force: bool = False,
    ) -> None:
        """
        Configures the ``ethrpc`` logger with console and optional file handlers.

        Args:
            log_level (Optional[str]): Logging level (DEBUG, INFO, etc.). Defaults to `LOG_LEVEL`.
            log_file (Optional[Path]): Path of a rotating log file. No file output when omitted.
            console_output (bool): Enable console logging. Defaults to True.
            force (bool): Replace an existing configuration.
        """
        with self._lock:
            if self._configured and not force:
                return

            level_str = log_level or LOG_LEVEL
            numeric_level = getattr(logging, str(level_str).upper(), logging.INFO)

            package_logger = logging.getLogger(PACKAGE_LOGGER)
            package_logger.setLevel(numeric_level)

            # Transport libraries are chatty at DEBUG (every frame, every ping)
            for lib in ["httpx", "httpcore", "websockets", "websockets.client"]:
                logging.getLogger(lib).setLevel(logging.WARNING)

            for handler in list(package_logger.handlers):
                package_logger.removeHandler(handler)
                handler.close()

            log_format = self.validate_log_format(LOG_FORMAT)
            date_format = self.validate_date_format(LOG_DATE_FORMAT)

            # UTC timestamps regardless of host timezone
            formatter = TerminalSafeFormatter(fmt=log_format, datefmt=date_format + " UTC")
            formatter.converter = time.gmtime

            if console_output:
                if LOG_CONSOLE_HIGHLIGHTING:
                    ethrpc_theme = Theme(
                        {
                            "ethrpc.arrow":           "bold yellow",
                            "ethrpc.correlation_id":  "bold cyan",
                            "ethrpc.hash":            "dim cyan",
                            "ethrpc.level_critical":  "bold red reverse",
                            "ethrpc.level_debug":     "bold dim",
                            "ethrpc.level_error":     "bold red",
                            "ethrpc.level_info":      "bold green",
                            "ethrpc.level_warning":   "bold yellow",
                            "ethrpc.logger_name":     "magenta",
                            "ethrpc.rpc_method":      "bold white",
                            "ethrpc.status_closed":   "bold red",
                            "ethrpc.status_open":     "bold green",
                            "ethrpc.tag":             "bold magenta",
                            "ethrpc.timestamp":       "bold cyan",
                            "ethrpc.url":             "cyan",
                        }
                    )

                    console = Console(theme=ethrpc_theme, highlight=False, stderr=True)

                    rich_handler = RichHandler(
                        console=console,
                        highlighter=EthRPCLogHighlighter(),
                        keywords=[],
                        rich_tracebacks=True,
                        omit_repeated_times=False,
                        show_path=False,
                        enable_link_path=True,
                        show_time=False,
                        show_level=False,
                        markup=False,
                    )
                    rich_handler.setLevel(numeric_level)
                    rich_handler.setFormatter(formatter)
                    package_logger.addHandler(rich_handler)
                else:
                    console_handler = logging.StreamHandler(sys.stderr)
                    console_handler.setLevel(numeric_level)
                    console_handler.setFormatter(formatter)
                    package_logger.addHandler(console_handler)

            if log_file:
                log_file_path = Path(log_file)
                log_file_path.parent.mkdir(parents=True, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    filename=str(log_file_path),
                    maxBytes=LOG_MAX_FILE_SIZE,
                    backupCount=LOG_BACKUP_COUNT,
                    encoding="utf-8",
                )
                file_handler.setLevel(numeric_level)
                file_handler.setFormatter(formatter)
                package_logger.addHandler(file_handler)

            if not package_logger.handlers:
                package_logger.addHandler(logging.NullHandler())

            self._configured = True


    def get_logger(self, name: str) -> logging.Logger:
        """
        Retrieves a logger for a specific module, configuring on first use.

        Args:
            name (str): The name of the logger (typically `__name__`).

        Returns:
            logging.Logger: A standard Python logger.
        """
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


    @property
    def is_configured(self) -> bool:
        """Returns True if the logging system has been configured."""
        return self._configured


class TerminalSafeFormatter(logging.Formatter):
    """
    A formatter that strips ANSI escape sequences and control characters.

    Node responses and frame excerpts end up in log messages verbatim, so
    they must not be able to drive the terminal.
    """

    _ansi_escape_re = re.compile(
        r"\x1b\[[0-?]*[ -/]*[@-~]"
        r"|\x1b[@-Z\\-_]"
    )
    # Control chars (0x00-0x1F) excluding Tab and Newline
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


class EthRPCLogHighlighter(RegexHighlighter):
    """
    Rich highlighter for RPC traffic logs.

    Colors JSON-RPC method names, correlation ids, 32-byte hashes, endpoint
    URLs and connection state words. Quoted frame excerpts are left plain so
    node-controlled text cannot spoof highlighting.
    """

    base_style = "ethrpc."
    highlights = [
        r"(?P<arrow>(\-\->)|(<--))",
        r"(?P<correlation_id>\b(?:eth|net|web3)_[A-Za-z]+\|\d+\b)",
        r"(?P<rpc_method>\b(?:eth|net|web3)_[A-Za-z]+\b)",
        r"(?P<hash>\b0x[0-9a-fA-F]{64}\b)",
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_info>\bINFO\b)",
        r"\-\s+\w+\s+-\s+(?P<logger_name>[\w.]+)(?=\s-\s)",
        r"(?P<level_warning>\bWARNING\b)",
        r"(?P<status_open>\bConnected\b)",
        r"(?P<status_closed>\bDisconnected\b)",
        r"(?P<tag>\[.*?\])",
        r"(?P<timestamp>^(.*?)UTC)",
        r"(?P<url>(?:https?|wss?)://\S+)",
    ]

    _quoted_frame_re = re.compile(r"'(\{.*\})'")


    @classmethod
    def _get_protected_segments(cls, s: str) -> List[Tuple[int, int]]:
        """Returns (start, end) spans of quoted frame excerpts."""
        return [(m.start(1), m.end(1)) for m in cls._quoted_frame_re.finditer(s)]


    @staticmethod
    def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
        return a_start < b_end and a_end > b_start


    def highlight(self, text) -> None:
        super().highlight(text)

        protected_segments = self._get_protected_segments(text.plain)
        if not protected_segments:
            return

        spans = getattr(text, "spans", None)
        if not spans:
            return

        text.spans = [
            span for span in spans
            if not any(self._overlaps(span.start, span.end, ps, pe) for ps, pe in protected_segments)
        ]


_manager = LogManager()

def get_logger(name: str) -> logging.Logger:
    """
    Public accessor of the logging system.
    Delegates to the Singleton LogManager, ensuring configuration is applied.

    Args:
        name (str): The name of the module requesting the logger.

    Returns:
        logging.Logger: The configured logger instance.
    """
    return _manager.get_logger(name)


def configure_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    console_output: bool = True,
) -> None:
    """Re-applies logging configuration, replacing any earlier handlers."""
    _manager.configure(
        log_level=log_level,
        log_file=log_file,
        console_output=console_output,
        force=True,
    )

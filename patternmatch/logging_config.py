"""
Unified Logging Configuration for PatternMatch

This module provides a centralized logging system that combines:
- Console output with timestamps (DEBUG_MODE only)
- File output to debug_flow.txt (complete trace of every scan)
- File output to logs/matching.log (standard logging records)
- Scan timing via the Timer context manager

All modules should import logging functions from this module:
    from patternmatch.logging_config import debug_log, info, warning, error, Timer

The module respects DEBUG_MODE from config:
- DEBUG_MODE=True: All messages shown on console, verbose timing
- DEBUG_MODE=False: Only warnings/errors shown on console

Log Levels:
- debug_log(): Always writes to file; console only in DEBUG_MODE
- info(): Standard information messages
- warning(): Warning messages (always shown)
- error(): Error messages with optional exception info
- critical(): Critical errors (always shown with traceback)
"""

import logging
import sys
import threading
import time
from datetime import datetime

from patternmatch.config import DEBUG_LOG_FILE, DEBUG_MODE, LOG_DATE_FORMAT, LOG_FILE, LOG_FORMAT

# =============================================================================
# File Logger Setup (debug_flow.txt)
# =============================================================================

class _DebugFileLogger:
    """
    Manages the debug_flow.txt file for detailed debugging output.

    This singleton writes all debug messages to a file regardless of DEBUG_MODE.
    Parallel scans log from worker threads, so writes are serialized.
    """

    _instance = None
    _log_file = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._initialize_log_file()
        return cls._instance

    @classmethod
    def _initialize_log_file(cls):
        """Create and initialize the debug log file."""
        try:
            cls._log_file = open(DEBUG_LOG_FILE, 'w', encoding='utf-8')
        except OSError:
            cls._log_file = None
            return
        cls._log_file.write("=== PatternMatch Debug Log ===\n")
        cls._log_file.write(f"Started: {datetime.now().isoformat()}\n")
        cls._log_file.write(f"DEBUG_MODE: {DEBUG_MODE}\n")
        cls._log_file.write("=" * 60 + "\n\n")
        cls._log_file.flush()

    def write(self, message: str):
        """Write message to the debug log file."""
        with self._lock:
            if self._log_file:
                timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
                self._log_file.write(f"[{timestamp}] {message}\n")
                self._log_file.flush()

    def close(self):
        """Close the debug log file gracefully."""
        with self._lock:
            if self._log_file:
                self._log_file.write(f"\n{'=' * 60}\n")
                self._log_file.write(f"Ended: {datetime.now().isoformat()}\n")
                self._log_file.close()
                type(self)._log_file = None


# Global debug file logger instance
_debug_file_logger = _DebugFileLogger()


# =============================================================================
# Standard Python Logging Setup
# =============================================================================

def _setup_standard_logging() -> logging.Logger:
    """
    Configure the standard Python logging framework.

    Returns:
        Configured logger instance for PatternMatch
    """
    logger = logging.getLogger('PatternMatch')
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    # File handler (always active)
    try:
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(file_handler)
    except OSError:
        pass  # Log directory not writable; console handler below still applies

    # Console handler: everything in DEBUG_MODE, warnings and up otherwise
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if DEBUG_MODE else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(console_handler)

    return logger


# Global standard logger instance
_logger = _setup_standard_logging()


def set_verbose(enabled: bool = True):
    """
    Raise or lower the console verbosity at runtime (used by the CLI --verbose flag).

    Args:
        enabled: True shows debug records on the console, False restores the
                 DEBUG_MODE default.
    """
    global _console_verbose
    _console_verbose = enabled or DEBUG_MODE
    _logger.setLevel(logging.DEBUG if _console_verbose else logging.INFO)
    for handler in _logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(logging.DEBUG if _console_verbose else logging.WARNING)


_console_verbose = DEBUG_MODE


# =============================================================================
# Timer Context Manager
# =============================================================================

class Timer:
    """
    Context manager for timing code blocks with optional logging.

    Uses time.perf_counter() so sub-millisecond scans still get a
    meaningful duration.

    Usage:
        with Timer("KMP sequential scan") as timer:
            # code to time
            pass
        elapsed = timer.duration_ms

    Output (auto_log=True):
        [14:32:01.120] Starting KMP sequential scan...
        [14:32:01.962] KMP sequential scan took 842 ms

    Attributes:
        operation_name: Name of the operation being timed
        duration_ms: Duration in milliseconds (available after exit)
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        """
        Initialize the timer.

        Args:
            operation_name: Descriptive name for the operation
            auto_log: If True, automatically log start/end
        """
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float | None = None
        self.end_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        if self.auto_log:
            debug_log(f"Starting {self.operation_name}...")
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        self.duration_ms = (self.end_time - self.start_time) * 1000

        if self.auto_log:
            debug_timing(self.operation_name, self.duration_ms / 1000)

        return False  # Don't suppress exceptions

    def get_duration_ms(self) -> float:
        """
        Get the measured duration in milliseconds.

        Raises:
            ValueError: If timer has not completed yet
        """
        if self.duration_ms is None:
            raise ValueError("Timer has not been completed yet")
        return self.duration_ms


# =============================================================================
# Public Logging Functions
# =============================================================================

def debug_log(message: str):
    """
    Log a debug message to the debug file, and to the console when verbose.

    Args:
        message: The message to log (prefix with [COMPONENT] for clarity)

    Example:
        debug_log("[KMP] Failure table built for 12-symbol pattern")
        debug_log("[Partition] 4 chunks of 250000 symbols, overlap 11")
    """
    _debug_file_logger.write(message)
    _logger.debug(message)


def debug(message: str):
    """Alias for debug_log()."""
    debug_log(message)


def info(message: str):
    """
    Log an informational message.

    Args:
        message: The message to log
    """
    _debug_file_logger.write(f"[INFO] {message}")
    _logger.info(message)


def warning(message: str):
    """
    Log a warning message.

    Warnings are always written to both file and console regardless of DEBUG_MODE.

    Args:
        message: The warning message to log
    """
    _debug_file_logger.write(f"[WARNING] {message}")
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only when verbose)
    """
    _debug_file_logger.write(f"[ERROR] {message}")
    _logger.error(message, exc_info=exc_info and _console_verbose)


def critical(message: str, exc_info: bool = True):
    """
    Log a critical error with exception traceback.

    Args:
        message: The critical error message
        exc_info: If True, include exception traceback
    """
    _debug_file_logger.write(f"[CRITICAL] {message}")
    _logger.critical(message, exc_info=exc_info and _console_verbose)


def format_duration(elapsed_seconds: float) -> str:
    """
    Format a duration in human-readable units.

    Example:
        format_duration(0.0042)  # "4.200 ms"
        format_duration(2.5)     # "2.50s"
    """
    if elapsed_seconds < 1:
        return f"{elapsed_seconds * 1000:.3f} ms"
    if elapsed_seconds < 60:
        return f"{elapsed_seconds:.2f}s"
    return f"{elapsed_seconds / 60:.1f}m"


def debug_timing(operation: str, elapsed_seconds: float):
    """
    Log operation timing information in human-readable format.

    For automatic timing with start/end logging, use the Timer context manager.

    Args:
        operation: Description of the operation that was timed
        elapsed_seconds: Elapsed time in seconds (float)
    """
    debug_log(f"{operation} took {format_duration(elapsed_seconds)}")


def close_debug_log():
    """
    Close the debug log file gracefully.

    Call this at application shutdown to ensure all logs are flushed.
    """
    _debug_file_logger.close()


__all__ = [
    'debug_log',
    'debug',
    'debug_timing',
    'format_duration',
    'info',
    'warning',
    'error',
    'critical',
    'close_debug_log',
    'set_verbose',
    'Timer',
    'DEBUG_MODE',
]

"""
Utility functions for exception logging that never raise themselves.
"""

import logging


def _safe_str(obj) -> str:
    """
    Safely convert an object to string, handling cases where __str__ or __repr__ might fail.

    Args:
        obj: The object to convert to string

    Returns:
        A string representation of the object, falling back to safe alternatives
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: Exception,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception together with the exception that caused it, if any.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g., "[Proxy]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    safe_prefix = _safe_str(prefix) if prefix is not None else ""
    if exception is None:
        logger.log(level, f"{safe_prefix} Exception: None")
        return

    message = f"{safe_prefix} {type(exception).__name__}: {_safe_str(exception)}"
    cause = exception.__cause__
    if cause is not None:
        message += f" (caused by {type(cause).__name__}: {_safe_str(cause)})"

    try:
        logger.log(level, message, exc_info=exception)
    except Exception:
        # Formatting the traceback failed, keep the message at least
        logger.log(level, message)


def format_exception_message(exception: Exception) -> str:
    """
    Format an exception message for an HTTP error detail.

    Args:
        exception: The exception to format

    Returns:
        A formatted string describing the exception
    """
    if exception is None:
        return "None"
    return _safe_str(exception)

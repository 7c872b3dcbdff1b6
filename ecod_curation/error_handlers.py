#!/usr/bin/env python3
"""
Error handling for the ecod-curate command line.

Known errors are reported as one line naming the offending input (file,
protein, option) taken from the error's details; the full details and
traceback only go to the log. Exit codes:

    0    success
    1    ECODCurationError (bad input, configuration or database problem)
    2    unexpected exception
    130  interrupted
"""
import sys
import traceback
import logging
from functools import wraps
from typing import Callable, TypeVar, Any, Dict, Optional, Tuple, Union

from .exceptions import (
    ECODCurationError, ConfigurationError, ConnectionError, FileOperationError,
    QueryError, ValidationError
)

T = TypeVar('T')

EXIT_ERROR = 1
EXIT_UNEXPECTED = 2
EXIT_INTERRUPTED = 130

# Details shown to the user, per error class; the rest stay in the log
DISPLAY_DETAILS: Dict[type, Tuple[str, ...]] = {
    FileOperationError: ('file_path', 'key'),
    ValidationError: ('source_id', 'pdb_id', 'chain_id', 'option', 'file_path'),
    ConfigurationError: ('path', 'option'),
    ConnectionError: ('protein', 'host', 'database', 'field'),
    QueryError: ('protein', 'code'),
}

HINTS: Dict[type, str] = {
    ConnectionError: "Check the database section of the configuration "
                     "or the ECOD_DATABASE__* environment variables",
    ConfigurationError: "Check the configuration file and ECOD_* environment variables",
}


def _display_details(error: ECODCurationError) -> Dict[str, Any]:
    for error_cls, keys in DISPLAY_DETAILS.items():
        if isinstance(error, error_cls):
            return {k: error.details[k] for k in keys if error.details.get(k) not in (None, "")}
    return {}


def _hint(error: ECODCurationError) -> Optional[str]:
    for error_cls, hint in HINTS.items():
        if isinstance(error, error_cls):
            return hint
    return None


def format_error(error: Exception, verbose: bool = False) -> str:
    """Format an error message for display

    Args:
        error: Exception object
        verbose: Include every detail, and the traceback of unexpected errors

    Returns:
        Formatted error message
    """
    if not isinstance(error, ECODCurationError):
        if verbose:
            return f"Unexpected Error ({error.__class__.__name__}): {error}\n{traceback.format_exc()}"
        return f"Unexpected Error: {error}"

    msg = f"{error.__class__.__name__}: {error.message}"
    details = error.details if verbose else _display_details(error)
    if details:
        msg += " (" + ", ".join(f"{k}={v}" for k, v in details.items()) + ")"

    hint = _hint(error)
    if hint:
        msg += f"\n{hint}"
    return msg


def handle_exceptions(exit_on_error: bool = False) -> Callable[[Callable[..., T]], Callable[..., Union[T, int]]]:
    """Decorator mapping exceptions raised by a command to exit codes

    Output is verbose when the wrapped function's logger is at debug level.

    Args:
        exit_on_error: Call sys.exit with the code instead of returning it
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Union[T, int]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Union[T, int]:
            logger = logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.info("Operation cancelled by user")
                print("\nOperation cancelled by user", file=sys.stderr)
                code = EXIT_INTERRUPTED
            except ECODCurationError as e:
                log_exception(logger, e)
                print(format_error(e, verbose=logger.isEnabledFor(logging.DEBUG)), file=sys.stderr)
                code = EXIT_ERROR
            except Exception as e:
                log_exception(logger, e)
                print(format_error(e), file=sys.stderr)
                print("See log for details. Run with -vv for more information.", file=sys.stderr)
                code = EXIT_UNEXPECTED

            if exit_on_error:
                sys.exit(code)
            return code
        return wrapper
    return decorator


def log_exception(logger: logging.Logger,
                  error: Exception,
                  level: int = logging.ERROR) -> None:
    """Log an exception with its details as the record's context

    Tracebacks are logged for unexpected errors always, for known errors
    only at debug level.

    Args:
        logger: Logger instance
        error: Exception object
        level: Logging level
    """
    if isinstance(error, ECODCurationError):
        ctx = dict(error.details)
        message = f"{error.__class__.__name__}: {error.message}"
        exc_info = logger.isEnabledFor(logging.DEBUG)
    else:
        ctx = {}
        message = f"Unexpected error: {error}"
        exc_info = True

    shown = [f"{k}={v}" for k, v in ctx.items() if k not in ('query', 'params')]
    if shown:
        message += " [" + ", ".join(shown) + "]"
    logger.log(level, message, extra={"context": ctx} if ctx else None, exc_info=exc_info)

"""Global logging and error handling utilities"""
import os
import logging
import traceback

logger = logging.getLogger(__name__)

# Debug mode re-raises immediately so the full traceback reaches the console.
# Release mode logs the traceback and reports a short message to the host first.
DEBUG_MODE = os.environ.get('GLITTER_DEBUG', '') not in ('', '0')

_error_reporter = None


def set_debug_mode(enabled: bool):
    """Switch between debug and release error handling"""
    global DEBUG_MODE
    DEBUG_MODE = bool(enabled)


def set_error_reporter(callback):
    """Set the callback used to show errors to the user

    Args:
        callback: Function(title, message), e.g. the terminal front end's
            status-line writer. None removes it.
    """
    global _error_reporter
    _error_reporter = callback


def logger_raise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with an optional user-facing report in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to report (optional)
        title: Title for the report

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Logs the full traceback
        - Reports the user message or exception string
        - Then raises the exception
    """
    if DEBUG_MODE:
        raise e

    tb = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
    logger.error(f"{title}: {tb}")

    message = user_message if user_message else str(e)
    if _error_reporter:
        _error_reporter(title, message)
    else:
        logger.error(f"ERROR (no reporter): {title} - {message}")

    # Re-raise so the caller can abandon the operation
    raise e

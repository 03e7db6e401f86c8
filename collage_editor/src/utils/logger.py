"""Global logging and error handling utilities"""
import sys
import logging
import traceback
from PyQt5.QtWidgets import QMessageBox

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

logger = logging.getLogger(__name__)

_main_window = None

def set_main_window(window):
    """Set the main window reference for showing popups"""
    global _main_window
    _main_window = window

def show_alert(message: str, title: str = "Collage Editor"):
    """Blocking user-facing alert for input errors and failed operations.

    Falls back to a log line when no main window has been registered
    (headless use, tests).
    """
    if _main_window:
        QMessageBox.warning(_main_window, title, message)
    else:
        logger.warning("ALERT (no window): %s - %s", title, message)

def loggerReport(e: Exception, user_message: str = None, title: str = "Error"):
    """Report a recoverable failure without stopping the application

    Args:
        e: The exception to report
        user_message: User-friendly message to show in popup (optional)
        title: Title for the popup dialog

    Always logs the full traceback and shows a popup. In DEBUG_MODE the
    popup also carries the exception text.
    """
    logger.error("ERROR: %s", "".join(traceback.format_exception(type(e), e, e.__traceback__)))

    message = user_message if user_message else str(e)
    if DEBUG_MODE and user_message:
        message = f"{user_message}\n\n{e}"
    if _main_window:
        QMessageBox.critical(_main_window, title, message)
    else:
        logger.error("ERROR POPUP (no window): %s - %s", title, message)

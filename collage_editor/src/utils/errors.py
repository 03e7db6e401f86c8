"""Exception types shared across the editor.

InputError is for user mistakes (reported via alert, state unchanged),
ImageLoadError for bitmaps that cannot be fetched or decoded, ApiError for
backend communication failures.
"""


class CollageError(Exception):
    """Base class for editor errors."""


class InputError(CollageError):
    """Operation aborted because the user's input was incomplete."""


class ImageLoadError(CollageError):
    """An image source could not be fetched or decoded."""

    def __init__(self, src: str, reason: str = ''):
        self.src = src
        self.reason = reason
        preview = src if len(src) <= 64 else src[:61] + '...'
        message = f"Failed to load image {preview}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ApiError(CollageError):
    """Request to the backend failed (network error or non-2xx status)."""

    def __init__(self, message: str, status: int = None):
        self.status = status
        super().__init__(message)


class InvalidPayloadError(ApiError):
    """Backend rejected the request body (HTTP 400)."""

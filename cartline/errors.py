"""
Cart Errors

Exception taxonomy plus centralized messages, so the same wording is used
wherever an error is raised.
"""

from typing import Any

# Model reference errors
ERROR_INVALID_MODEL_REF = "Model reference must provide an id and a type"

# Image resolver errors
ERROR_IMAGE_RESOLVER_NOT_FOUND = "Unknown image resolver"
ERROR_IMAGE_RESOLVER_INVALID = "Image resolver must implement ImageResolver"

# Callback errors
ERROR_CALLBACK_INVALID = "Invalid callback reference"
ERROR_CALLBACK_NOT_FOUND = "Unknown callback"
ERROR_CALLBACK_NOT_CALLABLE = "Callback is not callable"

# Storage errors
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"


class CartError(Exception):
    """Base error for the cart domain."""

    def __init__(self, message: str, code: str | None = None, raw_error: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.raw_error = raw_error


class ConfigurationError(CartError):
    """A cart, item or hook is wired up incorrectly.

    Raised synchronously and never retried: a bad model reference, an unknown
    image resolver or a callback that cannot be resolved is a programming
    error, not a runtime condition.
    """


class StorageError(CartError):
    """Storage driver failed to read or write a cart."""

    def __init__(
        self,
        message: str = ERROR_STORAGE_UNAVAILABLE,
        code: str | None = "STORAGE_UNAVAILABLE",
        retryable: bool = True,
        raw_error: Any = None,
    ) -> None:
        super().__init__(message, code=code, raw_error=raw_error)
        self.retryable = retryable


__all__ = [
    "CartError",
    "ConfigurationError",
    "StorageError",
    "ERROR_INVALID_MODEL_REF",
    "ERROR_IMAGE_RESOLVER_NOT_FOUND",
    "ERROR_IMAGE_RESOLVER_INVALID",
    "ERROR_CALLBACK_INVALID",
    "ERROR_CALLBACK_NOT_FOUND",
    "ERROR_CALLBACK_NOT_CALLABLE",
    "ERROR_STORAGE_UNAVAILABLE",
]

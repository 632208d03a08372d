"""
FeedStore Custom Exceptions
==========================

Exception hierarchy for FeedStore with error codes, context information,
and user-friendly error messages.
"""

import sqlite3
from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"

    # Database errors (D001-D099)
    DATABASE_CONNECTION = "D001"
    DATABASE_CONSTRAINT = "D003"
    DATABASE_CORRUPTION = "D005"
    DATABASE_ERROR = "D006"

    # Storage errors (S101-S199)
    RECORD_INSERT_FAILED = "S101"
    RECORD_NOT_FOUND = "S102"
    ROW_MAPPING_FAILED = "S103"

    # Validation errors (V001-V099)
    VALIDATION_OUT_OF_RANGE = "V003"

    # System errors (X001-X099)
    SYSTEM_PERMISSION_DENIED = "X001"


class FeedStoreError(Exception):
    """Base exception for all FeedStore errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize FeedStore error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(FeedStoreError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for FeedStoreError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message"]
            },
        )


class StorageError(FeedStoreError):
    """Feed item storage errors.

    Every failure surfaced by the storage layer is a StorageError, including
    failures raised by the SQLite engine itself (chained as ``__cause__``).
    """

    def __init__(self, message: str, query: Optional[str] = None, **kwargs):
        """Initialize storage error.

        Args:
            message: Error message
            query: SQL statement that caused the error
            **kwargs: Additional arguments for FeedStoreError
        """
        context = kwargs.get("context", {})
        if query:
            context["query"] = query

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.DATABASE_ERROR),
            context=context,
            user_message=kwargs.get("user_message", "Storage operation failed"),
            recoverable=kwargs.get("recoverable", False),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message", "recoverable"]
            },
        )


class RecordNotFoundError(StorageError):
    """A read path that requires an existing live record found none."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", ErrorCode.RECORD_NOT_FOUND)
        kwargs.setdefault("user_message", "No matching record")
        super().__init__(message, **kwargs)


class RowMappingError(StorageError):
    """A result row could not be mapped to a FeedItem."""

    def __init__(self, message: str, column: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if column:
            context["column"] = column
        kwargs.setdefault("error_code", ErrorCode.ROW_MAPPING_FAILED)
        super().__init__(message, context=context, **kwargs)


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> FeedStoreError:
    """Convert generic exceptions to FeedStore exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        FeedStore exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, FeedStoreError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, sqlite3.IntegrityError):
        error = StorageError(
            message=f"Constraint violation during {operation}: {exception}",
            error_code=ErrorCode.DATABASE_CONSTRAINT,
            context=context,
        )

    elif isinstance(exception, sqlite3.OperationalError):
        error = StorageError(
            message=f"Database unavailable during {operation}: {exception}",
            error_code=ErrorCode.DATABASE_CONNECTION,
            context=context,
            recoverable=True,
        )

    elif isinstance(exception, sqlite3.Error):
        error = StorageError(
            message=f"Database error during {operation}: {exception}",
            context=context,
        )

    elif isinstance(exception, PermissionError):
        error = FeedStoreError(
            message=f"Permission denied during {operation}: {exception}",
            error_code=ErrorCode.SYSTEM_PERMISSION_DENIED,
            context=context,
            user_message="Access denied",
        )

    else:
        error = FeedStoreError(
            message=f"Unexpected error during {operation}: {exception}",
            context=context,
            user_message="An unexpected error occurred",
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception."""
    if isinstance(exception, FeedStoreError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."

"""GraphQL error handling and production error masking.

Errors raised by resolvers reach the client with structured codes in
``extensions.code``; application exceptions keep their message, anything
else is an internal error that is logged with its stack trace and masked
in production.

Usage:
    # In router.py, when building the HTTP response:
    response["errors"] = process_graphql_errors(result.errors)

    # In schema.py, when strawberry reports execution errors:
    for error in errors:
        log_error(error, execution_context)
"""

from __future__ import annotations

import logging
import traceback
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError, GraphQLFormattedError

from list_api.core.exceptions import (
    AppException,
    NotFoundException,
    UnauthorizedException,
    UserInputError,
)
from list_api.core.settings import get_settings

if TYPE_CHECKING:
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

__all__ = [
    "ErrorCategory",
    "error_code",
    "is_user_facing_error",
    "log_error",
    "mask_internal_error",
    "process_graphql_errors",
]


# ============================================================================
# Error Categories
# ============================================================================


class ErrorCategory:
    """Error codes exposed in ``extensions.code``."""

    BAD_USER_INPUT = "BAD_USER_INPUT"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "GRAPHQL_VALIDATION_FAILED"
    INTERNAL = "INTERNAL_SERVER_ERROR"


# ============================================================================
# Main Error Processing
# ============================================================================


def process_graphql_errors(errors: list[GraphQLError]) -> list[GraphQLFormattedError]:
    """Format GraphQL errors before returning them to the client.

    This function:
    1. Keeps user-facing errors (bad input, auth, not found, query validation)
    2. Masks internal errors in production
    3. Adds structured error codes to extensions

    Args:
        errors: List of GraphQL errors from execution

    Returns:
        List of formatted errors safe to return to client
    """
    is_production = get_settings().environment == "production"
    processed_errors: list[GraphQLFormattedError] = []

    for error in errors:
        if is_user_facing_error(error):
            formatted = error.formatted
            formatted["extensions"] = {
                **formatted.get("extensions", {}),
                "code": error_code(error),
            }
            processed_errors.append(formatted)
        elif is_production:
            processed_errors.append(mask_internal_error(error))
        else:
            # In development, include full error details
            formatted = error.formatted
            formatted["extensions"] = {
                **formatted.get("extensions", {}),
                "code": ErrorCategory.INTERNAL,
                "debug": {
                    "exception_type": type(error.original_error).__name__,
                    "exception_message": str(error.original_error),
                },
            }
            processed_errors.append(formatted)

    return processed_errors


# ============================================================================
# Error Classification
# ============================================================================


def is_user_facing_error(error: GraphQLError) -> bool:
    """Determine if error should be shown to user as-is.

    Application exceptions carry messages meant for the caller. Errors
    without an original exception come from parsing or validating the
    query document.
    """
    original = error.original_error
    return original is None or isinstance(original, AppException)


def error_code(error: GraphQLError) -> str:
    """``extensions.code`` for an error."""
    original = error.original_error
    if original is None:
        return ErrorCategory.VALIDATION
    if isinstance(original, UserInputError):
        return ErrorCategory.BAD_USER_INPUT
    if isinstance(original, UnauthorizedException):
        return ErrorCategory.UNAUTHENTICATED
    if isinstance(original, NotFoundException):
        return ErrorCategory.NOT_FOUND
    if isinstance(original, AppException) and original.status_code < 500:
        return ErrorCategory.BAD_USER_INPUT
    return ErrorCategory.INTERNAL


# ============================================================================
# Error Masking
# ============================================================================


def mask_internal_error(error: GraphQLError) -> GraphQLFormattedError:
    """Replace internal error details with a generic message.

    Location and path are kept so clients can tell which field failed.
    """
    masked: dict[str, Any] = {
        "message": "An internal error occurred. Please try again later.",
        "extensions": {
            "code": ErrorCategory.INTERNAL,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    }
    if error.locations:
        masked["locations"] = [location.formatted for location in error.locations]
    if error.path:
        masked["path"] = error.path
    return masked  # type: ignore[return-value]


# ============================================================================
# Error Logging
# ============================================================================


def log_error(error: GraphQLError, execution_context: ExecutionContext | None) -> None:
    """Log error with full details for server-side debugging.

    Args:
        error: GraphQL error to log
        execution_context: Execution context with operation info
    """
    log_context: dict[str, Any] = {
        "error_message": error.message,
        "error_path": error.path,
        "error_code": error_code(error),
    }

    if execution_context:
        if execution_context.operation_name:
            log_context["operation_name"] = execution_context.operation_name
        context = execution_context.context
        if context is not None and getattr(context, "user_id", None):
            log_context["user_id"] = str(context.user_id)

    original = error.original_error
    if original is not None:
        log_context["exception_type"] = type(original).__name__
        log_context["exception_message"] = str(original)

    if is_user_facing_error(error):
        # Expected errors, log at INFO
        logger.info("GraphQL user-facing error", extra=log_context)
    else:
        log_context["stack_trace"] = "".join(
            traceback.format_exception(type(original), original, original.__traceback__)
        )
        logger.error("GraphQL internal error", extra=log_context)

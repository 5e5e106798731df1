"""Unit tests for GraphQL error formatting and masking."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest
from graphql import GraphQLError

from list_api.core.exceptions import NotFoundException, UnauthorizedException, UserInputError
from list_api.features.graphql import error_handler
from list_api.features.graphql.error_handler import (
    ErrorCategory,
    error_code,
    is_user_facing_error,
    log_error,
    process_graphql_errors,
)


def graphql_error(original: Exception | None, message: str = "failed") -> GraphQLError:
    return GraphQLError(message, path=["savedItems"], original_error=original)


@pytest.fixture
def environment(monkeypatch):
    def _set(name: str) -> None:
        monkeypatch.setattr(
            error_handler, "get_settings", lambda: SimpleNamespace(environment=name)
        )

    return _set


@pytest.mark.unit
class TestErrorCodes:
    """Tests for extensions.code classification."""

    @pytest.mark.parametrize(
        ("original", "code"),
        [
            (None, ErrorCategory.VALIDATION),
            (UserInputError("Cursor not found."), ErrorCategory.BAD_USER_INPUT),
            (UnauthorizedException(), ErrorCategory.UNAUTHENTICATED),
            (NotFoundException("missing"), ErrorCategory.NOT_FOUND),
            (RuntimeError("boom"), ErrorCategory.INTERNAL),
        ],
    )
    def test_error_code(self, original, code):
        assert error_code(graphql_error(original)) == code

    def test_user_facing(self):
        assert is_user_facing_error(graphql_error(UserInputError("bad")))
        assert is_user_facing_error(graphql_error(None))
        assert not is_user_facing_error(graphql_error(ValueError("oops")))


@pytest.mark.unit
class TestProcessGraphQLErrors:
    """Tests for the client-facing error list."""

    def test_user_input_error_keeps_message(self, environment):
        environment("production")
        (formatted,) = process_graphql_errors(
            [graphql_error(UserInputError("Cursor not found."), "Cursor not found.")]
        )

        assert formatted["message"] == "Cursor not found."
        assert formatted["extensions"]["code"] == "BAD_USER_INPUT"
        assert formatted["path"] == ["savedItems"]

    def test_internal_error_masked_in_production(self, environment):
        environment("production")
        (formatted,) = process_graphql_errors([graphql_error(RuntimeError("db password leaked"))])

        assert "leaked" not in formatted["message"]
        assert formatted["extensions"]["code"] == "INTERNAL_SERVER_ERROR"
        assert formatted["path"] == ["savedItems"]

    def test_internal_error_detailed_outside_production(self, environment):
        environment("development")
        (formatted,) = process_graphql_errors([graphql_error(RuntimeError("boom"), "boom")])

        assert formatted["message"] == "boom"
        assert formatted["extensions"]["debug"]["exception_type"] == "RuntimeError"


@pytest.mark.unit
class TestLogError:
    """Tests for server-side error logging."""

    def test_user_facing_logged_at_info(self, caplog):
        with caplog.at_level(logging.INFO, logger=error_handler.__name__):
            log_error(graphql_error(UserInputError("bad")), None)

        (record,) = caplog.records
        assert record.levelno == logging.INFO
        assert record.error_code == "BAD_USER_INPUT"

    def test_internal_logged_with_stack_trace(self, caplog):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            error = graphql_error(e)

        with caplog.at_level(logging.INFO, logger=error_handler.__name__):
            log_error(error, SimpleNamespace(operation_name="Op", context=None))

        (record,) = caplog.records
        assert record.levelno == logging.ERROR
        assert record.operation_name == "Op"
        assert "RuntimeError: boom" in record.stack_trace

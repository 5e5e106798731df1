"""Unit tests for database session helpers."""

from __future__ import annotations

import pytest

from list_api.infra.database.session import classify_statement


@pytest.mark.unit
class TestClassifyStatement:
    """Tests for the query duration metric label."""

    @pytest.mark.parametrize(
        ("statement", "operation"),
        [
            ("SELECT 1", "SELECT"),
            ("  insert into temp_getlist_clientapi (item_id) select 1", "INSERT"),
            ("CREATE TEMPORARY TABLE temp_getlist_clientapi_hl (item_id BIGINT)", "CREATE"),
            ("DROP TEMPORARY TABLE temp_getlist_clientapi", "DROP"),
            ("SAVEPOINT sa_savepoint_1", "UNKNOWN"),
            ("", "UNKNOWN"),
            (None, "UNKNOWN"),
        ],
    )
    def test_leading_keyword(self, statement, operation):
        assert classify_statement(statement) == operation

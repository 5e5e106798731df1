"""Unit tests for filter compilation that need no database."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from list_api.features.saves.filters import FilterCompiler
from list_api.features.saves.models import ListItem
from list_api.features.saves.schemas import ContentType


@pytest.fixture
def compiler() -> FilterCompiler:
    return FilterCompiler(registry=None, user_id=1)  # type: ignore[arg-type]


@pytest.mark.unit
class TestContentType:
    """Tests for the content type join."""

    @pytest.mark.parametrize(
        ("content_type", "column"),
        [(ContentType.VIDEO, "video"), (ContentType.ARTICLE, "is_article")],
    )
    def test_known_types_filter_extended_column(self, compiler, content_type, column):
        query = compiler._apply_content_type(select(ListItem.item_id), content_type)

        assert f"items_extended.{column} = " in str(query)

    def test_unknown_type_raises(self, compiler):
        query = select(ListItem.item_id)

        with pytest.raises(ValueError, match="Unknown content type"):
            compiler._apply_content_type(query, "AUDIO")  # type: ignore[arg-type]

"""
Truncation and displayed-card merge tests
"""

from datetime import datetime, timezone

from concierge_ai.schemas.context_schemas import DisplayedCard
from concierge_ai.utils.context_helpers import merge_displayed_cards, round_rating, truncate_text

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestTruncateText:

    def test_long_text_is_cut_with_ellipsis(self):
        result = truncate_text("a" * 350, 300)
        assert len(result) == 300
        assert result == "a" * 299 + "…"

    def test_text_at_limit_is_unchanged(self):
        text = "b" * 300
        assert truncate_text(text, 300) == text

    def test_whitespace_is_collapsed(self):
        assert truncate_text("  hello \n\n  world\t ") == "hello world"


def test_round_rating():
    assert round_rating(4.26) == 4.3
    assert round_rating(4.25) == 4.3
    assert round_rating(4) == 4.0
    assert round_rating(None) is None
    assert round_rating("4.5") is None
    assert round_rating(float("nan")) is None


class TestMergeDisplayedCards:

    def test_new_places_are_appended(self):
        merged = merge_displayed_cards([], [{"place_id": "p1", "name": "Cafe One", "rating": 4.5}], now=NOW)
        assert len(merged) == 1
        card = merged[0]
        assert card.place_id == "p1"
        assert card.clicked is False
        assert card.displayed_at == NOW

    def test_known_places_are_updated_in_place(self):
        existing = [
            DisplayedCard(place_id="p1", name="Cafe One", rating=4.0, clicked=True, displayed_at=NOW),
            DisplayedCard(place_id="p2", name="Bar Two"),
        ]
        merged = merge_displayed_cards(existing, [{"place_id": "p1", "rating": 4.4, "name": None}])

        assert [c.place_id for c in merged] == ["p1", "p2"]
        assert merged[0].rating == 4.4
        assert merged[0].name == "Cafe One"
        assert merged[0].clicked is True
        assert existing[0].rating == 4.0

    def test_places_without_id_are_skipped(self):
        merged = merge_displayed_cards([], [{"name": "Nameless"}, {"place_id": "", "name": "Blank"}])
        assert merged == []

    def test_unknown_fields_are_not_copied(self):
        merged = merge_displayed_cards([], [{"place_id": "p1", "photo_ref": "xyz"}], now=NOW)
        assert "photo_ref" not in merged[0].model_dump()

"""
Travel type registry tests
"""

import pytest

from concierge_ai.exceptions import UnknownTravelTypeError
from concierge_ai.interfaces.travel_type_registry import (
    TRAVEL_TYPE_CODES,
    TravelTypeRegistry,
    _TRAVEL_TYPE_TABLE,
    get_search_query_template,
    get_search_query_variants,
    get_system_prompt_for_travel_type,
    get_travel_type_info,
    get_types_for_travel_type,
    is_valid_travel_type_code,
    list_travel_types,
)


class TestValidation:

    def test_all_sixteen_codes_are_valid(self):
        assert len(TRAVEL_TYPE_CODES) == 16
        assert all(is_valid_travel_type_code(code) for code in TRAVEL_TYPE_CODES)

    @pytest.mark.parametrize("code", ["grlp", "GRL", "GRLPX", "XXXX", "", None, 1234])
    def test_invalid_codes(self, code):
        assert not is_valid_travel_type_code(code)

    def test_unknown_code_raises(self):
        with pytest.raises(UnknownTravelTypeError) as excinfo:
            get_travel_type_info("ZZZZ")
        assert excinfo.value.code == "ZZZZ"
        assert isinstance(excinfo.value, KeyError)
        assert str(excinfo.value) == "Unknown travel type code: 'ZZZZ'"

    def test_incomplete_table_is_rejected(self):
        with pytest.raises(RuntimeError):
            TravelTypeRegistry(table=_TRAVEL_TYPE_TABLE[:15])


class TestLookups:

    @pytest.mark.parametrize("code,name", [
        ("GRLP", "The Itinerary CEO"),
        ("GDHF", "The Serendipity Chaser"),
        ("GDLF", "The Glitch Hunter"),
        ("SDLF", "The Rabbit-Hole Nomad"),
    ])
    def test_names(self, code, name):
        assert get_travel_type_info(code).name == name

    def test_list_is_in_canonical_order(self):
        assert [info.code for info in list_travel_types()] == list(TRAVEL_TYPE_CODES)

    def test_every_type_has_search_data(self):
        for info in list_travel_types():
            assert info.emoji
            assert info.recommended_types
            assert get_search_query_template(info.code)
            assert len(get_search_query_variants(info.code)) >= 1

    def test_returned_lists_are_copies(self):
        variants = get_search_query_variants("GRLP")
        variants.append("mutated")
        types = get_types_for_travel_type("GRLP")
        types.clear()

        assert "mutated" not in get_search_query_variants("GRLP")
        assert get_types_for_travel_type("GRLP")

    def test_to_dict(self):
        data = get_travel_type_info("GDLF").to_dict()
        assert data["code"] == "GDLF"
        assert isinstance(data["search_query_variants"], list)


class TestSystemPrompt:

    def test_prompt_mentions_persona(self):
        info = get_travel_type_info("GRLP")
        prompt = get_system_prompt_for_travel_type("GRLP")

        paragraphs = prompt.split("\n\n")
        assert len(paragraphs) == 7
        assert paragraphs[1] == f"Persona: {info.name} {info.emoji} — {info.short_description}."
        assert paragraphs[2].startswith("Voice: efficient, planned, group;")

    def test_prompt_is_deterministic(self):
        fresh = TravelTypeRegistry()
        for code in TRAVEL_TYPE_CODES:
            assert fresh.get_system_prompt(code) == get_system_prompt_for_travel_type(code)

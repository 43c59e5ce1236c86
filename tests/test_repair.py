"""Tests for JSON repair stages and object-level salvage."""

import json

import pytest

from app.modules.cards.errors import JsonSyntaxError
from app.modules.cards.repair import (
    JsonRepairer,
    bare_values,
    close_truncated,
    missing_commas,
    quote_keys,
    single_quotes,
    trailing_commas,
)
from app.modules.cards.validator import validate_cards


@pytest.fixture
def repairer():
    return JsonRepairer()


class TestStages:
    def test_quote_keys(self):
        assert quote_keys("{title: 1, 'content': 2}") == '{"title": 1, "content": 2}'

    def test_quote_keys_leaves_strings_alone(self):
        text = '{"title": "Note, this: matters"}'
        assert quote_keys(text) == text

    def test_single_quotes(self):
        assert single_quotes("{\"a\": 'hello', \"b\": 'x'}") == '{"a": "hello", "b": "x"}'

    def test_single_quotes_unescapes_apostrophes(self):
        assert single_quotes(r"""{"a": 'It\'s big'}""") == '{"a": "It\'s big"}'

    def test_trailing_commas(self):
        assert trailing_commas('[{"a": 1,}, ]') == '[{"a": 1} ]'

    def test_missing_commas(self):
        assert missing_commas('[{"a": 1} {"a": 2}]') == '[{"a": 1}, {"a": 2}]'

    def test_bare_values(self):
        assert bare_values('{"a": hello world, "b": true}') == (
            '{"a": "hello world", "b": true}'
        )

    def test_bare_values_keeps_literals_and_numbers(self):
        text = '{"a": null, "b": false, "c": 12}'
        assert bare_values(text) == text

    def test_close_truncated_array(self):
        text = '[{"title": "A", "content": "B"}, {"title": "C", "cont'
        assert json.loads(close_truncated(text)) == [{"title": "A", "content": "B"}]

    def test_close_truncated_wraps_object_sequence(self):
        text = '{"title": "A", "content": "B"}, {"title": "C", "content": "D"}'
        assert len(json.loads(close_truncated(text))) == 2


class TestJsonRepairer:
    def test_unquoted_keys_and_single_quotes(self, repairer):
        result = repairer.repair("[{title: 'A', content: 'B'}]")

        cards = validate_cards(result.value)
        assert len(cards) == 1
        assert cards[0].title == "A"
        assert cards[0].content == "B"
        assert cards[0].fun_fact is None
        assert result.stage == "single_quotes"
        assert not result.salvaged

    def test_trailing_comma_keeps_string_content(self, repairer):
        result = repairer.repair('[{"title": "Time, here: now", "content": "B",}]')
        assert result.value == [{"title": "Time, here: now", "content": "B"}]
        assert result.stage == "trailing_commas"

    def test_adjacent_objects(self, repairer):
        result = repairer.repair('[{"title": "A", "content": "B"}{"title": "C", "content": "D"}]')
        assert [c["title"] for c in result.value] == ["A", "C"]

    def test_truncated_reply(self, repairer):
        payload = (
            '[{"title": "A", "content": "B"}, {"title": "C", "content": "D"}, '
            '{"title": "E", "content": "The sentence was cut'
        )
        result = repairer.repair(payload)
        assert result.stage == "close_truncated"
        assert [c["title"] for c in result.value] == ["A", "C"]

    def test_valid_json_is_returned_as_is(self, repairer):
        result = repairer.repair('[{"title": "A", "content": "B"}]')
        assert result.stage == "none"

    def test_salvage_discards_broken_object(self, repairer):
        payload = '[{"title":"A","content":"B"}, {BROKEN}, {"title":"C","content":"D"}]'

        result = repairer.repair(payload)

        assert result.salvaged
        assert result.discarded == 1
        cards = validate_cards(result.value)
        assert [(c.title, c.content) for c in cards] == [("A", "B"), ("C", "D")]

    def test_salvage_repairs_objects_individually(self, repairer):
        payload = "[{title: 'A', content: 'B'} ??? {\"title\": \"C\", \"content\": \"D\"}]"
        result = repairer.repair(payload)
        assert result.salvaged
        assert [c["title"] for c in result.value] == ["A", "C"]

    @pytest.mark.parametrize("payload", ["[not json at all]", "{ : }", "[1, 2,, 3]"])
    def test_unrepairable(self, repairer, payload):
        with pytest.raises(JsonSyntaxError) as exc_info:
            repairer.repair(payload)
        assert exc_info.value.raw == payload

    def test_deep_nesting_is_a_syntax_error(self, repairer):
        payload = "[" * 100_000 + "]" * 100_000
        with pytest.raises(JsonSyntaxError):
            repairer.repair(payload)

"""Tests for payload extraction from raw model replies."""

import pytest

from app.modules.cards.errors import StructureNotFoundError
from app.modules.cards.sanitizer import extract_payload, strip_control_characters


class TestStripControlCharacters:
    def test_removes_c0_and_c1_ranges(self):
        text = "a\x00b\x1fc\x7fd\x9fe\nf\tg"
        assert strip_control_characters(text) == "abcdefg"

    def test_keeps_regular_unicode(self):
        assert strip_control_characters("Dinosaurs 🦕 ünïcödé") == "Dinosaurs 🦕 ünïcödé"


class TestExtractPayload:
    def test_array_wrapped_in_prose(self):
        raw = 'Sure! [{"title":"A","content":"B","funFact":"C"}] Hope that helps!'
        assert extract_payload(raw) == '[{"title":"A","content":"B","funFact":"C"}]'

    def test_markdown_fences_are_dropped(self):
        raw = '```json\n[{"title": "A", "content": "B"}]\n```'
        assert extract_payload(raw) == '[{"title": "A", "content": "B"}]'

    def test_control_characters_removed_before_slicing(self):
        raw = '[{"title":"A",\n"content":"B\x07"}]'
        assert extract_payload(raw) == '[{"title":"A","content":"B"}]'

    def test_falls_back_to_object_markers(self):
        raw = 'Here is one card: {"title": "A", "content": "B"} enjoy'
        assert extract_payload(raw) == '{"title": "A", "content": "B"}'

    def test_reversed_array_markers_use_object_markers(self):
        raw = '] oops {"title": "A", "content": "B"} ['
        assert extract_payload(raw) == '{"title": "A", "content": "B"}'

    def test_first_and_last_bracket_heuristic(self):
        raw = 'See note [1]: [{"title": "A", "content": "B"}]'
        assert extract_payload(raw) == '[1]: [{"title": "A", "content": "B"}]'

    @pytest.mark.parametrize(
        "raw", ["", "I cannot help with that.", "} backwards {", "only [ opener"]
    )
    def test_no_structure(self, raw):
        with pytest.raises(StructureNotFoundError) as exc_info:
            extract_payload(raw)
        assert exc_info.value.raw == raw

"""
Test macro content processing
Breakpoint segmentation, marker removal, trigger stripping and key codes
"""

import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from slotmacro.macro.processor import (
    has_breakpoints, split_breakpoints, strip_breakpoints, strip_trigger
)
from slotmacro.macro import keycodes


class TestBreakpointSegmentation:
    """split_breakpoints / has_breakpoints"""

    def test_split_three_segments(self):
        """TC-PROC-001: markers split content in order"""
        assert split_breakpoints("ab##cd##ef", "##") == ["ab", "cd", "ef"]

    def test_no_marker_single_segment(self):
        """TC-PROC-002: content without marker is one segment"""
        assert split_breakpoints("abcdef", "##") == ["abcdef"]

    def test_trailing_marker_keeps_empty_segment(self):
        """TC-PROC-003: marker at the end yields an empty last segment"""
        assert split_breakpoints("ab##", "##") == ["ab", ""]
        assert split_breakpoints("##ab", "##") == ["", "ab"]

    def test_empty_marker(self):
        """TC-PROC-004: empty marker never splits"""
        assert split_breakpoints("ab##cd", "") == ["ab##cd"]
        assert has_breakpoints("ab##cd", "") is False

    def test_has_breakpoints(self):
        """TC-PROC-005: marker detection"""
        assert has_breakpoints("ab##cd", "##") is True
        assert has_breakpoints("ab#cd", "##") is False

    def test_marker_with_key_notation(self):
        """TC-PROC-006: markers written in key notation split decoded text"""
        decoded = "ihello<Esc><C-B>jj<C-B>x"
        assert split_breakpoints(decoded, "<C-B>") == ["ihello<Esc>", "jj", "x"]


class TestStripping:
    """strip_breakpoints / strip_trigger"""

    def test_strip_breakpoints(self):
        """TC-PROC-010: every marker is removed"""
        assert strip_breakpoints("ab##cd", "##") == "abcd"
        assert strip_breakpoints("##a##b##", "##") == "ab"

    def test_strip_trigger_exact_length(self):
        """TC-PROC-011: exactly trigger_length characters are removed"""
        assert strip_trigger("ihello\x1bq", 1) == "ihello\x1b"
        assert strip_trigger("dwjj<q", 2) == "dwjj"

    def test_strip_trigger_only_trigger(self):
        """TC-PROC-012: a capture holding only the trigger becomes empty"""
        assert strip_trigger("q", 1) == ""
        assert strip_trigger("", 1) == ""

    def test_strip_trigger_zero_length(self):
        """TC-PROC-013: zero length leaves the capture alone"""
        assert strip_trigger("abc", 0) == "abc"


class TestKeycodes:
    """Key notation <-> raw characters"""

    def test_encode_named_keys(self):
        """TC-KEYS-001: named keys become raw characters"""
        assert keycodes.encode_keys("ihi<Esc>") == "ihi\x1b"
        assert keycodes.encode_keys("<CR><Tab><Space>") == "\r\t "
        assert keycodes.encode_keys("<lt>") == "<"

    def test_encode_is_case_insensitive(self):
        """TC-KEYS-002: <C-f>, <c-F> and <C-F> are the same key"""
        assert keycodes.encode_keys("<C-f>") == "\x06"
        assert keycodes.encode_keys("<c-F>") == "\x06"
        assert keycodes.encode_keys("<esc>") == "\x1b"

    def test_unknown_token_stays_literal(self):
        """TC-KEYS-003: unknown notation is kept as typed"""
        assert keycodes.encode_keys("<Foo>x") == "<Foo>x"
        assert keycodes.encode_keys("a<b") == "a<b"

    def test_decode_canonical(self):
        """TC-KEYS-004: raw characters decode to one canonical notation"""
        assert keycodes.decode_keys("\x06") == "<C-F>"
        assert keycodes.decode_keys("ihi\x1b") == "ihi<Esc>"
        assert keycodes.decode_keys("a b") == "a<Space>b"
        assert keycodes.decode_keys("<") == "<lt>"

    def test_normalize_keys(self):
        """TC-KEYS-005: different spellings normalize equally"""
        assert keycodes.normalize_keys("<c-q>") == keycodes.normalize_keys("<C-Q>") == "<C-Q>"
        assert keycodes.normalize_keys("##") == "##"

    @pytest.mark.parametrize("raw", ["abc", "\x00\x01\x1f", "x<y>z", "\r\n\t\x08\x7f", "<Esc>"])
    def test_decode_encode_restores_raw(self, raw):
        """TC-KEYS-006: encode(decode(raw)) gives back raw"""
        assert keycodes.encode_keys(keycodes.decode_keys(raw)) == raw


if __name__ == "__main__":
    # Run with: python -m pytest tests/test_processor.py -v
    pytest.main([__file__, "-v", "-s"])

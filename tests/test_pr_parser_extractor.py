"""Tests for Before/After URL pair extraction."""

import logging

import pytest

from visual_review.models.url_pair import CandidatePair
from visual_review.pr_parser.extractor import (
    ScanState,
    extract_candidate_pairs,
    scan_line,
    scan_lines,
)


class TestScanLine:
    """Tests for the single-line scan step."""

    def test_before_sets_pending(self):
        state = scan_line(ScanState(), "- Before: https://a.example/x")
        assert state.pending_before == "https://a.example/x"
        assert state.pending_after is None
        assert state.pairs == ()

    def test_unrelated_line_keeps_state(self):
        state = ScanState(pending_before="https://a.example/x")
        assert scan_line(state, "Some description text") is state

    def test_after_with_pending_before_emits_and_clears(self):
        state = scan_line(ScanState(pending_before="https://a.example/x"),
                          "- After: https://b.example/y")
        assert state.pairs == (CandidatePair("https://a.example/x", "https://b.example/y"),)
        assert state.pending_before is None
        assert state.pending_after is None

    def test_after_without_before_is_kept_pending(self):
        state = scan_line(ScanState(), "After: https://b.example/y")
        assert state.pending_after == "https://b.example/y"
        assert state.pairs == ()

    def test_later_before_overwrites_unconsumed_before(self):
        state = scan_lines([
            "Before: https://a.example/old",
            "Before: https://a.example/new",
            "After: https://b.example/y",
        ])
        assert state.pairs == (CandidatePair("https://a.example/new", "https://b.example/y"),)

    def test_input_state_is_not_mutated(self):
        original = ScanState(pending_before="https://a.example/x")
        scan_line(original, "After: https://b.example/y")
        assert original.pending_before == "https://a.example/x"
        assert original.pairs == ()


class TestExtractCandidatePairs:
    """Tests for extract_candidate_pairs."""

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_input(self, text):
        assert extract_candidate_pairs(text) == []

    def test_single_bulleted_pair(self):
        text = "- Before: https://a.example/x\n- After: https://b.example/y"
        assert extract_candidate_pairs(text) == [
            CandidatePair(before="https://a.example/x", after="https://b.example/y")
        ]

    def test_multiple_pairs_in_order(self):
        lines = []
        for i in range(1, 4):
            lines.append(f"* Before: https://a.example/{i}")
            lines.append(f"* After: https://b.example/{i}")
        pairs = extract_candidate_pairs("\n".join(lines))
        assert [p.before for p in pairs] == [f"https://a.example/{i}" for i in range(1, 4)]
        assert [p.after for p in pairs] == [f"https://b.example/{i}" for i in range(1, 4)]

    @pytest.mark.parametrize("before_line,after_line", [
        ("before: https://a.example/x", "after: https://b.example/y"),
        ("BEFORE: https://a.example/x", "AFTER: https://b.example/y"),
        ("  • Before:   https://a.example/x  ", "\t• After: https://b.example/y"),
        ("** Before: https://a.example/x", "-- After: https://b.example/y"),
        ("- * Before: https://a.example/x", "* - After: https://b.example/y"),
    ])
    def test_keyword_case_and_bullets(self, before_line, after_line):
        pairs = extract_candidate_pairs(f"{before_line}\n{after_line}")
        assert pairs == [CandidatePair("https://a.example/x", "https://b.example/y")]

    def test_surrounding_prose_is_ignored(self):
        text = (
            "## Description\n"
            "Updates the hero block.\n"
            "\n"
            "## Test URLs\n"
            "- Before: https://main--site--org.example.page/products\r\n"
            "- After: https://stage--site--org.example.page/products\r\n"
            "\n"
            "Thanks!"
        )
        assert extract_candidate_pairs(text) == [
            CandidatePair(
                "https://main--site--org.example.page/products",
                "https://stage--site--org.example.page/products",
            )
        ]

    def test_keyword_must_start_the_line(self):
        text = "The page Before: https://a.example/x\nAfter: https://b.example/y"
        assert extract_candidate_pairs(text) == []

    def test_marker_without_value_is_not_a_marker(self):
        text = "Before: https://a.example/x\nAfter:\nAfter: https://b.example/y"
        assert extract_candidate_pairs(text) == [
            CandidatePair("https://a.example/x", "https://b.example/y")
        ]

    def test_value_is_not_validated_here(self):
        pairs = extract_candidate_pairs("Before: not a url\nAfter: also not")
        assert pairs == [CandidatePair("not a url", "also not")]

    def test_trailing_before_is_dropped_with_warning(self, caplog):
        text = (
            "Before: https://a.example/1\nAfter: https://b.example/1\n"
            "Before: https://a.example/dangling"
        )
        with caplog.at_level(logging.WARNING):
            pairs = extract_candidate_pairs(text)
        assert pairs == [CandidatePair("https://a.example/1", "https://b.example/1")]
        assert "https://a.example/dangling" in caplog.text

    def test_trailing_after_is_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            pairs = extract_candidate_pairs("After: https://b.example/dangling")
        assert pairs == []
        assert '"After" URL without matching "Before"' in caplog.text

    def test_after_before_order_does_not_pair_until_next_after(self):
        text = (
            "After: https://b.example/early\n"
            "Before: https://a.example/x\n"
            "After: https://b.example/y"
        )
        assert extract_candidate_pairs(text) == [
            CandidatePair("https://a.example/x", "https://b.example/y")
        ]

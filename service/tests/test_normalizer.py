"""Tests for free-text normalization."""

import pytest

from app.chat.normalizer import normalize


class TestNormalize:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize("Solar PANELS!!!") == "solar panels"

    def test_removes_leading_question_word(self) -> None:
        assert normalize("What is the payback period?") == "payback period"

    def test_removes_filler_words(self) -> None:
        assert normalize("lifespan of a solar panel") == "lifespan solar panel"

    def test_collapses_whitespace(self) -> None:
        assert normalize("  net    metering \t works ") == "net metering works"

    def test_hyphen_becomes_space(self) -> None:
        assert normalize("on-grid") == "on grid"

    def test_only_question_word_left_empty(self) -> None:
        assert normalize("What?") == "what"
        assert normalize("?!.,") == ""

    def test_question_and_statement_compare_equal(self) -> None:
        assert normalize("What is the payback period?") == normalize("payback period")

    @pytest.mark.parametrize(
        "text",
        [
            "What is the payback period?",
            "How do I know which system is right for me?",
            "Do you offer installment plans?",
            "what what is is the the price",
            "Tell me about the warranty, please",
            "",
            "   ",
            "What's net metering and how does it work?",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        once = normalize(text)
        assert normalize(once) == once

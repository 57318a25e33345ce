"""Word counting and length validation tests."""

import pytest

from seodesc.worker.helpers import WordCountValidator, count_words


class TestCountWords:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("", 0), ("   ", 0), ("one", 1), ("  two   words \n", 2), ("tab\tand\nnewline", 3)],
    )
    def test_whitespace_split(self, text, expected):
        assert count_words(text) == expected


class TestWordCountValidator:
    @pytest.fixture
    def validator(self) -> WordCountValidator:
        return WordCountValidator(350, 500)

    def test_bounds_inclusive(self, validator, words):
        assert validator.validate(words(350)).is_acceptable
        assert validator.validate(words(500)).is_acceptable

    def test_too_short(self, validator, words):
        quality = validator.validate(words(349))
        assert not quality.is_acceptable
        assert quality.issues == ["too_short"]
        assert validator.feedback(quality) == (
            "IMPORTANT: The previous attempt had only 349 words. You MUST write at least 350 words."
        )

    def test_too_long(self, validator, words):
        quality = validator.validate(words(501))
        assert quality.issues == ["too_long"]
        assert "You MUST keep it under 500 words." in validator.feedback(quality)

    def test_feedback_none_when_acceptable(self, validator, words):
        assert validator.feedback(validator.validate(words(400))) is None

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            WordCountValidator(500, 350)

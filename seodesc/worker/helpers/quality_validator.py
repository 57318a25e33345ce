"""Quality validation helpers for generated descriptions."""

from seodesc.worker.helpers.content_metrics import count_words
from seodesc.worker.helpers.schemas import QualityResult


class WordCountValidator:
    """Brand length constraint: ``min_words <= words <= max_words``."""

    def __init__(self, min_words: int, max_words: int):
        if min_words > max_words:
            raise ValueError("min_words must not exceed max_words")
        self.min_words = min_words
        self.max_words = max_words

    def validate(self, content: str) -> QualityResult:
        """
        Returns:
            QualityResult:
                - is_acceptable: word count within bounds
                - issues: ["too_short"] or ["too_long"]
        """
        word_count = count_words(content)
        issues: list[str] = []
        if word_count < self.min_words:
            issues.append("too_short")
        elif word_count > self.max_words:
            issues.append("too_long")
        return QualityResult(is_acceptable=not issues, word_count=word_count, issues=issues)

    def feedback(self, quality: QualityResult) -> str | None:
        """Corrective instruction for the next attempt, or None if acceptable."""
        if "too_short" in quality.issues:
            return (
                f"IMPORTANT: The previous attempt had only {quality.word_count} words. "
                f"You MUST write at least {self.min_words} words."
            )
        if "too_long" in quality.issues:
            return (
                f"IMPORTANT: The previous attempt had {quality.word_count} words. "
                f"You MUST keep it under {self.max_words} words."
            )
        return None

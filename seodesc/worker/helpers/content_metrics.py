"""Text metrics for generated content."""


def count_words(text: str) -> int:
    """Whitespace-delimited word count; empty tokens are discarded.

    Example:
        >>> count_words("  Arsenal   tickets\\n for fans ")
        4
    """
    return len(text.split())

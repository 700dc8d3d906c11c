"""Text processing utilities."""

import re


def normalize_text(text: str) -> str:
    """
    Normalize text for processing.

    Args:
        text: Input text

    Returns:
        Normalized text
    """
    # Remove extra whitespace
    text = re.sub(r"\s+", " ", text)
    # Trim
    text = text.strip()
    return text


def tokenize(text: str, min_length: int = 3) -> list[str]:
    """
    Lower-case and split text on whitespace.

    Args:
        text: Input text
        min_length: Tokens shorter than this are dropped

    Returns:
        Tokens in their original order (duplicates kept)
    """
    return [token for token in text.lower().split() if len(token) >= min_length]

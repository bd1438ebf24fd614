"""Keyword and merchant extraction from free-text expense descriptions."""

import re
from typing import Optional, Set
from categorization.tables import load_stop_words

# Anything that is not a letter, digit, whitespace or hyphen
_NOISE = re.compile(r"[^\w\s-]|_")

_MERCHANT_PATTERNS = (
    # "en Oxxo", "at Starbucks", "@ Walmart"
    re.compile(r"(?:\ben|\bat|@)\s+([A-Z][a-zA-Z\s&']+)", re.IGNORECASE),
    # Bare capitalized phrase: "Home Depot"
    re.compile(r"([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+)*)"),
)

MIN_KEYWORD_LENGTH = 3
MIN_BIGRAM_LENGTH = 5
MIN_MERCHANT_LENGTH = 3


def tokenize(description: str) -> list:
    """Lower-case a description and split it into words, noise removed."""
    return _NOISE.sub(" ", description.lower()).split()


def extract_keywords(description: str) -> Set[str]:
    """Extract the unigram and bigram keywords of a description.

    Unigrams are kept when at least 3 characters long, not a stop word and
    not purely numeric. Bigrams are built from adjacent words of the
    original sequence when neither word is a stop word or a number.

    Args:
        description: Raw expense description, e.g. "Café en el Oxxo 35 pesos".

    Returns:
        Set of keywords. Empty when nothing usable remains.
    """
    stop_words = load_stop_words()
    words = tokenize(description)

    keywords = {
        word
        for word in words
        if len(word) >= MIN_KEYWORD_LENGTH
        and word not in stop_words
        and not word.isdigit()
    }

    for first, second in zip(words, words[1:]):
        if first in stop_words or second in stop_words:
            continue
        if first.isdigit() or second.isdigit():
            continue
        bigram = f"{first} {second}"
        if len(bigram) >= MIN_BIGRAM_LENGTH:
            keywords.add(bigram)

    return keywords


def extract_merchant(description: str) -> Optional[str]:
    """Guess the merchant name in a description.

    Tries "preposition + capitalized phrase" first, then a bare capitalized
    phrase. The first candidate of at least 3 characters that is not a
    number wins.

    Args:
        description: Raw expense description (case is significant).

    Returns:
        Merchant name with whitespace collapsed, or None.
    """
    for pattern in _MERCHANT_PATTERNS:
        match = pattern.search(description)
        if not match:
            continue

        merchant = " ".join(match.group(1).split())
        if len(merchant) >= MIN_MERCHANT_LENGTH and not _is_number(merchant):
            return merchant

    return None


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True

"""Sentence splitting and input checks for Russian text"""

import re
from typing import List

SENTENCE_END_PATTERN = re.compile(r'[.!?]+')

# Basic Russian letters (U+0410-U+044F) plus Ё/ё (U+0401, U+0451)
RUSSIAN_PATTERN = re.compile(r'[А-яЁё]')


def contains_russian(text: str) -> bool:
    """Check whether the text contains at least one Cyrillic (Russian) letter."""
    return bool(text) and RUSSIAN_PATTERN.search(text) is not None


def split_into_sentences(text: str) -> List[str]:
    """
    Split text into sentences on runs of . ! ?

    Empty segments are dropped. If nothing is left but the text is not blank, the whole
    trimmed text is returned as a single sentence.
    """
    sentences = [s.strip() for s in SENTENCE_END_PATTERN.split(text)]
    sentences = [s for s in sentences if s]

    if not sentences and text.strip():
        sentences.append(text.strip())

    return sentences

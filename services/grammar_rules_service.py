"""
Rule-Based Grammar Service
Deterministic constituent extraction for Russian sentences using the fixed lexicon.

This is the offline path: no external calls, no randomness. When the lexicon does not
recognize a role, positional fallbacks are used (first word = subject, second word =
predicate, third word = object). Those fallbacks are intentional low-confidence guesses.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from services.lexicon import DEFAULT_LEXICON, Lexicon

PUNCTUATION_PATTERN = re.compile(r'[.,!?;:]')


@dataclass(frozen=True)
class ExtractedConstituent:
    """A single role found in a sentence"""
    text: str
    morphology: Dict[str, str] = field(default_factory=dict)
    preposition: Optional[str] = None


@dataclass(frozen=True)
class Extraction:
    """All roles extracted from one sentence"""
    subject: Optional[ExtractedConstituent]
    predicate: Optional[ExtractedConstituent]
    object: Optional[ExtractedConstituent]
    adverbials: List[ExtractedConstituent]


def tokenize(sentence: str) -> List[str]:
    """Split a sentence into whitespace-delimited tokens (surface forms kept)"""
    return sentence.split()


def strip_punctuation(token: str) -> str:
    """Remove . , ! ? ; : from a token"""
    return PUNCTUATION_PATTERN.sub('', token)


class RuleBasedExtractor:
    """Locates subject, predicate, object and adverbials from lexicon lookups"""

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon

    def extract_subject(self, tokens: List[str]) -> Optional[ExtractedConstituent]:
        # Pronouns first
        for token in tokens:
            word = strip_punctuation(token)
            if self.lexicon.is_pronoun(word):
                return ExtractedConstituent(word, self.lexicon.lookup(word) or {'case': 'Nominative'})

        # Then common subject nouns or anything the lexicon marks as Nominative
        for token in tokens:
            word = strip_punctuation(token)
            if word.lower() in self.lexicon.subject_nouns or self.lexicon.case_of(word) == 'Nominative':
                return ExtractedConstituent(word, self.lexicon.lookup(word) or {'case': 'Nominative'})

        # Fallback: first word
        if tokens:
            word = strip_punctuation(tokens[0])
            return ExtractedConstituent(word, self.lexicon.lookup(word) or {'case': 'Nominative'})

        return None

    def extract_predicate(self, tokens: List[str]) -> Optional[ExtractedConstituent]:
        for token in tokens:
            word = strip_punctuation(token)
            features = self.lexicon.lookup(word)
            if (features and 'tense' in features) or word.lower() in self.lexicon.common_verbs:
                return ExtractedConstituent(word, features or {})

        # Fallback: second word
        if len(tokens) > 1:
            word = strip_punctuation(tokens[1])
            return ExtractedConstituent(word, self.lexicon.lookup(word) or {})

        return None

    def extract_object(self, tokens: List[str]) -> Optional[ExtractedConstituent]:
        # The first two words are most likely subject and predicate
        for token in tokens[2:]:
            word = strip_punctuation(token)
            if word.lower() in self.lexicon.object_nouns or self.lexicon.case_of(word) == 'Accusative':
                return ExtractedConstituent(word, self.lexicon.lookup(word) or {'case': 'Accusative'})

        # Fallback: third word
        if len(tokens) > 2:
            word = strip_punctuation(tokens[2])
            return ExtractedConstituent(word, self.lexicon.lookup(word) or {'case': 'Accusative'})

        return None

    def extract_adverbials(self, tokens: List[str]) -> List[ExtractedConstituent]:
        adverbials = []
        if len(tokens) <= 3:
            return adverbials

        remaining = tokens[3:]

        # Prepositional phrases: preposition + the word right after it
        i = 0
        while i < len(remaining) - 1:
            word = strip_punctuation(remaining[i])
            if self.lexicon.is_preposition(word):
                next_word = strip_punctuation(remaining[i + 1])
                adverbials.append(ExtractedConstituent(
                    text=next_word,
                    morphology=self.lexicon.lookup(next_word) or {},
                    preposition=word,
                ))
                i += 2
            else:
                i += 1

        # No prepositional phrase: the first remaining word, as written
        if not adverbials:
            first = remaining[0]
            adverbials.append(ExtractedConstituent(
                text=first,
                morphology=self.lexicon.lookup(strip_punctuation(first)) or {},
            ))

        return adverbials

    def extract(self, tokens: List[str]) -> Extraction:
        return Extraction(
            subject=self.extract_subject(tokens),
            predicate=self.extract_predicate(tokens),
            object=self.extract_object(tokens),
            adverbials=self.extract_adverbials(tokens),
        )

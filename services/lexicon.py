"""
Russian Lexicon
Fixed vocabulary used by the rule-based grammar analyzer: morphology per surface form
plus categorized word lists (pronouns, subject/object nouns, verbs, prepositions)
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional


# Morphological features for common Russian word forms (simplified)
_MORPHOLOGY = {
    # Pronouns
    'я': {'case': 'Nominative', 'number': 'Singular', 'person': '1st'},
    'ты': {'case': 'Nominative', 'number': 'Singular', 'person': '2nd'},
    'он': {'case': 'Nominative', 'number': 'Singular', 'person': '3rd', 'gender': 'Masculine'},
    'она': {'case': 'Nominative', 'number': 'Singular', 'person': '3rd', 'gender': 'Feminine'},
    'оно': {'case': 'Nominative', 'number': 'Singular', 'person': '3rd', 'gender': 'Neuter'},
    'мы': {'case': 'Nominative', 'number': 'Plural', 'person': '1st'},
    'вы': {'case': 'Nominative', 'number': 'Plural', 'person': '2nd'},
    'они': {'case': 'Nominative', 'number': 'Plural', 'person': '3rd'},

    # Verbs (present tense)
    'люблю': {'tense': 'Present', 'person': '1st', 'number': 'Singular', 'aspect': 'Imperfective'},
    'любишь': {'tense': 'Present', 'person': '2nd', 'number': 'Singular', 'aspect': 'Imperfective'},
    'любит': {'tense': 'Present', 'person': '3rd', 'number': 'Singular', 'aspect': 'Imperfective'},
    'любим': {'tense': 'Present', 'person': '1st', 'number': 'Plural', 'aspect': 'Imperfective'},
    'любите': {'tense': 'Present', 'person': '2nd', 'number': 'Plural', 'aspect': 'Imperfective'},
    'любят': {'tense': 'Present', 'person': '3rd', 'number': 'Plural', 'aspect': 'Imperfective'},

    'изучаю': {'tense': 'Present', 'person': '1st', 'number': 'Singular', 'aspect': 'Imperfective'},
    'изучаешь': {'tense': 'Present', 'person': '2nd', 'number': 'Singular', 'aspect': 'Imperfective'},
    'изучает': {'tense': 'Present', 'person': '3rd', 'number': 'Singular', 'aspect': 'Imperfective'},
    'изучаем': {'tense': 'Present', 'person': '1st', 'number': 'Plural', 'aspect': 'Imperfective'},
    'изучаете': {'tense': 'Present', 'person': '2nd', 'number': 'Plural', 'aspect': 'Imperfective'},
    'изучают': {'tense': 'Present', 'person': '3rd', 'number': 'Plural', 'aspect': 'Imperfective'},

    # Nouns
    'язык': {'case': 'Nominative', 'number': 'Singular', 'gender': 'Masculine'},
    'языка': {'case': 'Genitive', 'number': 'Singular', 'gender': 'Masculine'},
    'языку': {'case': 'Dative', 'number': 'Singular', 'gender': 'Masculine'},
    'языком': {'case': 'Instrumental', 'number': 'Singular', 'gender': 'Masculine'},
    'языке': {'case': 'Prepositional', 'number': 'Singular', 'gender': 'Masculine'},
    'языки': {'case': 'Nominative', 'number': 'Plural', 'gender': 'Masculine'},

    'Москва': {'case': 'Nominative', 'number': 'Singular', 'gender': 'Feminine'},
    'Москвы': {'case': 'Genitive', 'number': 'Singular', 'gender': 'Feminine'},
    'Москве': {'case': 'Dative/Prepositional', 'number': 'Singular', 'gender': 'Feminine'},
    'Москву': {'case': 'Accusative', 'number': 'Singular', 'gender': 'Feminine'},
    'Москвой': {'case': 'Instrumental', 'number': 'Singular', 'gender': 'Feminine'},

    'Россия': {'case': 'Nominative', 'number': 'Singular', 'gender': 'Feminine'},
    'России': {'case': 'Genitive/Dative/Prepositional', 'number': 'Singular', 'gender': 'Feminine'},
    'Россию': {'case': 'Accusative', 'number': 'Singular', 'gender': 'Feminine'},
    'Россией': {'case': 'Instrumental', 'number': 'Singular', 'gender': 'Feminine'},
}

PRONOUNS = ('я', 'ты', 'он', 'она', 'оно', 'мы', 'вы', 'они')

SUBJECT_NOUNS = (
    'человек', 'люди', 'студент', 'студенты', 'учитель',
    'ученик', 'мужчина', 'женщина', 'ребенок', 'дети',
)

COMMON_VERBS = (
    'быть', 'есть', 'иметь', 'делать', 'идти', 'ходить', 'говорить', 'сказать', 'любить',
    'хотеть', 'знать', 'видеть', 'слышать', 'думать', 'читать', 'писать', 'учить', 'изучать',
)

# Accusative-looking nouns only; 'язык'/'языки' are Nominative in the table above
OBJECT_NOUNS = ('книгу', 'книги', 'слово', 'слова', 'текст', 'тексты', 'задание', 'задания')

# Preposition -> short Chinese gloss
PREPOSITIONS = {
    'в': '在',
    'на': '在…上',
    'с': '和',
    'к': '向',
    'от': '从',
    'из': '从…中',
    'у': '在…旁',
    'о': '关于',
    'об': '关于',
    'по': '沿着',
    'за': '在…后',
    'под': '在…下',
    'над': '在…上方',
    'перед': '在…前',
    'между': '在…之间',
}


class Lexicon:
    """Read-only word table shared by the analyzer components.

    Built once (see build_default_lexicon) and passed by reference; nothing in it
    can be mutated after construction.
    """

    def __init__(
        self,
        morphology: Mapping[str, Mapping[str, str]],
        pronouns,
        subject_nouns,
        common_verbs,
        object_nouns,
        prepositions: Mapping[str, str],
    ):
        self._morphology = MappingProxyType(
            {word: MappingProxyType(dict(features)) for word, features in morphology.items()}
        )
        self.pronouns: FrozenSet[str] = frozenset(pronouns)
        self.subject_nouns: FrozenSet[str] = frozenset(subject_nouns)
        self.common_verbs: FrozenSet[str] = frozenset(common_verbs)
        self.object_nouns: FrozenSet[str] = frozenset(object_nouns)
        self.prepositions: Mapping[str, str] = MappingProxyType(dict(prepositions))

    def __contains__(self, word: str) -> bool:
        return self.lookup(word) is not None

    def lookup(self, word: str) -> Optional[Dict[str, str]]:
        """Return a copy of the features for a word form, or None when unknown.

        Exact surface form wins; otherwise the lower-cased form is tried so that
        sentence-initial capitals ("Я", "Они") still resolve.
        """
        features = self._morphology.get(word)
        if features is None:
            features = self._morphology.get(word.lower())
        return dict(features) if features is not None else None

    def case_of(self, word: str) -> Optional[str]:
        features = self.lookup(word)
        return features.get('case') if features else None

    def is_pronoun(self, word: str) -> bool:
        return word.lower() in self.pronouns

    def is_preposition(self, word: str) -> bool:
        return word.lower() in self.prepositions

    def preposition_gloss(self, word: str) -> str:
        return self.prepositions.get(word.lower(), '')


def build_default_lexicon() -> Lexicon:
    """Create the built-in Russian lexicon"""
    return Lexicon(
        morphology=_MORPHOLOGY,
        pronouns=PRONOUNS,
        subject_nouns=SUBJECT_NOUNS,
        common_verbs=COMMON_VERBS,
        object_nouns=OBJECT_NOUNS,
        prepositions=PREPOSITIONS,
    )


DEFAULT_LEXICON = build_default_lexicon()

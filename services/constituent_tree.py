"""
Constituent Tree Builder
Turns rule-based extraction output into the analysis tree returned by the API:

    {"mainComponents": [component, ...]}
    component = {type, text, original, translation, morphology, children: [child, ...]}
    child     = {type, text, original, translation, morphology, children: [nested, ...]}
    nested    = {type, text, original, translation, morphology}
"""

from typing import Dict, List, Optional

from services.grammar_rules_service import (
    ExtractedConstituent,
    Extraction,
    RuleBasedExtractor,
    tokenize,
)
from services.lexicon import DEFAULT_LEXICON, Lexicon
from services.morphology import translate_morphology

SUBJECT = '主语'
PREDICATE = '谓语'
OBJECT = '宾语'
ADVERBIAL = '状语'
HEAD_WORD = '中心词'
PREPOSITION = '介词'
EXPLANATION = '说明'
ERROR = 'Error'


def make_node(
    node_type: str,
    text: str,
    translation: str = '',
    original: Optional[str] = None,
    morphology: Optional[Dict[str, str]] = None,
    children: Optional[List[Dict]] = None,
) -> Dict:
    """Create a tree node. Pass children=None for nested (leaf-level) nodes."""
    node = {
        'type': node_type,
        'text': text,
        'original': text if original is None else original,
        'translation': translation,
        'morphology': morphology or {},
    }
    if children is not None:
        node['children'] = children
    return node


def _role_component(role: str, constituent: ExtractedConstituent) -> Dict:
    head = make_node(
        HEAD_WORD,
        constituent.text,
        translation=role,
        morphology=translate_morphology(constituent.morphology),
        children=[],
    )
    return make_node(role, constituent.text, translation=role, children=[head])


def _adverbial_component(adverbial: ExtractedConstituent, lexicon: Lexicon) -> Dict:
    if not adverbial.preposition:
        return _role_component(ADVERBIAL, adverbial)

    children = [
        make_node(
            PREPOSITION,
            adverbial.preposition,
            translation=lexicon.preposition_gloss(adverbial.preposition) or PREPOSITION,
            children=[],
        ),
        make_node(
            OBJECT,
            adverbial.text,
            translation=OBJECT,
            morphology=translate_morphology(adverbial.morphology),
            children=[],
        ),
    ]
    return make_node(ADVERBIAL, adverbial.text, translation=ADVERBIAL, children=children)


def build_analysis(extraction: Extraction, lexicon: Lexicon = DEFAULT_LEXICON) -> Dict:
    """Assemble the tree: subject, predicate, object, then adverbials in order"""
    components = []

    for role, constituent in (
        (SUBJECT, extraction.subject),
        (PREDICATE, extraction.predicate),
        (OBJECT, extraction.object),
    ):
        if constituent is not None:
            components.append(_role_component(role, constituent))

    for adverbial in extraction.adverbials:
        components.append(_adverbial_component(adverbial, lexicon))

    return {'mainComponents': components}


def analyze_grammar(sentence: str, lexicon: Lexicon = DEFAULT_LEXICON) -> Dict:
    """Analyze a sentence with the rule-based extractor (no external calls)"""
    extraction = RuleBasedExtractor(lexicon).extract(tokenize(sentence.strip()))
    return build_analysis(extraction, lexicon)


def build_failed_analysis(sentence: str) -> Dict:
    """Degraded tree used when the grammar analysis service fails for a sentence"""
    words = sentence.split()
    first_word = words[0] if words else sentence
    return {
        'mainComponents': [
            make_node(SUBJECT, first_word, translation=SUBJECT, children=[
                make_node(
                    HEAD_WORD,
                    first_word,
                    translation=SUBJECT,
                    morphology={'part_0': '形态信息不可用'},
                    children=[],
                ),
            ]),
            make_node(PREDICATE, '分析失败', translation='无法完成分析', children=[
                make_node(EXPLANATION, '请尝试重新分析或简化句子', original='', translation='提示', children=[]),
            ]),
        ]
    }


def build_error_analysis() -> Dict:
    """Tree used when a sentence could not be processed at all"""
    return {
        'mainComponents': [
            make_node(ERROR, '无法分析此句子', original='', translation='错误', children=[]),
        ]
    }

"""
Unit tests for morphology display labels and the constituent tree builder.
"""

import sys
import os
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.constituent_tree import (
    analyze_grammar,
    build_analysis,
    build_error_analysis,
    build_failed_analysis,
)
from services.grammar_rules_service import ExtractedConstituent, Extraction
from services.llm_models.analysis_models import AnalysisResult
from services.morphology import translate_morphology

NODE_FIELDS = {'type', 'text', 'original', 'translation', 'morphology'}


def assert_tree_shape(analysis):
    """Depth <= 2, five fields everywhere, children only above the nested level"""
    assert 'mainComponents' in analysis
    for component in analysis['mainComponents']:
        assert NODE_FIELDS <= set(component)
        assert isinstance(component['children'], list)
        for child in component['children']:
            assert NODE_FIELDS <= set(child)
            assert isinstance(child['children'], list)
            for nested in child['children']:
                assert NODE_FIELDS <= set(nested)
                assert 'children' not in nested


def test_translate_full_feature_set():
    assert translate_morphology({
        'case': 'Nominative',
        'number': 'Singular',
        'gender': 'Feminine',
        'person': '3rd',
        'tense': 'Present',
        'aspect': 'Imperfective',
    }) == {
        '格': '主格',
        '数': '单数',
        '性': '阴性',
        '人称': '第三人称',
        '时态': '现在时',
        '体': '未完成体',
    }


def test_translate_compound_case():
    assert translate_morphology({'case': 'Genitive/Dative/Prepositional'}) == {'格': '属格/与格/前置格'}


def test_unknown_values_pass_through():
    assert translate_morphology({'case': 'Locative', 'aspect': 'Perfective'}) == {
        '格': 'Locative',
        '体': '完成体',
    }


def test_absent_features_are_not_filled():
    assert translate_morphology({}) == {}
    assert translate_morphology({'number': 'Plural'}) == {'数': '复数'}


def test_example_sentence_tree():
    analysis = analyze_grammar('Я изучаю русский язык.')
    components = analysis['mainComponents']

    assert [c['type'] for c in components] == ['主语', '谓语', '宾语', '状语']
    assert [c['text'] for c in components] == ['Я', 'изучаю', 'русский', 'язык.']

    subject_head = components[0]['children'][0]
    assert subject_head['type'] == '中心词'
    assert subject_head['original'] == 'Я'
    assert subject_head['morphology'] == {'格': '主格', '数': '单数', '人称': '第一人称'}

    predicate_head = components[1]['children'][0]
    assert predicate_head['morphology'] == {
        '数': '单数',
        '人称': '第一人称',
        '时态': '现在时',
        '体': '未完成体',
    }

    assert components[2]['children'][0]['morphology'] == {'格': '宾格'}
    assert_tree_shape(analysis)


def test_prepositional_adverbial_has_two_children():
    analysis = analyze_grammar('Мы читаем книгу в Москве.')
    adverbial = analysis['mainComponents'][-1]

    assert adverbial['type'] == '状语'
    assert adverbial['text'] == 'Москве'
    preposition, obj = adverbial['children']
    assert preposition['type'] == '介词'
    assert preposition['text'] == 'в'
    assert preposition['translation'] == '在'
    assert preposition['morphology'] == {}
    assert obj['type'] == '宾语'
    assert obj['text'] == 'Москве'
    assert obj['morphology'] == {'格': '与格/前置格', '数': '单数', '性': '阴性'}
    assert_tree_shape(analysis)


def test_missing_roles_are_omitted():
    extraction = Extraction(
        subject=ExtractedConstituent('Привет', {'case': 'Nominative'}),
        predicate=None,
        object=None,
        adverbials=[],
    )
    components = build_analysis(extraction)['mainComponents']
    assert len(components) == 1
    assert components[0]['type'] == '主语'


def test_empty_sentence_gives_empty_analysis():
    assert analyze_grammar('   ') == {'mainComponents': []}


def test_adverbials_keep_extraction_order():
    analysis = analyze_grammar('Я читаю книгу на столе с другом.')
    adverbials = [c for c in analysis['mainComponents'] if c['type'] == '状语']
    assert [a['children'][0]['text'] for a in adverbials] == ['на', 'с']


@pytest.mark.parametrize('sentence', [
    'Я изучаю русский язык.',
    'Мы читаем книгу в Москве с учителем.',
    'Привет',
    'Кошка спит дома',
])
def test_builder_output_matches_tree_contract(sentence):
    analysis = analyze_grammar(sentence)
    assert_tree_shape(analysis)
    AnalysisResult.model_validate(analysis)


def test_failed_analysis_uses_first_word():
    analysis = build_failed_analysis('Он живёт в Москве')
    subject, predicate = analysis['mainComponents']

    assert subject['type'] == '主语'
    assert subject['text'] == 'Он'
    assert subject['children'][0]['morphology'] == {'part_0': '形态信息不可用'}
    assert predicate['text'] == '分析失败'
    assert predicate['children'][0]['type'] == '说明'
    assert_tree_shape(analysis)


def test_error_analysis_is_single_node():
    analysis = build_error_analysis()
    assert len(analysis['mainComponents']) == 1
    assert analysis['mainComponents'][0]['type'] == 'Error'
    assert_tree_shape(analysis)

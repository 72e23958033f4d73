"""
Tests for the sentence analysis workflow.

Covers:
- Per-sentence degradation (translation failure, analysis failure, both, unexpected errors)
- Input validation and engine selection
- Sentence order with the worker pool
- Sentence cache (hits skip LLM calls, degraded results are not cached)
- Analysis history persistence

Note: LLM calls are mocked.
"""

import sys
import os
import pytest
from unittest.mock import MagicMock, patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.analysis_history import AnalysisHistory
from models.sentence_analysis_cache import SentenceAnalysisCache
from services.sentence_analysis_service import (
    TRANSLATION_FAILED,
    InvalidInputError,
    analyze_text,
    get_cached_analysis,
    process_sentence,
    save_history,
)

TREE = {'mainComponents': [{
    'type': '主语', 'text': 'Я', 'original': 'Я', 'translation': '我', 'morphology': {}, 'children': [],
}]}


def translation_ok(sentence, **kwargs):
    return {
        'success': True,
        'sentence': sentence,
        'translation': f'译:{sentence}',
        'model': 'gemini-2.0-flash',
        'usage': {'total_tokens': 30},
    }


def analysis_ok(sentence, **kwargs):
    return {
        'success': True,
        'sentence': sentence,
        'analysis': TREE,
        'raw_content': '',
        'model': 'gemini-2.0-flash',
        'usage': {'total_tokens': 70},
    }


def failure(sentence, **kwargs):
    return {'success': False, 'sentence': sentence, 'error': 'Request timed out'}


@pytest.fixture
def app():
    """Create and configure a test app"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def mock_llm():
    """Patch provider creation and both LLM calls"""
    with patch('services.sentence_analysis_service.get_llm_client') as mock_client, \
            patch('services.sentence_analysis_service.translate_sentence') as mock_translate, \
            patch('services.sentence_analysis_service.analyze_sentence_grammar') as mock_analyze:
        mock_client.return_value = MagicMock()
        mock_translate.side_effect = translation_ok
        mock_analyze.side_effect = analysis_ok
        yield mock_translate, mock_analyze


def test_process_sentence_success(mock_llm):
    outcome = process_sentence('Я изучаю русский язык')

    assert outcome.record == {
        'original': 'Я изучаю русский язык',
        'translation': '译:Я изучаю русский язык',
        'analysis': TREE,
    }
    assert outcome.cacheable is True
    assert outcome.model_name == 'gemini-2.0-flash'
    assert outcome.total_tokens == 100


def test_translation_failure_keeps_analysis(mock_llm):
    mock_translate, _ = mock_llm
    mock_translate.side_effect = failure

    outcome = process_sentence('Я изучаю русский язык')

    assert outcome.record['translation'] == TRANSLATION_FAILED
    assert outcome.record['analysis'] == TREE
    assert outcome.cacheable is False


def test_analysis_failure_gives_degraded_tree(mock_llm):
    _, mock_analyze = mock_llm
    mock_analyze.side_effect = failure

    outcome = process_sentence('Он живёт в Москве')

    assert outcome.record['translation'] == '译:Он живёт в Москве'
    subject, predicate = outcome.record['analysis']['mainComponents']
    assert subject['text'] == 'Он'
    assert predicate['text'] == '分析失败'
    assert outcome.cacheable is False


def test_both_failures_give_error_record(mock_llm):
    mock_translate, mock_analyze = mock_llm
    mock_translate.side_effect = failure
    mock_analyze.side_effect = failure

    outcome = process_sentence('Он живёт в Москве')

    assert outcome.record['translation'] == TRANSLATION_FAILED
    assert outcome.record['analysis']['mainComponents'][0]['type'] == 'Error'


def test_unexpected_exception_is_contained(mock_llm):
    mock_translate, _ = mock_llm
    mock_translate.side_effect = RuntimeError('boom')

    outcome = process_sentence('Он живёт в Москве')

    assert outcome.record['original'] == 'Он живёт в Москве'
    assert outcome.record['translation'] == TRANSLATION_FAILED
    assert outcome.record['analysis']['mainComponents'][0]['type'] == 'Error'


@pytest.mark.parametrize('text,message', [
    (None, 'Text is required'),
    ('', 'Text is required'),
    ('Hello world.', 'Only Russian text can be analyzed'),
])
def test_invalid_input_is_rejected(text, message):
    with pytest.raises(InvalidInputError, match=message):
        analyze_text(text, use_cache=False)


def test_unknown_engine_is_rejected():
    with pytest.raises(ValueError, match='Unsupported engine'):
        analyze_text('Я изучаю русский язык.', engine='spacy', use_cache=False)


def test_rules_engine_makes_no_llm_calls(mock_llm):
    mock_translate, mock_analyze = mock_llm

    results = analyze_text('Я изучаю русский язык. Мы читаем книгу в Москве.', engine='rules')

    assert [r['original'] for r in results] == ['Я изучаю русский язык', 'Мы читаем книгу в Москве']
    assert all(r['translation'] == '' for r in results)
    assert results[0]['analysis']['mainComponents'][0]['text'] == 'Я'
    mock_translate.assert_not_called()
    mock_analyze.assert_not_called()


def test_results_keep_sentence_order(app, mock_llm):
    text = 'Раз. Два. Три. Четыре. Пять. Шесть.'

    results = analyze_text(text, use_cache=False, max_workers=4)

    assert [r['original'] for r in results] == ['Раз', 'Два', 'Три', 'Четыре', 'Пять', 'Шесть']
    assert [r['translation'] for r in results] == [f'译:{r["original"]}' for r in results]


def test_one_failing_sentence_does_not_abort_batch(app, mock_llm):
    mock_translate, _ = mock_llm
    mock_translate.side_effect = lambda sentence, **kwargs: (
        failure(sentence) if sentence == 'Два' else translation_ok(sentence)
    )

    results = analyze_text('Раз. Два. Три.', use_cache=False)

    assert [r['translation'] for r in results] == ['译:Раз', TRANSLATION_FAILED, '译:Три']


def test_provider_initialization_failure_degrades_every_sentence(app):
    with patch('services.sentence_analysis_service.get_llm_client') as mock_client, \
            patch('services.llm_grammar_service.get_llm_client') as mock_inner_client:
        mock_client.side_effect = ValueError('GEMINI_API_KEY not found in environment variables')
        mock_inner_client.side_effect = ValueError('GEMINI_API_KEY not found in environment variables')

        results = analyze_text('Раз. Два.', use_cache=False)

    assert len(results) == 2
    for record in results:
        assert record['translation'] == TRANSLATION_FAILED
        assert record['analysis']['mainComponents'][0]['type'] == 'Error'


def test_cache_hit_skips_llm_calls(app, mock_llm):
    mock_translate, mock_analyze = mock_llm

    first = analyze_text('Я изучаю русский язык.')
    assert mock_translate.call_count == 1
    assert mock_analyze.call_count == 1

    cached = get_cached_analysis('Я изучаю русский язык')
    assert cached is not None
    assert cached.model_name == 'gemini-2.0-flash'
    assert cached.total_tokens == 100

    second = analyze_text('Я изучаю русский язык.')
    assert second == first
    assert mock_translate.call_count == 1
    assert mock_analyze.call_count == 1
    assert get_cached_analysis('Я изучаю русский язык').hit_count == 1


def test_degraded_results_are_not_cached(app, mock_llm):
    _, mock_analyze = mock_llm
    mock_analyze.side_effect = failure

    analyze_text('Он живёт в Москве.')

    assert SentenceAnalysisCache.query.count() == 0


def test_cache_can_be_bypassed(app, mock_llm):
    mock_translate, _ = mock_llm

    analyze_text('Я изучаю русский язык.', use_cache=False)
    analyze_text('Я изучаю русский язык.', use_cache=False)

    assert mock_translate.call_count == 2
    assert SentenceAnalysisCache.query.count() == 0


def test_save_history(app):
    results = [{'original': 'Я изучаю', 'translation': '我学习', 'analysis': TREE}]

    entry = save_history('  Я изучаю.  ', results, engine='llm')

    assert entry is not None
    stored = db.session.get(AnalysisHistory, entry.id)
    assert stored.text == 'Я изучаю.'
    assert stored.sentence_count == 1
    assert stored.results_json == results
    assert stored.to_dict(include_results=False).keys() == {'id', 'text', 'engine', 'sentence_count', 'created_at'}


def test_empty_parsed_analysis_is_not_cached(app):
    """An answer without any bullet lines is returned but the LLM is asked again next time"""
    def complete(messages, **kwargs):
        prompt = messages[0]['content']
        content = '我在学习俄语' if prompt.startswith('将以下俄语句子翻译成中文') else 'Sorry, I cannot analyze this.'
        return {'content': content, 'model': 'gemini-2.0-flash', 'usage': {'total_tokens': 10}}

    provider = MagicMock()
    provider.get_provider_name.return_value = 'gemini'
    provider.create_chat_completion.side_effect = complete

    with patch('services.sentence_analysis_service.get_llm_client', return_value=provider):
        first = analyze_text('Я изучаю русский язык.')
        assert first[0]['translation'] == '我在学习俄语'
        assert first[0]['analysis'] == {'mainComponents': []}
        assert SentenceAnalysisCache.query.count() == 0

        provider.create_chat_completion.reset_mock()
        analyze_text('Я изучаю русский язык.')

    assert provider.create_chat_completion.call_count == 2


def test_cache_is_kept_per_model(app, mock_llm):
    mock_translate, _ = mock_llm

    analyze_text('Я изучаю русский язык.', model='gemini-2.0-flash')
    analyze_text('Я изучаю русский язык.', model='gpt-4o-mini')
    assert mock_translate.call_count == 2
    assert mock_translate.call_args.kwargs['model'] == 'gpt-4o-mini'

    analyze_text('Я изучаю русский язык.', model='gpt-4o-mini')
    assert mock_translate.call_count == 2

    assert get_cached_analysis('Я изучаю русский язык', 'gemini-2.0-flash') is not None
    assert get_cached_analysis('Я изучаю русский язык', 'gpt-4o-mini').hit_count == 1
    assert get_cached_analysis('Я изучаю русский язык', 'mistral-small-latest') is None

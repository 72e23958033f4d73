import sys
import os
import pytest
from sqlalchemy.exc import IntegrityError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from models import db
from models.analysis_history import AnalysisHistory
from models.sentence_analysis_cache import SentenceAnalysisCache
from services.llm_models.analysis_models import AnalysisResult, SentenceRecord


@pytest.fixture
def app_context():
    """Create a fresh app context and database for each test"""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def test_history_rejects_blank_text(app_context):
    with pytest.raises(ValueError):
        AnalysisHistory(text='   ', results_json=[])


def test_history_round_trip(app_context):
    entry = AnalysisHistory(text='Я изучаю.', engine='rules', sentence_count=1, results_json=[{'original': 'Я изучаю'}])
    db.session.add(entry)
    db.session.commit()

    data = db.session.get(AnalysisHistory, entry.id).to_dict()
    assert data['results'] == [{'original': 'Я изучаю'}]
    assert data['created_at'] is not None
    assert repr(entry) == f'<AnalysisHistory {entry.id} sentences=1 engine=rules>'


def test_cache_is_unique_per_sentence_engine_and_model(app_context):
    def entry(engine='llm', model_name='gemini-2.0-flash'):
        return SentenceAnalysisCache(
            sentence='Я изучаю',
            engine=engine,
            model_name=model_name,
            analysis_json={'mainComponents': []}
        )

    db.session.add(entry())
    db.session.add(entry(engine='rules'))
    db.session.add(entry(model_name='gpt-4o-mini'))
    db.session.commit()

    db.session.add(entry())
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


def test_cache_to_record(app_context):
    entry = SentenceAnalysisCache(sentence='Я изучаю', translation='我学习', analysis_json={'mainComponents': []})
    assert entry.to_record() == {'original': 'Я изучаю', 'translation': '我学习', 'analysis': {'mainComponents': []}}


def test_analysis_result_defaults():
    assert AnalysisResult().model_dump() == {'mainComponents': []}

    record = SentenceRecord.model_validate({'original': 'Я'})
    assert record.model_dump() == {'original': 'Я', 'translation': '', 'analysis': {'mainComponents': []}}


def test_original_defaults_to_text_and_depth_is_capped():
    result = AnalysisResult.model_validate({'mainComponents': [{
        'type': '主语',
        'text': 'Я',
        'children': [{
            'type': '中心词',
            'text': 'Я',
            'original': None,
            'children': [{'type': '定语', 'text': 'мой', 'children': [{'type': 'x', 'text': 'y'}]}],
        }],
    }]}).model_dump()

    component = result['mainComponents'][0]
    assert component['original'] == 'Я'
    child = component['children'][0]
    assert child['original'] == 'Я'
    assert 'children' not in child['children'][0]

import logging

from flask import Blueprint, current_app, jsonify, request
from services.constituent_tree import analyze_grammar
from services.sentence_analysis_service import (
    ENGINE_LLM,
    ENGINES,
    InvalidInputError,
    analyze_text,
    save_history,
    validate_input,
)

logger = logging.getLogger(__name__)

bp = Blueprint('analyze', __name__, url_prefix='/api')


@bp.route('/analyze', methods=['POST'])
def analyze():
    """
    Split Russian text into sentences, translate and analyze each one.

    Request body:
    {
        "text": "Я изучаю русский язык. Он живёт в Москве.",
        "engine": "llm",  // optional: "llm" (default) or "rules"
        "use_cache": true  // optional, defaults to ANALYSIS_CACHE_ENABLED
    }

    Response:
    {
        "success": true,
        "history_id": 12,
        "results": [
            {
                "original": "Я изучаю русский язык",
                "translation": "我在学习俄语",
                "analysis": {"mainComponents": [...]}
            },
            ...
        ]
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({
                'success': False,
                'error': 'Request body must be a JSON object'
            }), 400

        text = data.get('text')
        engine = data.get('engine', ENGINE_LLM)
        use_cache = data.get('use_cache', current_app.config.get('ANALYSIS_CACHE_ENABLED', True))

        try:
            validate_input(text)
        except InvalidInputError as e:
            return jsonify({
                'success': False,
                'error': str(e)
            }), 400

        if engine not in ENGINES:
            return jsonify({
                'success': False,
                'error': f"Unsupported engine: {engine}. Supported engines: {', '.join(ENGINES)}"
            }), 400

        results = analyze_text(
            text,
            engine=engine,
            use_cache=bool(use_cache),
            provider_name=current_app.config.get('LLM_PROVIDER'),
            model=current_app.config.get('LLM_MODEL'),
            timeout=current_app.config.get('LLM_TIMEOUT', 30.0),
            max_workers=current_app.config.get('ANALYSIS_MAX_WORKERS', 4)
        )

        history = save_history(text, results, engine=engine)

        return jsonify({
            'success': True,
            'results': results,
            'history_id': history.id if history else None
        }), 200

    except Exception as e:
        logger.error(f"Error analyzing text: {str(e)}", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Failed to analyze text'
        }), 500


@bp.route('/analyze/sentence', methods=['POST'])
def analyze_sentence():
    """
    Rule-based analysis of a single sentence (no LLM calls).

    Request body:
    {
        "sentence": "Я изучаю русский язык."
    }

    Response:
    {
        "success": true,
        "sentence": "Я изучаю русский язык.",
        "analysis": {"mainComponents": [...]}
    }
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({
            'success': False,
            'error': 'Request body must be a JSON object'
        }), 400

    sentence = data.get('sentence')

    try:
        validate_input(sentence)
    except InvalidInputError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400

    return jsonify({
        'success': True,
        'sentence': sentence,
        'analysis': analyze_grammar(sentence)
    }), 200

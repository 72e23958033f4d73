from urllib.parse import quote

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError
from models import db
from models.analysis_history import AnalysisHistory
from services.llm_models.analysis_models import SentenceRecord
from services.markdown_export import export_filename, render_results_markdown, render_sentence_markdown

bp = Blueprint('export', __name__, url_prefix='/api')


def _markdown_response(records, sentence_index=None):
    if sentence_index is None:
        markdown = render_results_markdown(records)
    else:
        markdown = render_sentence_markdown(records[sentence_index])

    filename = export_filename(sentence_index)
    return Response(
        markdown,
        mimetype='text/markdown',
        headers={'Content-Disposition': f"attachment; filename*=UTF-8''{quote(filename)}"}
    )


def _parse_sentence_index(value, count):
    """Return (index, error message); index None means all sentences"""
    if value is None:
        return None, None
    try:
        index = int(value)
    except (TypeError, ValueError):
        return None, 'sentence_index must be an integer'
    if not 0 <= index < count:
        return None, f'sentence_index out of range (0-{count - 1})'
    return index, None


@bp.route('/export', methods=['POST'])
def export_results():
    """
    Render analysis results as a Markdown download.

    Request body:
    {
        "results": [{"original": "...", "translation": "...", "analysis": {...}}, ...],
        "sentence_index": 0  // optional, zero-based; omit to export all sentences
    }
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({
            'success': False,
            'error': 'Request body must be a JSON object'
        }), 400

    results = data.get('results')

    if not results or not isinstance(results, list):
        return jsonify({
            'success': False,
            'error': 'Missing or invalid field: results (must be a non-empty list)'
        }), 400

    try:
        records = [SentenceRecord.model_validate(item).model_dump() for item in results]
    except ValidationError as e:
        return jsonify({
            'success': False,
            'error': f'Invalid results: {e.error_count()} validation error(s)'
        }), 400

    sentence_index, error = _parse_sentence_index(data.get('sentence_index'), len(records))
    if error:
        return jsonify({'success': False, 'error': error}), 400

    return _markdown_response(records, sentence_index)


@bp.route('/history/<int:history_id>/export', methods=['GET'])
def export_history_entry(history_id):
    """
    Render a stored analysis as Markdown.

    Query params:
        - sentence_index: zero-based sentence to export (optional, default: all)
    """
    entry = db.session.get(AnalysisHistory, history_id)
    if entry is None:
        return jsonify({
            'success': False,
            'error': f'History entry {history_id} not found'
        }), 404

    records = entry.results_json or []
    if not records:
        return jsonify({'success': False, 'error': 'History entry has no results'}), 400

    sentence_index, error = _parse_sentence_index(request.args.get('sentence_index'), len(records))
    if error:
        return jsonify({'success': False, 'error': error}), 400

    return _markdown_response(records, sentence_index)

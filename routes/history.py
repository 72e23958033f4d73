from flask import Blueprint, jsonify, request
from models import db
from models.analysis_history import AnalysisHistory

bp = Blueprint('history', __name__, url_prefix='/api/history')

MAX_HISTORY_LIMIT = 100


@bp.route('', methods=['GET'])
def list_history():
    """
    List analyzed texts, newest first.

    Query params:
        - limit: Number of entries (default: 20, max: 100)

    Returns:
        JSON object with history entries (without per-sentence results) and count
    """
    try:
        limit = request.args.get('limit', 20, type=int)
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))

        entries = (
            AnalysisHistory.query
            .order_by(AnalysisHistory.created_at.desc(), AnalysisHistory.id.desc())
            .limit(limit)
            .all()
        )

        return jsonify({
            'success': True,
            'data': [entry.to_dict(include_results=False) for entry in entries],
            'count': len(entries)
        }), 200

    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@bp.route('/<int:history_id>', methods=['GET'])
def get_history_entry(history_id):
    """Get one analyzed text with all of its sentence results"""
    entry = db.session.get(AnalysisHistory, history_id)
    if entry is None:
        return jsonify({
            'success': False,
            'error': f'History entry {history_id} not found'
        }), 404

    return jsonify({
        'success': True,
        'data': entry.to_dict()
    }), 200


@bp.route('/<int:history_id>', methods=['DELETE'])
def delete_history_entry(history_id):
    """Delete one history entry"""
    entry = db.session.get(AnalysisHistory, history_id)
    if entry is None:
        return jsonify({
            'success': False,
            'error': f'History entry {history_id} not found'
        }), 404

    try:
        db.session.delete(entry)
        db.session.commit()
        return jsonify({'success': True, 'deleted': 1}), 200

    except Exception as e:
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@bp.route('', methods=['DELETE'])
def clear_history():
    """Delete all history entries"""
    try:
        deleted = AnalysisHistory.query.delete()
        db.session.commit()
        return jsonify({'success': True, 'deleted': deleted}), 200

    except Exception as e:
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500

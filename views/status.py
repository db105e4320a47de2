# views/status.py

from flask import Blueprint, jsonify
from database import get_db
from repositories import contests_repo, sync_reports_repo

status_bp = Blueprint('status', __name__)


@status_bp.route('/api/status', methods=['GET'])
def get_status():
    """
    Returns contest counts per platform and the outcome of the latest sync cycle.
    """
    try:
        conn = get_db()
        counts = contests_repo.count_contests(conn)
        latest_report = sync_reports_repo.get_latest_report(conn)
    except Exception:
        return jsonify({
            'status': 'error',
            'message': 'internal error'
        }), 500

    last_cycle = None
    if latest_report:
        created_at = latest_report['created_at']
        last_cycle = {
            'cycle_name': latest_report['cycle_name'],
            'status': latest_report['status'],
            'created_at': created_at.isoformat() if hasattr(created_at, 'isoformat') else created_at,
        }

    return jsonify({
        'status': 'ok',
        'contest_count': sum(entry['total'] for entry in counts.values()),
        'platforms': counts,
        'last_cycle': last_cycle,
    })

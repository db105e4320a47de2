# views/contests.py

import logging

import psycopg2
from flask import Blueprint, jsonify, request

from database import get_db
from repositories import contests_repo

LOGGER = logging.getLogger(__name__)

contests_bp = Blueprint('contests', __name__)


def _error_response(status_code: int, code: str, message: str):
    return jsonify({'success': False, 'error': {'code': code, 'message': message}}), status_code


def _parse_contest_id(raw):
    if isinstance(raw, bool):
        return None
    try:
        contest_id = int(raw)
    except (TypeError, ValueError):
        return None
    return contest_id if contest_id > 0 else None


@contests_bp.route('/api/contests', methods=['GET'])
def list_contests():
    """Every stored contest, newest first."""
    try:
        contests = contests_repo.find_all(get_db())
    except psycopg2.Error:
        LOGGER.exception("Failed to list contests")
        return _error_response(500, 'INTERNAL_ERROR', 'internal error')
    return jsonify([contest.to_api_dict() for contest in contests])


@contests_bp.route('/api/contests/solution', methods=['POST'])
def set_contest_solution():
    """Manually attach a solution URL to a contest, replacing any existing one."""
    data = request.get_json(silent=True) or {}
    contest_id = _parse_contest_id(data.get('contestId'))
    solution_url = data.get('solutionUrl')

    if contest_id is None:
        return _error_response(400, 'INVALID_REQUEST', 'contestId must be a positive integer')
    if not isinstance(solution_url, str) or not solution_url.strip():
        return _error_response(400, 'INVALID_REQUEST', 'solutionUrl is required')

    try:
        contest = contests_repo.set_solution_url(get_db(), contest_id, solution_url.strip())
    except psycopg2.Error:
        LOGGER.exception("Failed to set solution for contest %s", contest_id)
        return _error_response(500, 'INTERNAL_ERROR', 'internal error')

    if contest is None:
        return _error_response(404, 'CONTEST_NOT_FOUND', 'Contest not found')
    return jsonify(contest.to_api_dict())

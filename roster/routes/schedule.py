"""
Schedule API routes
Month reads with ETag revalidation, generation runs and day patches
"""
from flask import Blueprint, current_app, jsonify, request

from roster.error_handlers import handle_errors
from roster.routes.auth import require_authentication
from roster.services import get_services
from roster.utils.validators import parse_bool, require_json_object, validate_required_fields

schedule_bp = Blueprint('schedule', __name__, url_prefix='/api/schedule')


@schedule_bp.route('/<int:year>/<int:month>', methods=['GET'])
@handle_errors
def get_month(year, month):
    """
    Schedule entries of one month

    Headers:
        If-None-Match: fingerprint from an earlier response; answered with
            an empty 304 when the month is unchanged

    Query Parameters:
        force_regenerate: rebuild the month before answering
    """
    result = get_services().schedule.get_month_schedule(
        year,
        month,
        if_none_match=request.headers.get('If-None-Match'),
        force_regenerate=parse_bool(request.args.get('force_regenerate')),
    )
    response = jsonify({
        'success': True,
        'year': year,
        'month': month,
        'schedule': result['schedule'],
        'etag': result['etag'],
        'from_cache': result['from_cache']
    })
    response.headers['ETag'] = result['etag']
    response.headers['Cache-Control'] = f"private, max-age={current_app.config.get('SCHEDULE_CACHE_TTL', 60)}"
    return response


@schedule_bp.route('/generate', methods=['POST'])
@handle_errors
@require_authentication()
def generate_month():
    """
    Rebuild a whole month

    Request Body:
        {"year": 2024, "month": 6}
    """
    data = require_json_object(request.get_json(silent=True))
    validate_required_fields(data, ['year', 'month'])
    entries = get_services().schedule.generate_month(data['year'], data['month'])
    return jsonify({
        'success': True,
        'schedule': [e.to_dict() for e in entries],
        'days': len(entries)
    })


@schedule_bp.route('/generate-weekends', methods=['POST'])
@handle_errors
@require_authentication()
def generate_weekends():
    """
    Apply the weekend rotation to a month's stored entries

    Request Body:
        {"year": 2024, "month": 6, "force": false}
    """
    data = require_json_object(request.get_json(silent=True))
    validate_required_fields(data, ['year', 'month'])
    result = get_services().schedule.generate_weekends(
        data['year'], data['month'], force=parse_bool(data.get('force'))
    )
    return jsonify({'success': True, 'result': result.to_dict()})


@schedule_bp.route('/day/<date_str>', methods=['PATCH', 'PUT'])
@handle_errors
@require_authentication()
def update_day(date_str):
    """
    Replace all assignments of one date

    Request Body:
        {"assignments": [{"employee_id": "...", "start_time": "09:00", "end_time": "17:00"}]}
    """
    data = require_json_object(request.get_json(silent=True))
    entry = get_services().schedule.update_day(date_str, data.get('assignments'))
    return jsonify({'success': True, 'entry': entry.to_dict()})

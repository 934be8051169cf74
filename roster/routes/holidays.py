"""
Holiday API routes
Recurring company holidays, stored as MM-DD
"""
from flask import Blueprint, jsonify, request

from roster.error_handlers import handle_errors
from roster.routes.auth import require_authentication
from roster.services import get_services
from roster.utils.validators import require_json_object, validate_date_param

holidays_bp = Blueprint('holidays', __name__, url_prefix='/api/holidays')


@holidays_bp.route('', methods=['GET'])
@handle_errors
def list_holidays():
    holidays = get_services().holidays.list_holidays()
    return jsonify({
        'success': True,
        'holidays': [h.to_dict() for h in holidays],
        'count': len(holidays)
    })


@holidays_bp.route('/check', methods=['GET'])
@handle_errors
def check_holiday():
    """
    Check whether a date falls on a holiday

    Query Parameters:
        date: YYYY-MM-DD
    """
    day = validate_date_param(request.args.get('date'), 'date')
    holiday = get_services().holidays.check(day)
    return jsonify({
        'success': True,
        'date': day.isoformat(),
        'is_holiday': holiday is not None,
        'holiday': holiday.to_dict() if holiday else None
    })


@holidays_bp.route('/<holiday_id>', methods=['GET'])
@handle_errors
def get_holiday(holiday_id):
    holiday = get_services().holidays.get(holiday_id)
    return jsonify({'success': True, 'holiday': holiday.to_dict()})


@holidays_bp.route('', methods=['POST'])
@handle_errors
@require_authentication()
def create_holiday():
    data = require_json_object(request.get_json(silent=True))
    holiday = get_services().holidays.create(data)
    return jsonify({'success': True, 'holiday': holiday.to_dict()}), 201


@holidays_bp.route('/<holiday_id>', methods=['PATCH', 'PUT'])
@handle_errors
@require_authentication()
def update_holiday(holiday_id):
    data = require_json_object(request.get_json(silent=True))
    holiday = get_services().holidays.update(holiday_id, data)
    return jsonify({'success': True, 'holiday': holiday.to_dict()})


@holidays_bp.route('/<holiday_id>', methods=['DELETE'])
@handle_errors
@require_authentication()
def delete_holiday(holiday_id):
    get_services().holidays.delete(holiday_id)
    return '', 204

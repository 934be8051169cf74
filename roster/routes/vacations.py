"""
Vacation API routes
"""
from datetime import date

from flask import Blueprint, jsonify, request

from roster.error_handlers import handle_errors
from roster.error_handlers.exceptions import ValidationException
from roster.routes.auth import require_authentication
from roster.services import get_services
from roster.utils.validators import require_json_object

vacations_bp = Blueprint('vacations', __name__, url_prefix='/api/vacations')


def _year_param() -> int:
    raw = request.args.get('year')
    if raw in (None, ''):
        return date.today().year
    try:
        return int(raw)
    except ValueError:
        raise ValidationException('Invalid year', field='year')


@vacations_bp.route('', methods=['GET'])
@handle_errors
def list_vacations():
    """
    Vacations of one year

    Query Parameters:
        year: defaults to the current year
        employee_id: optional employee filter
    """
    year = _year_param()
    vacations = get_services().vacations.list_vacations(year, request.args.get('employee_id') or None)
    return jsonify({
        'success': True,
        'year': year,
        'vacations': [v.to_dict() for v in vacations],
        'count': len(vacations)
    })


@vacations_bp.route('/conflicts', methods=['GET'])
@handle_errors
def list_conflicts():
    """Stored overlapping periods (left behind by concurrent submissions)"""
    pairs = get_services().vacations.find_conflicts(request.args.get('employee_id') or None)
    return jsonify({
        'success': True,
        'conflicts': [{'first': a.to_dict(), 'second': b.to_dict()} for a, b in pairs],
        'count': len(pairs)
    })


@vacations_bp.route('/<vacation_id>', methods=['GET'])
@handle_errors
def get_vacation(vacation_id):
    vacation = get_services().vacations.get(vacation_id)
    return jsonify({'success': True, 'vacation': vacation.to_dict()})


@vacations_bp.route('', methods=['POST'])
@handle_errors
@require_authentication()
def create_vacation():
    data = require_json_object(request.get_json(silent=True))
    vacation = get_services().vacations.create(data)
    return jsonify({'success': True, 'vacation': vacation.to_dict()}), 201


@vacations_bp.route('/<vacation_id>', methods=['PATCH', 'PUT'])
@handle_errors
@require_authentication()
def update_vacation(vacation_id):
    data = require_json_object(request.get_json(silent=True))
    vacation = get_services().vacations.update(vacation_id, data)
    return jsonify({'success': True, 'vacation': vacation.to_dict()})


@vacations_bp.route('/<vacation_id>', methods=['DELETE'])
@handle_errors
@require_authentication()
def delete_vacation(vacation_id):
    get_services().vacations.remove(vacation_id)
    return '', 204

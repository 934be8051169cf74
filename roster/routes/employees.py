"""
Employee API routes
"""
from flask import Blueprint, jsonify, request

from roster.error_handlers import handle_errors
from roster.routes.auth import require_authentication
from roster.services import get_services
from roster.utils.validators import require_json_object

employees_bp = Blueprint('employees', __name__, url_prefix='/api/employees')


@employees_bp.route('', methods=['GET'])
@handle_errors
def list_employees():
    """All employees ordered by name"""
    employees = get_services().employees.list_employees()
    return jsonify({
        'success': True,
        'employees': [e.to_dict() for e in employees],
        'count': len(employees)
    })


@employees_bp.route('/<employee_id>', methods=['GET'])
@handle_errors
def get_employee(employee_id):
    employee = get_services().employees.get(employee_id)
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('', methods=['POST'])
@handle_errors
@require_authentication()
def create_employee():
    """
    Create an employee

    Active employees are added to already generated days of the current
    month; failures there are logged and do not fail the create.
    """
    data = require_json_object(request.get_json(silent=True))
    employee = get_services().employees.create(data)
    return jsonify({'success': True, 'employee': employee.to_dict()}), 201


@employees_bp.route('/<employee_id>', methods=['PATCH', 'PUT'])
@handle_errors
@require_authentication()
def update_employee(employee_id):
    data = require_json_object(request.get_json(silent=True))
    employee = get_services().employees.update(employee_id, data)
    return jsonify({'success': True, 'employee': employee.to_dict()})


@employees_bp.route('/<employee_id>', methods=['DELETE'])
@handle_errors
@require_authentication()
def delete_employee(employee_id):
    get_services().employees.delete(employee_id)
    return '', 204

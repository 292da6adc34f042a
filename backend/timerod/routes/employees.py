from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_current_user
from timerod.errors import ValidationError
from timerod.extensions import db
from timerod.models import Employee
from timerod.services.directory import (
    require_company, require_area_in_company, require_user_in_company, require_schedule,
    employee_number_taken, apply_active_flag,
)
from timerod.utils.audit import log_event
from timerod.utils.decorators import role_required
from timerod.utils.validators import (
    get_json_body, require_str, optional_str, parse_int, parse_date, parse_decimal, parse_bool,
)

employees_bp = Blueprint('employees', __name__)


def _ordered(query):
    return query.order_by(Employee.last_name, Employee.first_name)


def _active_employee_or_404(employee_id):
    return Employee.query.filter_by(id=employee_id, active=True).first_or_404(description="Employee not found")


def _apply_payload(employee, data):
    employee_number = require_str(data, 'employeeNumber', max_length=50)
    first_name = require_str(data, 'firstName', max_length=150)
    last_name = require_str(data, 'lastName', max_length=150)
    company = require_company(parse_int(data.get('companyId'), 'companyId', required=True))
    area = require_area_in_company(parse_int(data.get('areaId'), 'areaId', required=True), company.id)

    user_id = parse_int(data.get('userId'), 'userId')
    if user_id is not None:
        require_user_in_company(user_id, company.id)

    schedule_id = parse_int(data.get('scheduleId'), 'scheduleId')
    if schedule_id is not None:
        require_schedule(schedule_id)

    if employee_number_taken(company.id, employee_number, exclude_employee_id=employee.id):
        raise ValidationError("Employee number already exists in this company")

    daily_salary = data.get('dailySalary')
    daily_salary = parse_decimal(daily_salary, 'dailySalary') if daily_salary is not None else 0
    if daily_salary < 0:
        raise ValidationError("dailySalary cannot be negative")

    employee.company_id = company.id
    employee.area_id = area.id
    employee.user_id = user_id
    employee.schedule_id = schedule_id
    employee.employee_number = employee_number
    employee.first_name = first_name
    employee.last_name = last_name
    employee.hire_date = parse_date(data.get('hireDate'), 'hireDate')
    employee.daily_salary = daily_salary
    employee.position = optional_str(data.get('position'), 'position')
    employee.biometric_id = optional_str(data.get('biometricId'), 'biometricId')
    return employee


@employees_bp.route('', methods=['GET'])
@jwt_required()
def list_employees():
    employees = _ordered(Employee.query.filter_by(active=True)).all()
    return jsonify([e.to_dict() for e in employees]), 200


@employees_bp.route('/empresa/<int:company_id>', methods=['GET'])
@jwt_required()
def list_company_employees(company_id):
    employees = _ordered(Employee.query.filter_by(company_id=company_id, active=True)).all()
    return jsonify([e.to_dict() for e in employees]), 200


@employees_bp.route('/area/<int:area_id>', methods=['GET'])
@jwt_required()
def list_area_employees(area_id):
    employees = _ordered(Employee.query.filter_by(area_id=area_id, active=True)).all()
    return jsonify([e.to_dict() for e in employees]), 200


@employees_bp.route('/numero/<string:employee_number>', methods=['GET'])
@jwt_required()
def get_employee_by_number(employee_number):
    query = Employee.query.filter_by(employee_number=employee_number, active=True)
    company_id = request.args.get('empresaId', type=int)
    if company_id is not None:
        query = query.filter_by(company_id=company_id)
    employee = query.first_or_404(description="Employee not found")
    return jsonify(employee.to_dict()), 200


@employees_bp.route('/<int:employee_id>', methods=['GET'])
@jwt_required()
def get_employee(employee_id):
    return jsonify(_active_employee_or_404(employee_id).to_dict()), 200


@employees_bp.route('', methods=['POST'])
@jwt_required()
@role_required('admin', 'hr')
def create_employee():
    data = get_json_body()

    employee = _apply_payload(Employee(), data)
    db.session.add(employee)
    db.session.commit()

    log_event("EMPLOYEE_CREATED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"Employee {employee.id} ({employee.employee_number})")
    return jsonify(employee.to_dict()), 201


@employees_bp.route('/<int:employee_id>', methods=['PUT'])
@jwt_required()
@role_required('admin', 'hr')
def update_employee(employee_id):
    employee = db.get_or_404(Employee, employee_id, description="Employee not found")
    data = get_json_body()

    _apply_payload(employee, data)
    apply_active_flag(employee, parse_bool(data.get('active'), 'active', default=employee.active))
    db.session.commit()
    return '', 204


@employees_bp.route('/<int:employee_id>', methods=['DELETE'])
@jwt_required()
@role_required('admin', 'hr')
def delete_employee(employee_id):
    employee = _active_employee_or_404(employee_id)
    employee.soft_delete()
    db.session.commit()

    log_event("EMPLOYEE_DELETED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"Employee {employee.id} deactivated", level="WARNING")
    return '', 204

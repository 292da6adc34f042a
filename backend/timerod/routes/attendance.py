from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_current_user
from timerod.extensions import db
from timerod.models import Employee
from timerod.services import attendance as attendance_service
from timerod.services.reports import build_attendance_report
from timerod.utils.access_control import get_allowed_company_ids
from timerod.utils.audit import log_event
from timerod.utils.decorators import role_required
from timerod.utils.validators import (
    get_json_body, optional_str, parse_bool, parse_date_arg, parse_datetime, parse_int,
)

attendance_bp = Blueprint('attendance', __name__)


def _forbidden(message):
    return jsonify({"error": message}), 403


def _employee_in_scope(user, employee_id):
    employee = db.session.get(Employee, employee_id)
    if employee is None:
        return True
    try:
        get_allowed_company_ids(user, [employee.company_id])
    except PermissionError:
        return False
    return True


def _record_in_scope(user, record):
    return _employee_in_scope(user, record.employee_id)


@attendance_bp.route('', methods=['GET'])
@jwt_required()
def list_attendance():
    user = get_current_user()
    employee_id = parse_int(request.args.get('empleadoId'), 'empleadoId')
    date_from = parse_date_arg('fechaInicio')
    date_to = parse_date_arg('fechaFin')

    records = attendance_service.list_records(
        employee_id=employee_id,
        date_from=date_from,
        date_to=date_to,
        company_ids=get_allowed_company_ids(user),
    )
    return jsonify([r.to_dict() for r in records]), 200


@attendance_bp.route('/<int:record_id>', methods=['GET'])
@jwt_required()
def get_attendance(record_id):
    record = attendance_service.get_record(record_id)
    if not _record_in_scope(get_current_user(), record):
        return _forbidden("Access forbidden: company mismatch")
    return jsonify(record.to_dict()), 200


@attendance_bp.route('/empleado/<int:employee_id>', methods=['GET'])
@jwt_required()
def list_employee_attendance(employee_id):
    if not _employee_in_scope(get_current_user(), employee_id):
        return _forbidden("Access forbidden: company mismatch")

    records = attendance_service.list_records(
        employee_id=employee_id,
        date_from=parse_date_arg('fechaInicio'),
        date_to=parse_date_arg('fechaFin'),
    )
    return jsonify([r.to_dict() for r in records]), 200


@attendance_bp.route('/entrada', methods=['POST'])
@jwt_required()
def clock_in():
    user = get_current_user()
    data = get_json_body()
    employee_id = parse_int(data.get('employeeId'), 'employeeId', required=True)

    if not _employee_in_scope(user, employee_id):
        return _forbidden("Access forbidden: company mismatch")

    record = attendance_service.clock_in(employee_id, notes=optional_str(data.get('notes'), 'notes'))

    log_event("CLOCK_IN", user_id=user.id, ip=request.remote_addr,
              description=f"Employee {employee_id} entry at {record.entry_time.isoformat()}")
    return jsonify(record.to_dict()), 201


@attendance_bp.route('/salida', methods=['POST'])
@jwt_required()
def clock_out():
    user = get_current_user()
    data = get_json_body()
    employee_id = parse_int(data.get('employeeId'), 'employeeId', required=True)

    if not _employee_in_scope(user, employee_id):
        return _forbidden("Access forbidden: company mismatch")

    record = attendance_service.clock_out(employee_id, notes=optional_str(data.get('notes'), 'notes'))

    log_event("CLOCK_OUT", user_id=user.id, ip=request.remote_addr,
              description=f"Employee {employee_id} exit at {record.exit_time.isoformat()}")
    return jsonify(record.to_dict()), 200


@attendance_bp.route('/reporte', methods=['GET'])
@jwt_required()
def report():
    user = get_current_user()
    company_id = parse_int(request.args.get('empresaId'), 'empresaId')

    try:
        company_ids = get_allowed_company_ids(user, company_id)
    except (ValueError, PermissionError) as e:
        return _forbidden(str(e))

    result = build_attendance_report(
        date_from=parse_date_arg('fechaInicio'),
        date_to=parse_date_arg('fechaFin'),
        company_ids=company_ids,
    )
    return jsonify(result), 200


@attendance_bp.route('/<int:record_id>', methods=['PUT'])
@jwt_required()
@role_required('admin', 'hr', 'supervisor')
def update_attendance(record_id):
    user = get_current_user()
    data = get_json_body()

    record = attendance_service.get_record(record_id)
    if not _record_in_scope(user, record):
        return _forbidden("Access forbidden: company mismatch")

    attendance_service.update_record(
        record_id,
        entry_time=parse_datetime(data.get('entryTime'), 'entryTime'),
        exit_time=parse_datetime(data.get('exitTime'), 'exitTime'),
        kind=data.get('kind'),
        notes=optional_str(data.get('notes'), 'notes'),
        approved=parse_bool(data.get('approved'), 'approved', default=True),
        late_arrival=parse_bool(data.get('lateArrival'), 'lateArrival', default=False),
        late_minutes=parse_int(data.get('lateMinutes'), 'lateMinutes'),
        expected_version=parse_int(data.get('version'), 'version'),
    )

    log_event("ATTENDANCE_UPDATED", user_id=user.id, ip=request.remote_addr,
              description=f"Attendance record {record_id} updated")
    return '', 204


@attendance_bp.route('/<int:record_id>', methods=['DELETE'])
@jwt_required()
@role_required('admin', 'hr', 'supervisor')
def delete_attendance(record_id):
    user = get_current_user()

    record = attendance_service.get_record(record_id)
    if not _record_in_scope(user, record):
        return _forbidden("Access forbidden: company mismatch")

    attendance_service.delete_record(record_id)

    log_event("ATTENDANCE_DELETED", user_id=user.id, ip=request.remote_addr,
              description=f"Attendance record {record_id} deleted", level="WARNING")
    return '', 204

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from timerod.errors import ValidationError
from timerod.extensions import db
from timerod.models import Schedule
from timerod.services.directory import apply_active_flag
from timerod.utils.decorators import role_required
from timerod.utils.validators import get_json_body, require_str, parse_int, parse_time, parse_bool

schedules_bp = Blueprint('schedules', __name__)

MAX_TOLERANCE_MINUTES = 120


def _active_schedule_or_404(schedule_id):
    return Schedule.query.filter_by(id=schedule_id, active=True).first_or_404(description="Schedule not found")


def _apply_payload(schedule, data):
    name = require_str(data, 'name', max_length=100)
    entry_time = parse_time(require_str(data, 'entryTime'), 'entryTime')
    exit_time = parse_time(require_str(data, 'exitTime'), 'exitTime')

    tolerance = parse_int(data.get('toleranceMinutes'), 'toleranceMinutes') or 0
    if not 0 <= tolerance <= MAX_TOLERANCE_MINUTES:
        raise ValidationError(f"toleranceMinutes must be between 0 and {MAX_TOLERANCE_MINUTES}")

    schedule.name = name
    schedule.entry_time = entry_time
    schedule.exit_time = exit_time
    schedule.tolerance_minutes = tolerance
    return schedule


@schedules_bp.route('', methods=['GET'])
@jwt_required()
def list_schedules():
    schedules = Schedule.query.filter_by(active=True).order_by(Schedule.name).all()
    return jsonify([s.to_dict() for s in schedules]), 200


@schedules_bp.route('/<int:schedule_id>', methods=['GET'])
@jwt_required()
def get_schedule(schedule_id):
    return jsonify(_active_schedule_or_404(schedule_id).to_dict()), 200


@schedules_bp.route('', methods=['POST'])
@jwt_required()
@role_required('admin', 'hr')
def create_schedule():
    data = get_json_body()

    schedule = _apply_payload(Schedule(), data)
    db.session.add(schedule)
    db.session.commit()
    return jsonify(schedule.to_dict()), 201


@schedules_bp.route('/<int:schedule_id>', methods=['PUT'])
@jwt_required()
@role_required('admin', 'hr')
def update_schedule(schedule_id):
    schedule = db.get_or_404(Schedule, schedule_id, description="Schedule not found")
    data = get_json_body()

    _apply_payload(schedule, data)
    apply_active_flag(schedule, parse_bool(data.get('active'), 'active', default=schedule.active))
    db.session.commit()
    return '', 204


@schedules_bp.route('/<int:schedule_id>', methods=['DELETE'])
@jwt_required()
@role_required('admin', 'hr')
def delete_schedule(schedule_id):
    schedule = _active_schedule_or_404(schedule_id)
    schedule.soft_delete()
    db.session.commit()
    return '', 204

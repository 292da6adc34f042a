from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_current_user
from timerod.extensions import db
from timerod.models import Area
from timerod.services.directory import (
    require_company, require_active_supervisor, require_schedule, area_deactivation_blocker, apply_active_flag,
)
from timerod.utils.audit import log_event
from timerod.utils.decorators import role_required
from timerod.utils.validators import get_json_body, require_str, optional_str, parse_int, parse_bool

areas_bp = Blueprint('areas', __name__)


def _active_area_or_404(area_id):
    return Area.query.filter_by(id=area_id, active=True).first_or_404(description="Area not found")


def _apply_payload(area, data):
    """Validates references and copies the request payload onto the area."""
    name = require_str(data, 'name', max_length=150)
    company = require_company(parse_int(data.get('companyId'), 'companyId', required=True))

    supervisor_id = parse_int(data.get('supervisorId'), 'supervisorId')
    if supervisor_id is not None:
        require_active_supervisor(supervisor_id)

    schedule_id = parse_int(data.get('scheduleId'), 'scheduleId')
    if schedule_id is not None:
        require_schedule(schedule_id)

    area.company_id = company.id
    area.name = name
    area.description = optional_str(data.get('description'), 'description')
    area.supervisor_id = supervisor_id
    area.schedule_id = schedule_id
    return area


@areas_bp.route('', methods=['GET'])
@jwt_required()
def list_areas():
    areas = Area.query.filter_by(active=True).order_by(Area.name).all()
    return jsonify([a.to_dict() for a in areas]), 200


@areas_bp.route('/empresa/<int:company_id>', methods=['GET'])
@jwt_required()
def list_company_areas(company_id):
    areas = Area.query.filter_by(company_id=company_id, active=True).order_by(Area.name).all()
    return jsonify([a.to_dict() for a in areas]), 200


@areas_bp.route('/<int:area_id>', methods=['GET'])
@jwt_required()
def get_area(area_id):
    return jsonify(_active_area_or_404(area_id).to_dict()), 200


@areas_bp.route('', methods=['POST'])
@jwt_required()
@role_required('admin', 'hr')
def create_area():
    data = get_json_body()

    area = _apply_payload(Area(), data)
    db.session.add(area)
    db.session.commit()

    log_event("AREA_CREATED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"Area {area.id} in company {area.company_id}")
    return jsonify(area.to_dict()), 201


@areas_bp.route('/<int:area_id>', methods=['PUT'])
@jwt_required()
@role_required('admin', 'hr')
def update_area(area_id):
    area = db.get_or_404(Area, area_id, description="Area not found")
    data = get_json_body()

    _apply_payload(area, data)
    apply_active_flag(area, parse_bool(data.get('active'), 'active', default=area.active),
                      blocker=area_deactivation_blocker)
    db.session.commit()
    return '', 204


@areas_bp.route('/<int:area_id>', methods=['DELETE'])
@jwt_required()
@role_required('admin', 'hr')
def delete_area(area_id):
    area = _active_area_or_404(area_id)

    apply_active_flag(area, False, blocker=area_deactivation_blocker)
    db.session.commit()

    log_event("AREA_DELETED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"Area {area.id} deactivated", level="WARNING")
    return '', 204

import re
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_current_user
from timerod.errors import ValidationError
from timerod.extensions import db
from timerod.models import Company
from timerod.services.directory import tax_id_taken, company_deactivation_blocker, apply_active_flag
from timerod.utils.audit import log_event
from timerod.utils.decorators import role_required
from timerod.utils.validators import get_json_body, require_str, optional_str, parse_bool

companies_bp = Blueprint('companies', __name__)

# Mexican RFC for legal entities (3 letters) and individuals (4 letters)
TAX_ID_PATTERN = re.compile(r"^[A-Z&Ñ]{3,4}\d{6}[A-Z\d]{3}$")


def _active_company_or_404(company_id):
    return Company.query.filter_by(id=company_id, active=True).first_or_404(description="Company not found")


def _validated_tax_id(data, exclude_company_id=None):
    tax_id = require_str(data, 'taxId').upper()
    if not TAX_ID_PATTERN.match(tax_id):
        raise ValidationError("Invalid RFC format")
    if tax_id_taken(tax_id, exclude_company_id):
        raise ValidationError("A company with this RFC already exists")
    return tax_id


def _apply_payload(company, data):
    name = require_str(data, 'name', max_length=200)
    tax_id = _validated_tax_id(data, exclude_company_id=company.id)

    company.name = name
    company.tax_id = tax_id
    company.address = optional_str(data.get('address'), 'address')
    company.settings_json = optional_str(data.get('settingsJson'), 'settingsJson')
    return company


@companies_bp.route('', methods=['GET'])
@jwt_required()
def list_companies():
    companies = Company.query.filter_by(active=True).order_by(Company.name).all()
    return jsonify([c.to_dict() for c in companies]), 200


@companies_bp.route('/<int:company_id>', methods=['GET'])
@jwt_required()
def get_company(company_id):
    return jsonify(_active_company_or_404(company_id).to_dict()), 200


@companies_bp.route('', methods=['POST'])
@jwt_required()
@role_required('admin', 'hr')
def create_company():
    data = get_json_body()

    company = _apply_payload(Company(), data)
    db.session.add(company)
    db.session.commit()

    log_event("COMPANY_CREATED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"Company {company.id} ({company.tax_id})")
    return jsonify(company.to_dict()), 201


@companies_bp.route('/<int:company_id>', methods=['PUT'])
@jwt_required()
@role_required('admin', 'hr')
def update_company(company_id):
    # Inactive companies are reachable here so they can be reactivated
    company = db.get_or_404(Company, company_id, description="Company not found")
    data = get_json_body()

    _apply_payload(company, data)
    apply_active_flag(company, parse_bool(data.get('active'), 'active', default=company.active),
                      blocker=company_deactivation_blocker)
    db.session.commit()

    return '', 204


@companies_bp.route('/<int:company_id>', methods=['DELETE'])
@jwt_required()
@role_required('admin', 'hr')
def delete_company(company_id):
    company = _active_company_or_404(company_id)

    apply_active_flag(company, False, blocker=company_deactivation_blocker)
    db.session.commit()

    log_event("COMPANY_DELETED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"Company {company.id} deactivated", level="WARNING")
    return '', 204

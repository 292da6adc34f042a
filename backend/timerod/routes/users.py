from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_current_user
from timerod.errors import ForbiddenError, ValidationError
from timerod.extensions import db
from timerod.models import User, UserRole, parse_enum
from timerod.services.directory import require_company, email_taken, apply_active_flag
from timerod.utils.audit import log_event
from timerod.utils.decorators import role_required
from timerod.utils.validators import get_json_body, require_str, parse_int, parse_bool

users_bp = Blueprint('users', __name__)


def _active_user_or_404(user_id):
    return User.query.filter_by(id=user_id, active=True).first_or_404(description="User not found")


def _ensure_can_manage(actor, role):
    # Admin accounts see every company, so only admins may grant or edit them
    if role is UserRole.ADMIN and actor.role is not UserRole.ADMIN:
        raise ForbiddenError("Only administrators can manage administrator accounts")


def _apply_payload(user, data, password_required=False):
    email = require_str(data, 'email', max_length=255)
    full_name = require_str(data, 'fullName', max_length=200)
    company = require_company(parse_int(data.get('companyId'), 'companyId', required=True))

    if '@' not in email:
        raise ValidationError("Invalid email format")
    if email_taken(email, exclude_user_id=user.id):
        raise ValidationError("Email is already registered")

    role = parse_enum(UserRole, data.get('role'))
    if role is None:
        raise ValidationError(f"Invalid role: {data.get('role')}")
    _ensure_can_manage(get_current_user(), role)

    # Password only changes when a new one is sent
    if password_required:
        require_str(data, 'password')
    password = data.get('password')
    if password:
        if not isinstance(password, str):
            raise ValidationError("password must be a string")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters")
        user.set_password(password)

    user.company_id = company.id
    user.email = email
    user.full_name = full_name
    user.role = role
    return user


@users_bp.route('', methods=['GET'])
@jwt_required()
def list_users():
    query = User.query.filter_by(active=True)
    company_id = request.args.get('empresaId', type=int)
    if company_id is not None:
        query = query.filter_by(company_id=company_id)
    users = query.order_by(User.full_name).all()
    return jsonify([u.to_dict() for u in users]), 200


@users_bp.route('/empresa/<int:company_id>', methods=['GET'])
@jwt_required()
def list_company_users(company_id):
    users = User.query.filter_by(company_id=company_id, active=True).order_by(User.full_name).all()
    return jsonify([u.to_dict() for u in users]), 200


@users_bp.route('/<int:user_id>', methods=['GET'])
@jwt_required()
def get_user(user_id):
    return jsonify(_active_user_or_404(user_id).to_dict()), 200


@users_bp.route('', methods=['POST'])
@jwt_required()
@role_required('admin', 'hr')
def create_user():
    data = get_json_body()

    user = _apply_payload(User(), data, password_required=True)
    db.session.add(user)
    db.session.commit()

    log_event("USER_CREATED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"User {user.id} ({user.email}) as {user.role.value}")
    return jsonify(user.to_dict()), 201


@users_bp.route('/<int:user_id>', methods=['PUT'])
@jwt_required()
@role_required('admin', 'hr')
def update_user(user_id):
    user = db.get_or_404(User, user_id, description="User not found")
    _ensure_can_manage(get_current_user(), user.role)
    data = get_json_body()

    _apply_payload(user, data)
    apply_active_flag(user, parse_bool(data.get('active'), 'active', default=user.active))
    db.session.commit()
    return '', 204


@users_bp.route('/<int:user_id>', methods=['DELETE'])
@jwt_required()
@role_required('admin', 'hr')
def delete_user(user_id):
    user = _active_user_or_404(user_id)
    _ensure_can_manage(get_current_user(), user.role)
    user.soft_delete()
    db.session.commit()

    log_event("USER_DELETED", user_id=get_current_user().id, ip=request.remote_addr,
              description=f"User {user.id} deactivated", level="WARNING")
    return '', 204

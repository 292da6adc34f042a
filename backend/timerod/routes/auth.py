from datetime import datetime, timezone
from flask import Blueprint, request, jsonify
from flask_jwt_extended import create_access_token, jwt_required, get_jwt, get_jwt_identity
from sqlalchemy import func
from timerod.models import User, TokenBlocklist, utcnow
from timerod.extensions import db, limiter
from timerod.utils.audit import log_event

auth_bp = Blueprint('auth', __name__)


def issue_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={
            "email": user.email,
            "role": user.role.value,
            "companyId": user.company_id,
            "fullName": user.full_name,
        }
    )


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def login():
    data = request.get_json(silent=True) or {}
    email = str(data.get('email') or '').strip()
    password = data.get('password') or ''
    ip = request.remote_addr

    if not email or not password:
        return jsonify({"error": "Email and password are required"}), 400

    user = User.query.filter(func.lower(User.email) == email.lower(), User.active.is_(True)).first()

    if user and user.check_password(password):
        user.last_login_at = utcnow()
        db.session.commit()

        log_event("LOGIN_SUCCESS", user_id=user.id, ip=ip, description=f"{user.email} logged in")
        return jsonify({"token": issue_token(user), "user": user.to_dict()}), 200

    log_event("LOGIN_FAILED", ip=ip, description=f"Failed login attempt for {email}", level="WARNING")
    return jsonify({"error": "Invalid email or password"}), 401


@auth_bp.route('/verify', methods=['GET'])
@jwt_required()
def verify():
    claims = get_jwt()
    return jsonify({
        "userId": int(get_jwt_identity()),
        "email": claims.get("email"),
        "role": claims.get("role"),
        "companyId": claims.get("companyId"),
        "fullName": claims.get("fullName"),
    }), 200


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    claims = get_jwt()
    user_id = int(get_jwt_identity())
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc).replace(tzinfo=None)

    db.session.add(TokenBlocklist(jti=claims["jti"], token_type=claims.get("type", "access"),
                                  user_id=user_id, expires_at=expires))
    db.session.commit()

    log_event("LOGOUT", user_id=user_id, ip=request.remote_addr)
    return jsonify({"message": "Successfully logged out"}), 200

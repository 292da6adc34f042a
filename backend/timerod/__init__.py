from flask import Flask, jsonify
from flask_cors import CORS
from .config import get_config
from timerod.errors import register_error_handlers
from timerod.extensions import db, jwt, limiter, migrate
from timerod.models import TokenBlocklist, User
from timerod.routes import register_routes


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or get_config())

    db.init_app(app)
    jwt.init_app(app)
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)
    limiter.init_app(app)
    migrate.init_app(app, db)

    register_error_handlers(app)
    register_jwt_callbacks()
    register_routes(app)

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    return app


def register_jwt_callbacks():
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        jti = jwt_payload["jti"]
        token = db.session.query(TokenBlocklist).filter_by(jti=jti).first()
        return token is not None

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_payload):
        user = db.session.get(User, int(jwt_payload["sub"]))
        return user if user is not None and user.active else None

    @jwt.user_lookup_error_loader
    def user_lookup_failed(jwt_header, jwt_payload):
        return jsonify({"error": "User not found or inactive"}), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": reason}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"error": reason}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token has expired"}), 401

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token has been revoked"}), 401

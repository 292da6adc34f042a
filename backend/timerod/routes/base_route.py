from flask import Blueprint, jsonify
from sqlalchemy import text
from timerod.extensions import db

base_bp = Blueprint("base", __name__)


@base_bp.route("/")
def home():
    return jsonify({"message": "TimeROD attendance API"})


@base_bp.route("/api/health")
def health():
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        db.session.rollback()
        return {"status": "error", "message": str(e)}, 500

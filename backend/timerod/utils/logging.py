from flask import request, jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from timerod.utils.audit import log_event


def log_rate_limit_violation(request_limit):
    try:
        verify_jwt_in_request(optional=True)
        user_id = get_jwt_identity()
    except Exception:
        user_id = None

    log_event(
        "RATE_LIMIT_EXCEEDED",
        user_id=user_id,
        ip=request.remote_addr,
        description=f"{request.method} {request.path} ({request_limit.limit})",
        level="WARNING",
    )

    response = jsonify({
        "error": "Rate limit exceeded. Please slow down."
    })
    response.status_code = 429
    return response

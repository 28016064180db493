"""
Decorators Module - Request guards shared by the API blueprints
"""

from functools import wraps
from flask import request, jsonify, current_app


def json_body_required(f):
    """Reject requests whose body is not a JSON object"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            current_app.logger.warning(f"Rejected non-JSON body on {request.endpoint}")
            return jsonify({'error': 'Request body must be a JSON object'}), 400
        return f(*args, **kwargs)
    return decorated_function


def api_errors(message):
    """Turn unexpected exceptions into a logged JSON 500 with a rolled back session"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except Exception as e:
                from extensions import db
                db.session.rollback()
                current_app.logger.error(f"{message}: {str(e)}")
                return jsonify({'error': message}), 500
        return decorated_function
    return decorator

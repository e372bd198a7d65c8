"""Session token authentication for protected routes."""

from functools import wraps
from flask import request, jsonify, current_app
import jwt


def get_auth_service():
    """The AuthService wired up by create_app for the current app."""
    return current_app.extensions['auth_service']


def token_required(f):
    """
    Decorator to require a valid session token.

    Reads ``Authorization: Bearer <token>``, verifies signature and expiry,
    and passes the token's userId as the first argument to the decorated
    function.

    Usage:
        @auth_bp.route('/me')
        @token_required
        def me(current_user_id):
            ...
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return jsonify({'success': False, 'error': 'Token is missing'}), 401

        # Support both "Bearer <token>" and raw token formats
        token = auth_header.split(' ', 1)[1] if ' ' in auth_header else auth_header

        try:
            payload = get_auth_service().decode_token(token)
            current_user_id = payload['userId']
        except jwt.ExpiredSignatureError:
            return jsonify({'success': False, 'error': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError):
            return jsonify({'success': False, 'error': 'Token is invalid'}), 401

        return f(current_user_id, *args, **kwargs)
    return decorated

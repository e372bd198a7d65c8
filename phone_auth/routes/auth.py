"""Auth routes: verification code sends, login, registration and current user."""

from flask import Blueprint, request, jsonify, current_app
from phone_auth import limiter
from phone_auth.errors import InvalidPhoneNumber, status_for_error
from phone_auth.services.auth_service import LOGIN_TYPE_CODE, LOGIN_TYPE_PASSWORD
from phone_auth.utils import token_required, get_auth_service, validate_phone_number

auth_bp = Blueprint('auth', __name__)


def _failure(result):
    """Response for a failed service result, status chosen from the error message."""
    status = status_for_error(result.get('error'))
    return jsonify(result), status


def _bad_request(message):
    return jsonify({'success': False, 'error': message}), 400


def _json_body():
    """Request JSON as a dict; anything other than a JSON object counts as empty."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return data


@auth_bp.route('/send-verification-code', methods=['POST'])
@limiter.limit("5 per minute")
def send_verification_code():
    """Send a verification code to a phone number."""
    data = _json_body()
    phone_number = data.get('phoneNumber')

    if not phone_number:
        return _bad_request('Phone number is required')

    result = get_auth_service().send_verification_code(phone_number)

    if not result['success']:
        current_app.logger.info(f"Verification code not sent to {phone_number}: {result['error']}")
        return _failure(result)

    return jsonify(result), 200


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    """Log in with a verification code (default) or a password."""
    data = _json_body()
    phone_number = data.get('phoneNumber')
    login_type = data.get('loginType') or LOGIN_TYPE_CODE
    verification_code = data.get('verificationCode')
    password = data.get('password')

    # Format is checked before required fields
    if phone_number and not validate_phone_number(phone_number):
        return _bad_request(InvalidPhoneNumber.message)

    if not phone_number:
        return _bad_request('Phone number is required')

    if login_type == LOGIN_TYPE_CODE and not verification_code:
        return _bad_request('Verification code is required')

    if login_type == LOGIN_TYPE_PASSWORD and not password:
        return _bad_request('Password is required')

    result = get_auth_service().login(
        phone_number,
        login_type=login_type,
        verification_code=verification_code,
        password=password,
    )

    if not result['success']:
        return _failure(result)

    return jsonify(result), 200


@auth_bp.route('/register', methods=['POST'])
@limiter.limit("5 per minute")
def register():
    """Register a new account with a verification code and optional password."""
    data = _json_body()
    phone_number = data.get('phoneNumber')
    verification_code = data.get('verificationCode')

    if phone_number and not validate_phone_number(phone_number):
        return _bad_request(InvalidPhoneNumber.message)

    if not phone_number or not verification_code:
        return _bad_request('Phone number and verification code are required')

    result = get_auth_service().register(
        phone_number,
        verification_code,
        password=data.get('password') or None,
        agree_to_terms=data.get('agreeToTerms'),
    )

    if not result['success']:
        return _failure(result)

    return jsonify(result), 201


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user_id):
    """Return the account the session token belongs to."""
    user = get_auth_service().users.find_by_id(current_user_id)

    if not user:
        return jsonify({'success': False, 'error': 'User not found'}), 404

    return jsonify({'success': True, 'user': user.to_dict()}), 200

"""Shared utilities for the phone authentication backend."""

from phone_auth.utils.auth import token_required, get_auth_service
from phone_auth.utils.validators import (
    validate_phone_number,
    validate_password,
    validate_code,
    generate_code,
)

__all__ = [
    'token_required',
    'get_auth_service',
    'validate_phone_number',
    'validate_password',
    'validate_code',
    'generate_code',
]

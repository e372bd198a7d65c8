"""Input validators and the verification code generator."""

import random
import re

# Mainland China mobile: 1, then 3-9, then 9 more digits
PHONE_REGEX = re.compile(r'^1[3-9][0-9]{9}$')

CODE_REGEX = re.compile(r'^[0-9]{6}$')

PASSWORD_MIN_LENGTH = 8
_LETTER_REGEX = re.compile(r'[A-Za-z]')
_DIGIT_REGEX = re.compile(r'[0-9]')


def validate_phone_number(phone_number):
    """Return True if ``phone_number`` is an 11-digit mainland mobile number."""
    if not isinstance(phone_number, str):
        return False
    return PHONE_REGEX.fullmatch(phone_number) is not None


def validate_code(code):
    if not isinstance(code, str):
        return False
    return CODE_REGEX.fullmatch(code) is not None


def validate_password(password):
    """At least 8 characters with at least one letter and one digit."""
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return False
    return bool(_LETTER_REGEX.search(password) and _DIGIT_REGEX.search(password))


def generate_code():
    """Generate a 6-digit verification code (100000-999999)."""
    return str(random.randint(100000, 999999))

"""Verification code persistence with lazy TTL expiry.

Codes are keyed by phone number. Saving a code replaces any previous one in
the same transaction, and a code is deleted as soon as it is verified or
found to be expired.
"""

import logging
from datetime import datetime, timedelta
from sqlalchemy.exc import SQLAlchemyError
from phone_auth.errors import InvalidPhoneNumber, InvalidCodeFormat
from phone_auth.models import VerificationCode
from phone_auth.utils.validators import validate_phone_number, validate_code

logger = logging.getLogger(__name__)

DEFAULT_CODE_TTL_SECONDS = 300  # 5 minutes

# verify() error strings
WRONG_CODE = 'Verification code is incorrect'
CODE_NOT_FOUND = 'Verification code not found or expired'
CODE_EXPIRED = 'Verification code has expired'


class VerificationCodeStore:
    """Stores one live verification code per phone number."""

    def __init__(self, session, ttl_seconds=DEFAULT_CODE_TTL_SECONDS):
        self.session = session
        self.ttl_seconds = ttl_seconds

    def save(self, phone_number, code, expires_at=None):
        """Replace the code for ``phone_number`` and return its expiry.

        Raises:
            InvalidPhoneNumber: phone format is wrong
            InvalidCodeFormat: code is not 6 digits
        """
        if not validate_phone_number(phone_number):
            raise InvalidPhoneNumber()
        if not validate_code(code):
            raise InvalidCodeFormat()

        now = datetime.utcnow()
        if expires_at is None:
            expires_at = now + timedelta(seconds=self.ttl_seconds)

        try:
            self.session.query(VerificationCode).filter_by(phone_number=phone_number).delete()
            self.session.add(VerificationCode(
                phone_number=phone_number,
                code=code,
                expires_at=expires_at,
                created_at=now,
            ))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception(f"Failed to save verification code for {phone_number}")
            raise

        return expires_at

    def verify(self, phone_number, code):
        """Check ``code`` for ``phone_number`` and consume it on success.

        Returns:
            dict with 'success' and, on failure, 'error' (one of WRONG_CODE,
            CODE_NOT_FOUND, CODE_EXPIRED)

        Raises:
            InvalidPhoneNumber: phone format is wrong
        """
        if not validate_phone_number(phone_number):
            raise InvalidPhoneNumber()

        record = None
        if isinstance(code, str):
            record = self.session.query(VerificationCode).filter_by(
                phone_number=phone_number, code=code
            ).first()

        if record is None:
            any_code = self.session.query(VerificationCode.id).filter_by(
                phone_number=phone_number
            ).first()
            if any_code is not None:
                return {'success': False, 'error': WRONG_CODE}
            return {'success': False, 'error': CODE_NOT_FOUND}

        expired = record.is_expired()
        self._delete(record)

        if expired:
            logger.info(f"Expired verification code discarded for {phone_number}")
            return {'success': False, 'error': CODE_EXPIRED}

        return {'success': True}

    def _delete(self, record):
        try:
            self.session.delete(record)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

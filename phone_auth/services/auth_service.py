"""Authentication service: verification code sends, login and registration.

Every public method returns a result dict (``{'success': True, ...}`` or
``{'success': False, 'error': message}``). Errors from the stores are caught
here and never raised to the caller.
"""

import logging
from datetime import datetime, timedelta
import jwt
from sqlalchemy.exc import SQLAlchemyError
from phone_auth.errors import (
    AuthError, Internal, InvalidCredential, InvalidPhoneNumber, NoPasswordSet,
    PhoneAlreadyRegistered, RateLimited, SmsDeliveryFailed, TermsNotAccepted,
    UnsupportedMethod, UserNotFound, WeakPassword,
)
from phone_auth.services.sms import SmsDeliveryError
from phone_auth.utils.validators import generate_code, validate_password, validate_phone_number

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'
DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 3600

LOGIN_TYPE_CODE = 'code'
LOGIN_TYPE_PASSWORD = 'password'


class AuthService:
    """Orchestrates validators, stores, the send rate limiter and token issuance."""

    def __init__(self, users, codes, rate_limiter, sms_sender, secret_key,
                 token_ttl_seconds=DEFAULT_TOKEN_TTL_SECONDS):
        self.users = users
        self.codes = codes
        self.rate_limiter = rate_limiter
        self.sms_sender = sms_sender
        self.secret_key = secret_key
        self.token_ttl_seconds = token_ttl_seconds

    def send_verification_code(self, phone_number):
        """Generate, store and deliver a new code for ``phone_number``.

        A number can be sent at most one code per rate limiter interval. A
        send that fails to store or deliver does not count against it.
        """
        try:
            if not validate_phone_number(phone_number):
                raise InvalidPhoneNumber()

            if not self.rate_limiter.try_acquire(phone_number):
                logger.info(f"Send rate limit hit for {phone_number}")
                raise RateLimited()

            code = generate_code()
            self.codes.save(phone_number, code)
            self.sms_sender.send(phone_number, code)

            return {'success': True, 'message': 'Verification code sent'}
        except AuthError as e:
            return e.to_result()
        except SmsDeliveryError as e:
            logger.error(f"Verification code delivery failed for {phone_number}: {e}")
            self.rate_limiter.reset(phone_number)
            return SmsDeliveryFailed().to_result()
        except SQLAlchemyError as e:
            logger.error(f"Database error sending code to {phone_number}: {e}")
            self.rate_limiter.reset(phone_number)
            return Internal().to_result()

    def login(self, phone_number, login_type=LOGIN_TYPE_CODE, verification_code=None, password=None):
        """Log in with a verification code or a password.

        Returns:
            dict with 'success', plus 'token' and 'user' on success or
            'error' on failure
        """
        try:
            user = self.users.find_by_phone(phone_number)
            if user is None:
                raise UserNotFound()

            if login_type == LOGIN_TYPE_CODE:
                verify_result = self.codes.verify(phone_number, verification_code)
                if not verify_result['success']:
                    logger.info(f"Code login failed for {phone_number}: {verify_result['error']}")
                    raise InvalidCredential()
            elif login_type == LOGIN_TYPE_PASSWORD:
                if not user.has_password:
                    raise NoPasswordSet()
                if not user.check_password(password):
                    logger.info(f"Password login failed for {phone_number}")
                    raise InvalidCredential.password()
            else:
                raise UnsupportedMethod()

            logger.info(f"Login successful for user {user.id} ({login_type})")
            return self._session_result(user)
        except AuthError as e:
            return e.to_result()
        except SQLAlchemyError as e:
            logger.error(f"Database error during login for {phone_number}: {e}")
            return Internal().to_result()

    def register(self, phone_number, verification_code, password=None, agree_to_terms=None):
        """Register a new account after checking the verification code.

        ``password`` is optional; when supplied it must pass the strength
        check and is stored hashed. ``agree_to_terms`` may be omitted, but an
        explicit False is rejected.
        """
        try:
            if not validate_phone_number(phone_number):
                raise InvalidPhoneNumber()

            if agree_to_terms is False:
                raise TermsNotAccepted()

            if self.users.find_by_phone(phone_number) is not None:
                raise PhoneAlreadyRegistered()

            # Checked before the code is consumed so a weak password doesn't burn it
            if password is not None and not validate_password(password):
                raise WeakPassword()

            verify_result = self.codes.verify(phone_number, verification_code)
            if not verify_result['success']:
                logger.info(f"Registration code check failed for {phone_number}: {verify_result['error']}")
                raise InvalidCredential()

            user = self.users.create(phone_number, password=password)

            logger.info(f"Registration successful for user {user.id}")
            return self._session_result(user)
        except AuthError as e:
            return e.to_result()
        except SQLAlchemyError as e:
            logger.error(f"Database error during registration for {phone_number}: {e}")
            return Internal().to_result()

    def issue_token(self, user):
        """Sign a session token carrying the user's id and phone number."""
        now = datetime.utcnow()
        payload = {
            'userId': user.id,
            'phoneNumber': user.phone_number,
            'iat': now,
            'exp': now + timedelta(seconds=self.token_ttl_seconds),
        }
        return jwt.encode(payload, self.secret_key, algorithm=JWT_ALGORITHM)

    def decode_token(self, token):
        """Return the claims of a valid token.

        Raises:
            jwt.ExpiredSignatureError: token is past its expiry
            jwt.InvalidTokenError: bad signature or malformed token
        """
        return jwt.decode(token, self.secret_key, algorithms=[JWT_ALGORITHM])

    def _session_result(self, user):
        return {
            'success': True,
            'token': self.issue_token(user),
            'user': user.to_dict(),
        }

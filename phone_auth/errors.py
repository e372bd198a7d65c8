"""Error taxonomy for the authentication flow.

Stores and validators raise these; ``AuthService`` catches them at its
boundary and turns them into ``{'success': False, 'error': message}`` results.
The HTTP layer maps the message back to a status code through ``ERROR_STATUS``.
"""


class AuthError(Exception):
    """Base class. Subclasses set a user-facing ``message`` and ``status_code``."""

    message = 'Request failed'
    status_code = 400

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_result(self):
        return {'success': False, 'error': self.message}


class InvalidInput(AuthError):
    message = 'Invalid input'


class InvalidPhoneNumber(InvalidInput):
    message = 'Invalid phone number format'


class InvalidCodeFormat(InvalidInput):
    message = 'Invalid verification code format'


class TermsNotAccepted(InvalidInput):
    message = 'You must agree to the terms of service'


class RateLimited(AuthError):
    message = 'Please wait before requesting another code'
    status_code = 429


class NotFound(AuthError):
    message = 'Not found'
    status_code = 404


class UserNotFound(NotFound):
    message = 'User not found'


class Conflict(AuthError):
    message = 'Conflict'
    status_code = 409


class PhoneAlreadyRegistered(Conflict):
    message = 'Phone number already registered'


class InvalidCredential(AuthError):
    message = 'Verification code is wrong or expired'

    @classmethod
    def password(cls):
        return cls('Incorrect password')


class NoPasswordSet(AuthError):
    message = 'No password set for this account, please log in with a verification code'


class WeakPassword(AuthError):
    message = 'Password must be at least 8 characters and contain letters and digits'


class UnsupportedMethod(AuthError):
    message = 'Unsupported login type'


class Internal(AuthError):
    message = 'Internal server error'
    status_code = 500


class SmsDeliveryFailed(Internal):
    message = 'Failed to send verification code'


ERROR_STATUS = {
    cls.message: cls.status_code
    for cls in (
        InvalidPhoneNumber, InvalidCodeFormat, TermsNotAccepted, RateLimited,
        UserNotFound, PhoneAlreadyRegistered, InvalidCredential, NoPasswordSet,
        WeakPassword, UnsupportedMethod, Internal, SmsDeliveryFailed,
    )
}
ERROR_STATUS[InvalidCredential.password().message] = InvalidCredential.status_code


def status_for_error(message, default=400):
    """HTTP status for a service error message; unknown messages get ``default``."""
    return ERROR_STATUS.get(message, default)

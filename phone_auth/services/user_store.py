"""User account persistence."""

import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from phone_auth.errors import InvalidPhoneNumber, PhoneAlreadyRegistered
from phone_auth.models import User
from phone_auth.utils.validators import validate_phone_number

logger = logging.getLogger(__name__)


class UserStore:
    """Looks up and creates accounts. Accounts are never updated or deleted."""

    def __init__(self, session):
        self.session = session

    def find_by_phone(self, phone_number):
        """Return the User for ``phone_number`` or None.

        Raises:
            InvalidPhoneNumber: phone format is wrong
        """
        if not validate_phone_number(phone_number):
            raise InvalidPhoneNumber()
        return self.session.query(User).filter_by(phone_number=phone_number).first()

    def find_by_id(self, user_id):
        return self.session.get(User, user_id)

    def create(self, phone_number, password=None):
        """Create and return a new account.

        The password, when given, is stored as a salted hash.

        Raises:
            InvalidPhoneNumber: phone missing or malformed
            PhoneAlreadyRegistered: an account already uses this phone
        """
        if self.find_by_phone(phone_number) is not None:
            raise PhoneAlreadyRegistered()

        user = User(phone_number=phone_number)
        if password is not None:
            user.set_password(password)

        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.session.rollback()
            raise PhoneAlreadyRegistered()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception(f"Failed to create user {phone_number}")
            raise

        logger.info(f"User created: {user.id}")
        return user

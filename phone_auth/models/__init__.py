"""Database models for the phone authentication service."""

from .user import User
from .verification_code import VerificationCode

__all__ = ['User', 'VerificationCode']

"""One-time verification codes sent to phone numbers."""

from datetime import datetime
from phone_auth import db


class VerificationCode(db.Model):
    """Pending code for a phone number. At most one row per number."""

    __tablename__ = 'verification_codes'

    id = db.Column(db.Integer, primary_key=True)
    phone_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    code = db.Column(db.String(6), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def is_expired(self, now=None):
        return (now or datetime.utcnow()) > self.expires_at

    def __repr__(self):
        return f'<VerificationCode phone={self.phone_number} expires_at={self.expires_at}>'

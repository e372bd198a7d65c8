"""User model for phone-number accounts."""

from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from phone_auth import db


class User(db.Model):
    """Registered account, identified by phone number."""

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    phone_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def has_password(self):
        return self.password_hash is not None

    def set_password(self, password):
        """Hash and set the user password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check if the provided password matches the hash."""
        if not self.password_hash or not isinstance(password, str):
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        """Public view of the user; never includes the password hash."""
        return {
            'id': self.id,
            'phoneNumber': self.phone_number,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.phone_number}>'

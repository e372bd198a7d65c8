"""
Pytest configuration and fixtures for testing the phone auth API.
"""

import pytest
from datetime import datetime, timedelta
from faker import Faker

from phone_auth import create_app, db
from phone_auth.models import User
from phone_auth.services.sms import SmsDeliveryError

fake = Faker()

TEST_SECRET = 'test-secret-key-for-testing'

REGISTERED_PHONE = '13800138000'
PASSWORD_PHONE = '13800138006'
PASSWORD = 'password123'
SEEDED_CODE = '123456'
# Unregistered numbers that start each test with a live SEEDED_CODE
UNREGISTERED_PHONES_WITH_CODE = ['13800138002', '13800138003', '13800138004', '13800138005']


def random_phone():
    """An unregistered, well-formed mobile number."""
    return fake.unique.numerify('139########')


class RecordingSmsSender:
    """Captures delivered codes instead of sending them."""

    def __init__(self):
        self.sent = []

    def send(self, phone_number, code):
        self.sent.append((phone_number, code))

    def last_code_for(self, phone_number):
        codes = [code for phone, code in self.sent if phone == phone_number]
        return codes[-1] if codes else None


class FailingSmsSender:
    """Sender whose provider always rejects the message."""

    def send(self, phone_number, code):
        raise SmsDeliveryError('provider down')


@pytest.fixture
def app():
    """Fresh application, database and service graph for each test."""
    app = create_app('testing', overrides={'JWT_SECRET_KEY': TEST_SECRET})

    with app.app_context():
        service = app.extensions['auth_service']
        service.users.create(REGISTERED_PHONE)
        service.users.create(PASSWORD_PHONE, password=PASSWORD)

        expires_at = datetime.utcnow() + timedelta(minutes=10)
        for phone in [REGISTERED_PHONE] + UNREGISTERED_PHONES_WITH_CODE:
            service.codes.save(phone, SEEDED_CODE, expires_at)

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    """Application context for tests that call services directly."""
    with app.app_context():
        yield app


@pytest.fixture
def auth_service(app):
    return app.extensions['auth_service']


@pytest.fixture
def sms_outbox(auth_service):
    """Swap the service's SMS sender for one that records deliveries."""
    sender = RecordingSmsSender()
    auth_service.sms_sender = sender
    return sender


@pytest.fixture
def registered_user(app_ctx):
    return User.query.filter_by(phone_number=REGISTERED_PHONE).first()

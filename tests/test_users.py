"""
Tests for the user store and User model.
"""

import pytest

from phone_auth.errors import InvalidPhoneNumber, PhoneAlreadyRegistered
from phone_auth.models import User
from tests.conftest import PASSWORD, PASSWORD_PHONE, REGISTERED_PHONE, random_phone


@pytest.fixture
def users(app_ctx, auth_service):
    return auth_service.users


class TestFindByPhone:

    def test_finds_registered_user(self, users):
        user = users.find_by_phone(REGISTERED_PHONE)

        assert user is not None
        assert user.phone_number == REGISTERED_PHONE

    def test_unknown_phone_returns_none(self, users):
        assert users.find_by_phone(random_phone()) is None

    @pytest.mark.parametrize('phone', ['123', '', None])
    def test_invalid_phone_raises(self, users, phone):
        with pytest.raises(InvalidPhoneNumber):
            users.find_by_phone(phone)

    def test_find_by_id(self, users):
        user = users.find_by_phone(REGISTERED_PHONE)

        assert users.find_by_id(user.id).phone_number == REGISTERED_PHONE
        assert users.find_by_id(99999) is None


class TestCreate:

    def test_create_assigns_id_and_timestamp(self, users):
        phone = random_phone()
        user = users.create(phone)

        assert user.id is not None
        assert user.created_at is not None
        assert user.password_hash is None
        assert User.query.filter_by(phone_number=phone).count() == 1

    def test_create_duplicate_raises_conflict(self, users):
        with pytest.raises(PhoneAlreadyRegistered):
            users.create(REGISTERED_PHONE)

        assert User.query.filter_by(phone_number=REGISTERED_PHONE).count() == 1

    @pytest.mark.parametrize('phone', ['123', '', None])
    def test_create_invalid_phone_raises(self, users, phone):
        with pytest.raises(InvalidPhoneNumber):
            users.create(phone)

    def test_create_hashes_password(self, users):
        user = users.create(random_phone(), password='secret123')

        assert user.password_hash is not None
        assert user.password_hash != 'secret123'
        assert user.check_password('secret123') is True
        assert user.check_password('wrong1234') is False


class TestUserModel:

    def test_to_dict_is_public_view(self, users):
        user = users.find_by_phone(PASSWORD_PHONE)
        data = user.to_dict()

        assert set(data) == {'id', 'phoneNumber', 'createdAt'}
        assert data['phoneNumber'] == PASSWORD_PHONE
        assert PASSWORD not in str(data)

    def test_check_password_without_hash(self, users):
        user = users.find_by_phone(REGISTERED_PHONE)

        assert user.has_password is False
        assert user.check_password('anything1') is False

"""
Tests for verification code delivery.
"""

import logging
import pytest
import requests
from unittest.mock import MagicMock

from phone_auth.services import sms as sms_module
from phone_auth.services.sms import (
    LogSmsSender, SmsDeliveryError, VonageSmsSender, build_sms_sender,
)


def _vonage_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


class TestLogSmsSender:

    def test_logs_code(self, caplog):
        with caplog.at_level(logging.INFO, logger='phone_auth.services.sms'):
            LogSmsSender().send('13800138000', '123456')

        assert '123456' in caplog.text
        assert '13800138000' in caplog.text


class TestVonageSmsSender:

    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            VonageSmsSender(None, None)

    def test_send_success(self, monkeypatch):
        post = MagicMock(return_value=_vonage_response({'messages': [{'status': '0'}]}))
        monkeypatch.setattr(sms_module.requests, 'post', post)

        VonageSmsSender('key', 'secret', sender_id='Tester').send('13800138000', '123456')

        _, kwargs = post.call_args
        assert kwargs['data']['to'] == '8613800138000'
        assert kwargs['data']['from'] == 'Tester'
        assert '123456' in kwargs['data']['text']

    def test_provider_error_raises(self, monkeypatch):
        payload = {'messages': [{'status': '4', 'error-text': 'Bad Credentials'}]}
        monkeypatch.setattr(sms_module.requests, 'post', MagicMock(return_value=_vonage_response(payload)))

        with pytest.raises(SmsDeliveryError, match='Bad Credentials'):
            VonageSmsSender('key', 'secret').send('13800138000', '123456')

    def test_network_error_raises(self, monkeypatch):
        monkeypatch.setattr(
            sms_module.requests, 'post', MagicMock(side_effect=requests.ConnectionError('down'))
        )

        with pytest.raises(SmsDeliveryError):
            VonageSmsSender('key', 'secret').send('13800138000', '123456')


class TestBuildSmsSender:

    def test_default_is_log_sender(self):
        assert isinstance(build_sms_sender({}), LogSmsSender)

    def test_unknown_provider_falls_back(self):
        assert isinstance(build_sms_sender({'SMS_PROVIDER': 'carrier-pigeon'}), LogSmsSender)

    def test_vonage_provider(self):
        sender = build_sms_sender({
            'SMS_PROVIDER': 'vonage',
            'VONAGE_API_KEY': 'key',
            'VONAGE_API_SECRET': 'secret',
        })

        assert isinstance(sender, VonageSmsSender)
        assert sender.sender_id == 'PhoneAuth'

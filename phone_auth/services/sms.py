"""SMS delivery for verification codes.

``LogSmsSender`` only writes the code to the log, which is what development
and tests use. ``VonageSmsSender`` delivers through the Vonage SMS REST API.
"""

import logging
import requests

logger = logging.getLogger(__name__)

VONAGE_SMS_URL = 'https://rest.nexmo.com/sms/json'


class SmsDeliveryError(Exception):
    """The SMS provider rejected or failed to deliver a message."""


class LogSmsSender:
    """Development sender: logs the code instead of dispatching an SMS."""

    def send(self, phone_number, code):
        logger.info(f"Sending verification code {code} to {phone_number}")


class VonageSmsSender:
    """Sends verification codes through Vonage."""

    def __init__(self, api_key, api_secret, sender_id='PhoneAuth', timeout=10):
        if not api_key or not api_secret:
            raise ValueError(
                "Vonage credentials not configured. Set VONAGE_API_KEY and VONAGE_API_SECRET environment variables."
            )
        self.api_key = api_key
        self.api_secret = api_secret
        self.sender_id = sender_id
        self.timeout = timeout

    def send(self, phone_number, code):
        # Vonage expects the international number without '+', country code 86
        to_number = f'86{phone_number}'

        try:
            response = requests.post(
                VONAGE_SMS_URL,
                data={
                    'api_key': self.api_key,
                    'api_secret': self.api_secret,
                    'from': self.sender_id,
                    'to': to_number,
                    'text': f'Your verification code is: {code}. Valid for 5 minutes.',
                },
                timeout=self.timeout,
            )
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Vonage request failed for {phone_number}: {e}")
            raise SmsDeliveryError('Failed to reach SMS provider') from e

        messages = result.get('messages') or [{}]
        if messages[0].get('status') != '0':
            error_text = messages[0].get('error-text', 'Unknown error')
            logger.error(f"Vonage error sending code to {phone_number}: {error_text}")
            raise SmsDeliveryError(f'Failed to send SMS: {error_text}')

        logger.info(f"Verification code sent to {phone_number} via Vonage")


def build_sms_sender(config):
    provider = (config.get('SMS_PROVIDER') or 'log').lower()
    if provider == 'vonage':
        return VonageSmsSender(
            config.get('VONAGE_API_KEY'),
            config.get('VONAGE_API_SECRET'),
            sender_id=config.get('SMS_SENDER_ID', 'PhoneAuth'),
        )
    if provider != 'log':
        logger.warning(f"Unknown SMS_PROVIDER '{provider}', falling back to log delivery")
    return LogSmsSender()

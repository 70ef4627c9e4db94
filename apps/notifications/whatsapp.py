"""
WhatsApp template notifier (11za sendTemplate API).

Messages are pre-approved templates addressed to a canonical Indian
mobile number; see normalize_phone for the accepted shapes.
"""

import logging
import re

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r'\D')


class NotificationError(Exception):
    """Raised when a message could not be delivered to the API."""


def normalize_phone(phone) -> str:
    """
    Map a free-form phone string to a dialable 91XXXXXXXXXX number.

    Non-digits are stripped. Ten digits not starting with 0 get the India
    country code; twelve digits starting with 91 are kept; anything else is
    returned as the stripped digits (best effort). An empty result means
    there is no usable phone on file.
    """
    digits = _NON_DIGITS.sub('', phone or '')
    if len(digits) == 10 and not digits.startswith('0'):
        return f'91{digits}'
    return digits


class WhatsAppNotifier:
    """
    Sends one templated WhatsApp message per call.

    ``session`` only needs a ``post`` method; it defaults to the
    ``requests`` module.
    """

    def __init__(self, api_url, origin_website, auth_token, timeout=30, session=None):
        self.api_url = api_url
        self.origin_website = origin_website
        self.auth_token = auth_token
        self.timeout = timeout
        self.session = session or requests

    @classmethod
    def from_settings(cls, session=None):
        return cls(
            api_url=settings.WHATSAPP_API_URL,
            origin_website=settings.WHATSAPP_ORIGIN_WEBSITE,
            auth_token=settings.WHATSAPP_AUTH_TOKEN,
            timeout=settings.WHATSAPP_TIMEOUT_SECONDS,
            session=session,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.auth_token)

    def send_template(self, phone, template_name, body_params=(), header_param=None):
        """
        Send ``template_name`` to ``phone`` with ordered body parameters.

        Raises:
            NotificationError: empty phone, transport failure or non-2xx reply
        """
        normalized = normalize_phone(phone)
        if not normalized:
            raise NotificationError(f"No dialable phone number in {phone!r}")

        payload = {
            'phone': normalized,
            'templateName': template_name,
            'originWebsite': self.origin_website,
        }
        if body_params:
            payload['bodyParams'] = [str(param) for param in body_params]
        if header_param:
            payload['headerParam'] = header_param

        try:
            response = self.session.post(
                self.api_url,
                json=payload,
                headers={
                    'Authorization': f'Bearer {self.auth_token}',
                    'X-Origin-Website': self.origin_website,
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"WhatsApp API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise NotificationError(f"WhatsApp API {response.status_code}: {response.text}")

        logger.debug("Sent template %s to %s", template_name, normalized)
        return response

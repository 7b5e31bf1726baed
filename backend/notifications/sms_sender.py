"""
SMS sending via the Twilio REST API for per-item reminders.
"""

import os
import re
from typing import Optional, Protocol

import requests

from models.delivery import SendResult

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"

DEFAULT_COUNTRY_CODE = "90"

_PHONE_NOISE_RE = re.compile(r"[\s\-()]")


class SmsTransport(Protocol):
    """Outbound SMS collaborator used by the dispatcher."""

    def is_configured(self) -> bool: ...

    def send(self, to: str, body: str) -> SendResult: ...


def format_phone_number(phone: str) -> str:
    """
    Normalize a phone number to E.164 with the Turkish country code.

    Examples:
        >>> format_phone_number("0532 123 45 67")
        '+905321234567'
        >>> format_phone_number("905321234567")
        '+905321234567'
        >>> format_phone_number("+44 20 7946 0000")
        '+442079460000'
    """
    cleaned = _PHONE_NOISE_RE.sub("", phone)

    if cleaned.startswith("+"):
        return cleaned
    if cleaned.startswith("0"):
        return f"+{DEFAULT_COUNTRY_CODE}{cleaned[1:]}"
    if cleaned.startswith(DEFAULT_COUNTRY_CODE):
        return f"+{cleaned}"
    return f"+{DEFAULT_COUNTRY_CODE}{cleaned}"


class TwilioSmsTransport:
    """SmsTransport backed by Twilio's Messages endpoint."""

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        timeout: int = 30,
    ):
        self.account_sid = account_sid or os.getenv("TWILIO_ACCOUNT_SID")
        self.auth_token = auth_token or os.getenv("TWILIO_AUTH_TOKEN")
        self.from_number = from_number or os.getenv("TWILIO_FROM_NUMBER")
        self.timeout = timeout
        self.session = requests.Session()

    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, to: str, body: str) -> SendResult:
        """
        Send one SMS.

        Returns:
            SendResult with the Twilio message SID on success
        """
        if not self.is_configured():
            return SendResult(success=False, error="Twilio credentials are not configured")

        url = f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"
        try:
            response = self.session.post(
                url,
                data={"From": self.from_number, "To": format_phone_number(to), "Body": body},
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
            payload = response.json() if response.content else {}
            if not response.ok:
                return SendResult(
                    success=False,
                    error=payload.get("message") or f"Twilio returned HTTP {response.status_code}",
                )
            return SendResult(success=True, message_id=payload.get("sid"))
        except Exception as e:
            return SendResult(success=False, error=str(e))

"""Redemption token construction and parsing.

The token is the compact JSON document embedded in the QR code. It carries
everything the session manager needs for the cheap date check without a
store round-trip. It is self-describing but not tamper-proof unless a
signing key is configured, in which case an HMAC-SHA256 over the other
fields is appended as ``sig``.
"""
import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from edutrack.errors import MalformedToken
from edutrack.models.attendance_session import MANUAL_TOKEN_PREFIX
from edutrack.utils.validators import MAX_ID

TOKEN_TYPE = 'attendance'
REQUIRED_FIELDS = ('session_id', 'teacher_id', 'class_name', 'session_date', 'timestamp', 'type')
# Encoded tokens stay well under this even with a signature and escaped class name
MAX_TOKEN_LENGTH = 2048


@dataclass(frozen=True)
class TokenPayload:
    """Fields carried by a redemption token."""
    session_id: int
    teacher_id: int
    class_name: str
    session_date: date
    issued_at: datetime


class TokenCodec:
    """Pure encoder/decoder for redemption tokens."""

    def __init__(self, signing_key: Optional[str] = None):
        self.signing_key = signing_key or None

    @classmethod
    def from_config(cls, config) -> 'TokenCodec':
        return cls(signing_key=config.get('QR_TOKEN_SIGNING_KEY'))

    @staticmethod
    def manual_placeholder(issued_at: datetime) -> str:
        """Non-QR token for sessions opened by manual marking."""
        return f"{MANUAL_TOKEN_PREFIX}{int(issued_at.timestamp() * 1000)}"

    def encode(
        self,
        session_id: int,
        teacher_id: int,
        class_name: str,
        session_date: date,
        issued_at: datetime
    ) -> str:
        fields = {
            'session_id': session_id,
            'teacher_id': teacher_id,
            'class_name': class_name,
            'session_date': session_date.isoformat(),
            'timestamp': int(issued_at.timestamp() * 1000),
            'type': TOKEN_TYPE
        }
        if self.signing_key:
            fields['sig'] = self._sign(fields)
        return json.dumps(fields, separators=(',', ':'))

    def decode(self, token: Any) -> TokenPayload:
        if not isinstance(token, str) or not token.strip():
            raise MalformedToken("QR data required")

        if len(token) > MAX_TOKEN_LENGTH:
            raise MalformedToken("Invalid QR code format")

        try:
            fields = json.loads(token)
        except (json.JSONDecodeError, RecursionError):
            raise MalformedToken("Invalid QR code format")

        if not isinstance(fields, dict):
            raise MalformedToken("Invalid QR code format")

        for field in REQUIRED_FIELDS:
            if field not in fields:
                raise MalformedToken(f"Invalid QR code: missing {field}")

        if fields['type'] != TOKEN_TYPE:
            raise MalformedToken("Not an attendance QR code")

        if self.signing_key:
            signature = fields.pop('sig', None)
            if not isinstance(signature, str) or not hmac.compare_digest(signature, self._sign(fields)):
                raise MalformedToken("QR code signature mismatch")

        try:
            return TokenPayload(
                session_id=self._as_int(fields['session_id']),
                teacher_id=self._as_int(fields['teacher_id']),
                class_name=str(fields['class_name']),
                session_date=date.fromisoformat(fields['session_date']),
                issued_at=datetime.fromtimestamp(self._as_int(fields['timestamp']) / 1000)
            )
        except (TypeError, ValueError, OverflowError, OSError):
            raise MalformedToken("Invalid QR code values")

    def _sign(self, fields: Dict[str, Any]) -> str:
        canonical = json.dumps(fields, separators=(',', ':'), sort_keys=True)
        return hmac.new(
            self.signing_key.encode('utf-8'),
            canonical.encode('utf-8'),
            hashlib.sha256
        ).hexdigest()

    @staticmethod
    def _as_int(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise TypeError(f"not an integer: {value!r}")
        value = int(value)
        if not 0 < value <= MAX_ID:
            raise ValueError(f"id out of range: {value}")
        return value

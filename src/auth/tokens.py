"""
Token Service

Issues and verifies signed bearer tokens for API callers.
The drift core assumes an authenticated user id; this is the only
place identities are checked.
"""

import base64
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class TokenResult:
    """Result of issuing a token."""
    success: bool
    user_id: Optional[str] = None
    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    error: Optional[str] = None


class TokenService:
    """HMAC-SHA256 signed JWT-style tokens."""

    def __init__(
        self,
        secret: str,
        expiry_hours: int = 24,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self.secret = secret.encode("utf-8")
        self.expiry_hours = expiry_hours
        self.clock = clock or datetime.now

    def issue(self, user_id: str) -> TokenResult:
        """Create a token for a user id."""
        if not user_id or not user_id.strip():
            return TokenResult(success=False, error="User id required")

        now = self.clock()
        expires_at = now + timedelta(hours=self.expiry_hours)

        header = {"alg": "HS256", "typ": "JWT"}
        payload = {
            "sub": user_id.strip(),
            "exp": expires_at.isoformat(),
            "iat": now.isoformat(),
        }

        header_b64 = _b64encode(json.dumps(header).encode())
        payload_b64 = _b64encode(json.dumps(payload).encode())
        signature = self._sign(f"{header_b64}.{payload_b64}")

        return TokenResult(
            success=True,
            user_id=payload["sub"],
            token=f"{header_b64}.{payload_b64}.{signature}",
            expires_at=expires_at,
        )

    def verify(self, token: str) -> Optional[dict]:
        """Verify a token and return its payload if valid."""
        parts = (token or "").split(".")
        if len(parts) != 3:
            return None

        expected_signature = self._sign(f"{parts[0]}.{parts[1]}")
        if not hmac.compare_digest(parts[2], expected_signature):
            return None

        try:
            payload = json.loads(_b64decode(parts[1]))
            expires_at = datetime.fromisoformat(payload["exp"])
        except (ValueError, KeyError, TypeError):
            logger.warning("Rejected token with unreadable payload")
            return None

        if expires_at < self.clock():
            return None

        return payload

    def _sign(self, data: str) -> str:
        digest = hmac.new(self.secret, data.encode("utf-8"), hashlib.sha256).digest()
        return _b64encode(digest)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _b64decode(data: str) -> str:
    padding = -len(data) % 4
    return base64.urlsafe_b64decode(data + "=" * padding).decode("utf-8")

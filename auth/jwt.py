"""
JWT token creation and verification.

Tokens are compact HS256 JWTs: base64url header, base64url JSON claims and
a base64url HMAC-SHA256 signature over the first two segments.  The same
server-held secret issues and verifies every token.  Nothing is stored
server-side; a token is valid until its ``exp`` claim passes.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Callable, Dict

from pydantic import BaseModel, StrictInt, StrictStr

from auth.errors import ConfigurationError, InvalidToken

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 3600

_HEADER = {"alg": "HS256", "typ": "JWT"}


class Claims(BaseModel):
    """Identity recovered from a verified session token."""

    id: StrictInt
    email: StrictStr
    iat: StrictInt
    exp: StrictInt


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode((segment + padding).encode("ascii"))


def _encode_json(obj: Dict[str, Any]) -> str:
    return _b64encode(json.dumps(obj, separators=(",", ":")).encode())


class TokenService:
    """Issue and verify signed, time-limited session tokens."""

    def __init__(
        self,
        secret: str,
        expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set")
        self._secret = secret.encode()
        self.expiry_seconds = expiry_seconds
        self._clock = clock

    def _sign(self, signing_input: str) -> str:
        digest = hmac.new(self._secret, signing_input.encode("ascii"), hashlib.sha256)
        return _b64encode(digest.digest())

    def issue(self, account_id: int, email: str) -> str:
        """Create a signed token carrying ``id``, ``email``, ``iat`` and ``exp``."""
        iat = int(self._clock())
        payload = {
            "id": account_id,
            "email": email,
            "iat": iat,
            "exp": iat + self.expiry_seconds,
        }
        signing_input = _encode_json(_HEADER) + "." + _encode_json(payload)
        return signing_input + "." + self._sign(signing_input)

    def verify(self, token: str) -> Claims:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidToken`` for anything unusable: malformed structure,
        wrong algorithm, bad signature, missing claims or an expired token.
        The reason is logged; the raised error is the same in every case.
        """
        try:
            return self._verify(token)
        except Exception as exc:
            logger.info("Rejected session token: %s", exc)
            raise InvalidToken() from None

    def _verify(self, token: str) -> Claims:
        if not isinstance(token, str) or not token:
            raise ValueError("empty token")
        parts = token.split(".")
        if len(parts) != 3:
            raise ValueError("bad format")
        header_segment, payload_segment, signature = parts

        # Nothing is decoded until the signature checks out.
        expected_sig = self._sign(header_segment + "." + payload_segment)
        if not hmac.compare_digest(signature.encode("ascii"), expected_sig.encode("ascii")):
            raise ValueError("bad signature")

        header = json.loads(_b64decode(header_segment))
        if not isinstance(header, dict) or header.get("alg") != _HEADER["alg"]:
            raise ValueError("unsupported algorithm")

        payload = json.loads(_b64decode(payload_segment))
        if not isinstance(payload, dict):
            raise ValueError("payload is not an object")
        claims = Claims.model_validate(payload)

        if self._clock() > claims.exp:
            raise ValueError("token expired")
        return claims

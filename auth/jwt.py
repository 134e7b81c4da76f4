"""
JWT-style token creation and verification.

Tokens are three base64url segments, ``header.payload.signature``, where the
signature is HMAC-SHA256 over ``header.payload``.  The header names the
algorithm and the key id used to sign, so retired keys can still verify
tokens issued before a rotation.  Secrets come from ``config.jwt_secret``
(env var: ``JWT_SECRET``) and ``config.jwt_previous_keys``.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from typing import Callable, Dict, Optional

from auth.models import SessionClaims
from config.settings import Settings
from utils.errors import InvalidTokenError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _encode_json(data: dict) -> str:
    return _b64encode(json.dumps(data, separators=(",", ":"), sort_keys=True).encode())


class TokenService:
    """Issues and verifies signed session tokens."""

    def __init__(
        self,
        keys: Dict[str, str],
        key_id: str,
        expiry_seconds: int = 0,
        leeway_seconds: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if key_id not in keys or not keys[key_id]:
            raise ValueError(f"no signing secret configured for key id {key_id!r}")
        self._keys = {kid: secret.encode() for kid, secret in keys.items()}
        self._key_id = key_id
        self._expiry_seconds = expiry_seconds
        self._leeway_seconds = leeway_seconds
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            keys=settings.signing_keys(),
            key_id=settings.jwt_key_id,
            expiry_seconds=settings.jwt_expiry_seconds,
            leeway_seconds=settings.jwt_leeway_seconds,
        )

    def _sign(self, signing_input: str, key: bytes) -> str:
        return _b64encode(hmac.new(key, signing_input.encode(), hashlib.sha256).digest())

    def issue(self, claims: SessionClaims) -> str:
        """Create a signed token carrying ``claims``."""
        now = int(self._clock())
        header = {"alg": ALGORITHM, "typ": "JWT", "kid": self._key_id}
        payload = {
            "user_id": claims.user_id,
            "username": claims.username,
            "iat": now,
        }
        if self._expiry_seconds > 0:
            payload["exp"] = now + self._expiry_seconds

        signing_input = f"{_encode_json(header)}.{_encode_json(payload)}"
        signature = self._sign(signing_input, self._keys[self._key_id])
        return f"{signing_input}.{signature}"

    def verify(self, token: str) -> SessionClaims:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidTokenError`` on any failure: malformed token,
        unsupported algorithm, unknown key id, bad signature, expiry, or
        missing claims.
        """
        try:
            return self._verify(token)
        except InvalidTokenError:
            raise
        except (ValueError, KeyError, TypeError, binascii.Error) as exc:
            logger.warning("Rejected token: %s", exc)
            raise InvalidTokenError() from exc

    def _verify(self, token: str) -> SessionClaims:
        parts = token.split(".")
        if len(parts) != 3:
            raise ValueError("bad format")
        header_segment, payload_segment, signature = parts

        header = json.loads(_b64decode(header_segment))
        if not isinstance(header, dict) or header.get("alg") != ALGORITHM:
            raise ValueError("unsupported algorithm")
        key = self._keys.get(header.get("kid") or "")
        if key is None:
            raise ValueError("unknown key id")

        expected_sig = self._sign(f"{header_segment}.{payload_segment}", key)
        if not hmac.compare_digest(signature, expected_sig):
            raise ValueError("bad signature")

        payload = json.loads(_b64decode(payload_segment))
        if not isinstance(payload, dict):
            raise ValueError("bad payload")
        exp: Optional[int] = payload.get("exp")
        if exp is not None and exp + self._leeway_seconds < self._clock():
            raise ValueError("token expired")

        user_id = payload["user_id"]
        username = payload["username"]
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise ValueError("bad user_id claim")
        if not isinstance(username, str):
            raise ValueError("bad username claim")
        return SessionClaims(user_id=user_id, username=username)

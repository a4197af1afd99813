from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings


class JWTService:
    """
    JWT issuing and validation.
    """

    @staticmethod
    def create_token(  # noqa: PLR0913
        subject: str,
        tenant_id: str,
        expires_in: int | None = None,
        role: str = "user",
        entitlements: Iterable[str] = (),
    ) -> str:
        """Issues a token carrying `sub`, tenant, role and entitlements."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(subject),
            "tenant_id": str(tenant_id),
            "role": role,
            "entitlements": list(entitlements),
            "iat": now,
            "exp": now + timedelta(seconds=int(expires_in or settings.JWT_EXPIRES_IN)),
        }
        return jwt.encode(
            payload,
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

    @staticmethod
    def decode_token(token: str) -> dict:
        """
        Decodes and validates a token, returning its payload.
        Raises jwt.PyJWTError when invalid or expired.
        """
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )

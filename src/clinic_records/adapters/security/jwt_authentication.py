import uuid

import jwt
from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from clinic_records.adapters.security.jwt_service import JWTService


class SimpleUser:
    """
    Minimal DRF-compatible user built from token claims:
    id, tenant_id, role, entitlements and is_authenticated.
    """
    def __init__(
        self,
        id: uuid.UUID,
        tenant_id: uuid.UUID,
        role: str | None = None,
        entitlements: frozenset[str] = frozenset(),
    ):
        self.id = id
        self.tenant_id = tenant_id
        self.role = role
        self.entitlements = entitlements
        self.is_authenticated = True

    def has_entitlement(self, entity_name: str, entitlement: str) -> bool:
        if self.role == "admin":
            return True
        return bool(
            {"*", f"{entity_name}.*", f"{entity_name}.{entitlement}"} & self.entitlements
        )

    def __str__(self):
        return f"<SimpleUser id={self.id} tenant_id={self.tenant_id} role={self.role}>"


def user_from_token(token: str) -> SimpleUser:
    try:
        payload = JWTService.decode_token(token)
    except jwt.PyJWTError as e:
        raise exceptions.AuthenticationFailed(f"Invalid token: {e}")  # noqa: B904

    if not payload.get("sub"):
        raise exceptions.AuthenticationFailed("Token has no 'sub' claim.")
    if not payload.get("tenant_id"):
        raise exceptions.AuthenticationFailed("Token has no 'tenant_id' claim.")
    try:
        user_id = uuid.UUID(str(payload["sub"]))
        tenant_id = uuid.UUID(str(payload["tenant_id"]))
    except ValueError:
        raise exceptions.AuthenticationFailed("Token identity claims must be UUIDs.")  # noqa: B904

    entitlements = payload.get("entitlements") or []
    if not isinstance(entitlements, list):
        raise exceptions.AuthenticationFailed("Token 'entitlements' claim must be a list.")

    return SimpleUser(
        id=user_id,
        tenant_id=tenant_id,
        role=payload.get("role"),
        entitlements=frozenset(str(e) for e in entitlements),
    )


class JWTAuthentication(BaseAuthentication):
    """
    Reads `Authorization: Bearer <token>`, validates it with JWTService
    and returns (user, token).
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = request.headers.get("Authorization", "")
        parts = header.split()

        if not header or parts[0].lower() != "bearer" or len(parts) != 2:
            return None

        token = parts[1]
        return (user_from_token(token), token)

    def authenticate_header(self, request):
        return self.keyword


class CookieJWTAuthentication(BaseAuthentication):
    """
    Same as JWTAuthentication but reads the token from the
    `settings.AUTH_COOKIE_NAME` cookie.
    """
    def authenticate(self, request):
        token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
        if not token:
            return None
        return (user_from_token(token), token)

    def authenticate_header(self, request):
        return "Bearer"

import uuid

from rest_framework.test import APIClient

from clinic_records.adapters.security.jwt_service import JWTService


def make_token(tenant_id=None, user_id=None, entitlements=("*",), role="user", expires_in=None) -> str:
    return JWTService.create_token(
        subject=str(user_id or uuid.uuid4()),
        tenant_id=str(tenant_id or uuid.uuid4()),
        expires_in=expires_in,
        role=role,
        entitlements=entitlements,
    )


def authenticated_client(tenant_id, user_id=None, entitlements=("*",), role="user") -> APIClient:
    """APIClient carrying a bearer token for `tenant_id`."""
    client = APIClient()
    token = make_token(tenant_id=tenant_id, user_id=user_id, entitlements=entitlements, role=role)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client

from fastapi import HTTPException, Security
from fastapi.security.api_key import APIKeyHeader

from ..core.config import get_settings

settings = get_settings()
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def _bearer_token(value: str | None) -> str | None:
    if value and value.startswith("Bearer "):
        return value[len("Bearer "):].strip()
    return None


def verify_api_key(
    api_key: str | None = Security(api_key_header),
    authorization: str | None = Security(authorization_header),
) -> None:
    """
    Simple shared-key authentication.

    - Accepts X-API-Key or Authorization: Bearer <key>.
    - In dev, if API_AUTH_KEY is not set, auth is skipped.
    - Otherwise, the key must equal API_AUTH_KEY.
    """
    expected = settings.API_AUTH_KEY

    if settings.ENV == "dev" and not expected:
        return

    if not expected:
        # In non-dev environments, missing config is treated as misconfiguration
        raise HTTPException(status_code=401, detail="API key not configured")

    provided = api_key or _bearer_token(authorization)
    if not provided:
        raise HTTPException(status_code=401, detail="API key is required")
    if provided != expected:
        raise HTTPException(status_code=403, detail="Invalid API key")


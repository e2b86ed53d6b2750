"""Bearer token verification for the public v1 API."""

import hmac
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.errors import AuthFailure, AuthFailureReason
from vetify.models.api_key import ApiKey
from vetify.services.api_keys import ParsedKey, hash_secret, parse_api_key

logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_expired(api_key: ApiKey, now: datetime | None = None) -> bool:
    if api_key.expires_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    return as_utc(api_key.expires_at) <= now


def parse_bearer(authorization: str | None) -> ParsedKey:
    """Extract the API key from an ``Authorization: Bearer <key>`` header."""
    if not authorization:
        raise AuthFailure(AuthFailureReason.MISSING_HEADER)

    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthFailure(AuthFailureReason.MALFORMED_HEADER)

    parsed = parse_api_key(parts[1].strip())
    if parsed is None:
        raise AuthFailure(AuthFailureReason.MALFORMED_HEADER)
    return parsed


async def verify_api_key(
    db: AsyncSession,
    authorization: str | None,
    *,
    now: datetime | None = None,
) -> ApiKey:
    """Resolve the API key behind an Authorization header.

    Looks the key up by its public prefix (one indexed read), then compares
    the secret's hash in constant time. Every failure raises ``AuthFailure``
    with a reason for logging; callers all see the same 401.
    """
    parsed = parse_bearer(authorization)

    result = await db.execute(select(ApiKey).where(ApiKey.key_prefix == parsed.key_prefix))
    api_key = result.scalar_one_or_none()
    if api_key is None:
        raise AuthFailure(AuthFailureReason.UNKNOWN_KEY)

    if not hmac.compare_digest(api_key.key_hash, hash_secret(parsed.secret)):
        raise AuthFailure(AuthFailureReason.HASH_MISMATCH)

    if not api_key.is_active:
        raise AuthFailure(AuthFailureReason.INACTIVE)

    if is_expired(api_key, now):
        raise AuthFailure(AuthFailureReason.EXPIRED)

    logger.debug("Authenticated API key %s for tenant %s", api_key.id, api_key.tenant_id)
    return api_key

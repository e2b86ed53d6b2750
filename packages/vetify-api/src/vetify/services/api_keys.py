"""API key issuance: generation, hashing, creation and regeneration.

A full key looks like ``vfy_<8 hex>_<32 hex>``. The ``vfy_<8 hex>`` part is
the public prefix, stored in clear and indexed for lookup. The trailing 32 hex
characters are the secret; only their SHA-256 digest is persisted. The secret
carries 128 bits of randomness, so a plain digest is enough and no
password-style stretching is needed.
"""

import hashlib
import logging
import re
import secrets
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.config import get_settings
from vetify.errors import ValidationFailure
from vetify.models.api_key import ApiKey
from vetify.services.scopes import normalize_scopes

logger = logging.getLogger(__name__)

KEY_LITERAL = "vfy"
API_KEY_PATTERN = re.compile(r"^vfy_([0-9a-f]{8})_([0-9a-f]{32})$")
MAX_PREFIX_ATTEMPTS = 5


@dataclass(frozen=True)
class GeneratedKey:
    full_key: str
    key_prefix: str
    key_hash: str


@dataclass(frozen=True)
class ParsedKey:
    key_prefix: str
    secret: str


def hash_secret(secret: str) -> str:
    """Hash the secret part of an API key with SHA-256."""
    return hashlib.sha256(secret.encode()).hexdigest()


def generate_api_key() -> GeneratedKey:
    """Generate fresh key material. Nothing is persisted here."""
    public_part = secrets.token_hex(4)
    secret = secrets.token_hex(16)
    key_prefix = f"{KEY_LITERAL}_{public_part}"
    return GeneratedKey(
        full_key=f"{key_prefix}_{secret}",
        key_prefix=key_prefix,
        key_hash=hash_secret(secret),
    )


def parse_api_key(token: str) -> ParsedKey | None:
    """Split a full key into prefix and secret, or return None if malformed."""
    match = API_KEY_PATTERN.match(token)
    if match is None:
        return None
    return ParsedKey(key_prefix=f"{KEY_LITERAL}_{match.group(1)}", secret=match.group(2))


async def _fresh_key_material(db: AsyncSession) -> GeneratedKey:
    """Generate key material whose prefix is not already taken.

    The prefix space is 32 bits, so collisions are rare but possible once a
    deployment holds many keys; the unique index would reject them anyway.
    """
    for _ in range(MAX_PREFIX_ATTEMPTS):
        generated = generate_api_key()
        taken = await db.scalar(
            select(ApiKey.id).where(ApiKey.key_prefix == generated.key_prefix)
        )
        if taken is None:
            return generated
        logger.warning("API key prefix collision on %s, retrying", generated.key_prefix)
    raise RuntimeError("Could not allocate a unique API key prefix")


async def create_api_key(
    db: AsyncSession,
    tenant_id: str,
    name: str,
    scopes: Iterable[str],
    *,
    location_id: str | None = None,
    expires_at: datetime | None = None,
    rate_limit: int | None = None,
    created_by_id: str | None = None,
) -> tuple[ApiKey, str]:
    """Persist a new API key and return it with its plaintext full key.

    The plaintext is only available from this call; callers must hand it to
    the user immediately.
    """
    normalized = normalize_scopes(scopes)
    if rate_limit is None:
        rate_limit = get_settings().api_key_default_rate_limit
    if rate_limit < 1:
        raise ValidationFailure("Rate limit must be a positive number of requests per hour")

    generated = await _fresh_key_material(db)
    api_key = ApiKey(
        id=str(uuid.uuid4()),
        tenant_id=tenant_id,
        location_id=location_id,
        name=name,
        key_prefix=generated.key_prefix,
        key_hash=generated.key_hash,
        scopes=normalized,
        is_active=True,
        expires_at=expires_at,
        rate_limit=rate_limit,
        created_by_id=created_by_id,
    )
    db.add(api_key)
    await db.flush()

    logger.info(
        "Created API key %s (%s) for tenant %s with scopes %s",
        api_key.id,
        api_key.key_prefix,
        tenant_id,
        normalized,
    )
    return api_key, generated.full_key


async def regenerate_api_key(db: AsyncSession, api_key: ApiKey) -> str:
    """Replace a key's prefix and hash in place and return the new full key.

    The old secret stops verifying as soon as this flush is committed.
    """
    generated = await _fresh_key_material(db)
    old_prefix = api_key.key_prefix
    api_key.key_prefix = generated.key_prefix
    api_key.key_hash = generated.key_hash
    await db.flush()

    logger.info(
        "Regenerated API key %s (%s -> %s)", api_key.id, old_prefix, api_key.key_prefix
    )
    return generated.full_key

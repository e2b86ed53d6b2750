"""Session tokens for tenant administrators.

Admin tokens are HS256 JWTs signed with ``API_SECRET_KEY``. The claims are
``sub`` (the staff id), ``tenant_id``, ``role`` and ``exp``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from vetify.errors import AuthFailure, AuthFailureReason

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class AdminSession:
    tenant_id: str
    staff_id: str
    role: str
    expires_at: int


def issue_admin_token(
    secret: str,
    tenant_id: str,
    staff_id: str,
    *,
    role: str = ADMIN_ROLE,
    ttl_seconds: int = 3600,
    issued_at: datetime | None = None,
) -> str:
    issued = issued_at or datetime.now(timezone.utc)
    expire = issued + timedelta(seconds=ttl_seconds)
    to_encode = {
        "sub": staff_id,
        "tenant_id": tenant_id,
        "role": role,
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def verify_admin_token(token: str, secret: str) -> AdminSession:
    """Check signature and expiry of an admin session token.

    Raises:
        AuthFailure: with reason ``invalid_session`` for any defect.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise AuthFailure(AuthFailureReason.INVALID_SESSION, "Session expired") from exc
    except JWTError as exc:
        logger.debug("Admin token rejected: %s", exc)
        raise AuthFailure(AuthFailureReason.INVALID_SESSION, "Invalid session") from exc

    try:
        return AdminSession(
            tenant_id=str(payload["tenant_id"]),
            staff_id=str(payload["sub"]),
            role=str(payload["role"]),
            expires_at=int(payload["exp"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthFailure(AuthFailureReason.INVALID_SESSION, "Invalid session") from exc

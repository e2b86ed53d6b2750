"""FastAPI dependency injection functions."""

import logging
from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass

from fastapi import BackgroundTasks, Depends, Header, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from vetify.config import Settings, get_settings
from vetify.db.engine import get_session, get_session_factory
from vetify.db.redis import get_redis
from vetify.errors import (
    AuthFailure,
    AuthFailureReason,
    RateLimitExceeded,
    RateLimitStoreUnavailable,
    ScopeFailure,
    ScopeFailureReason,
)
from vetify.models.api_key import ApiKey
from vetify.models.tenant import Tenant
from vetify.services.admin_session import ADMIN_ROLE, AdminSession, verify_admin_token
from vetify.services.audit import RequestContext, SecurityEventKind, SecurityEventLog
from vetify.services.authentication import verify_api_key
from vetify.services.authorization import authorize, effective_location_id
from vetify.services.rate_limit import SlidingWindowRateLimiter
from vetify.services.scopes import ApiScope
from vetify.services.usage import UsageRecorder

logger = logging.getLogger(__name__)

_audit_log = SecurityEventLog()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async for session in get_session():
        yield session


def get_app_settings() -> Settings:
    """Return application settings."""
    return get_settings()


def get_rate_limiter() -> SlidingWindowRateLimiter:
    settings = get_settings()
    return SlidingWindowRateLimiter(
        get_redis(),
        window_seconds=settings.rate_limit_window_seconds,
        key_prefix=settings.rate_limit_key_prefix,
    )


def get_usage_recorder() -> UsageRecorder:
    return UsageRecorder(get_session_factory())


def get_audit_log() -> SecurityEventLog:
    return _audit_log


@dataclass
class ApiContext:
    """What a v1 handler knows about the caller after the gateway has run."""

    api_key: ApiKey
    location_id: str | None
    request: RequestContext
    audit: SecurityEventLog

    @property
    def tenant_id(self) -> str:
        return self.api_key.tenant_id

    def resolve_location(self, requested: str | None) -> str | None:
        """Effective location for an explicitly requested location id.

        A refusal is written to the security event log before it propagates.
        """
        try:
            return effective_location_id(self.api_key, requested)
        except ScopeFailure as exc:
            self.audit.record(
                self.request,
                SecurityEventKind.PERMISSION_DENIED,
                subject_id=self.api_key.id,
                metadata={"reason": exc.reason.value, "requested_location_id": requested},
            )
            raise

    def check_record_location(
        self, location_id: str | None, record_location_id: str | None, *, label: str
    ) -> None:
        """Refuse to act on a record filed under a different location.

        ``location_id`` is the location the request resolved to. Records with
        no location are shared by the whole tenant and always pass.
        """
        if location_id is None or record_location_id is None:
            return
        if record_location_id == location_id:
            return
        self.audit.record(
            self.request,
            SecurityEventKind.PERMISSION_DENIED,
            subject_id=self.api_key.id,
            metadata={
                "reason": ScopeFailureReason.LOCATION_MISMATCH.value,
                "requested_location_id": location_id,
                "record_location_id": record_location_id,
            },
        )
        raise ScopeFailure(
            ScopeFailureReason.LOCATION_MISMATCH,
            f"{label} belongs to a different location",
        )


def require_scope(scope: ApiScope) -> Callable:
    """Build the gateway dependency for a v1 route needing ``scope``.

    Runs key verification, then the rate limiter, then the scope and location
    checks. On success the usage update is scheduled as a background task and
    the rate-limit headers are set on the response.
    """

    async def gateway(
        request: Request,
        response: Response,
        background_tasks: BackgroundTasks,
        authorization: str | None = Header(default=None),
        requested_location_id: str | None = Query(default=None, alias="locationId"),
        db: AsyncSession = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
        limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
        recorder: UsageRecorder = Depends(get_usage_recorder),
        audit: SecurityEventLog = Depends(get_audit_log),
    ) -> ApiContext:
        context = RequestContext.from_request(request)

        try:
            api_key = await verify_api_key(db, authorization)
        except AuthFailure as exc:
            audit.record(
                context,
                SecurityEventKind.SECURITY_EVENT,
                metadata={"event": "authentication_failed", "reason": exc.reason.value},
            )
            raise

        if settings.rate_limit_enabled:
            try:
                result = await limiter.check_and_consume(api_key.id, api_key.rate_limit)
            except RateLimitStoreUnavailable:
                if not settings.rate_limit_fail_open:
                    raise
                audit.record(
                    context,
                    SecurityEventKind.SECURITY_EVENT,
                    subject_id=api_key.id,
                    metadata={"event": "rate_limit_bypassed", "risk_level": "high"},
                )
            else:
                if not result.allowed:
                    audit.record(
                        context,
                        SecurityEventKind.RATE_LIMIT_EXCEEDED,
                        subject_id=api_key.id,
                        metadata={"limit": result.limit, "reset": result.reset_at},
                    )
                    raise RateLimitExceeded(result.limit, result.reset_at, result.retry_after)
                response.headers["X-RateLimit-Limit"] = str(result.limit)
                response.headers["X-RateLimit-Remaining"] = str(result.remaining)
                response.headers["X-RateLimit-Reset"] = str(result.reset_at)

        api_context = ApiContext(
            api_key=api_key, location_id=None, request=context, audit=audit
        )
        try:
            authorize(api_key, scope)
        except ScopeFailure as exc:
            audit.record(
                context,
                SecurityEventKind.PERMISSION_DENIED,
                subject_id=api_key.id,
                metadata={"reason": exc.reason.value, "required_scope": scope.value},
            )
            raise
        api_context.location_id = api_context.resolve_location(requested_location_id)

        background_tasks.add_task(recorder.record_usage, api_key.id)
        return api_context

    return gateway


@dataclass
class AdminContext:
    session: AdminSession
    tenant: Tenant

    @property
    def tenant_id(self) -> str:
        return self.tenant.id


async def get_admin_context(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> AdminContext:
    """Verify a tenant administrator's session token.

    Admin sessions are independent of API keys: an API key is never accepted
    here and an admin token is never accepted on the v1 routes.
    """
    if not authorization:
        raise AuthFailure(AuthFailureReason.MISSING_HEADER, "Authentication required")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthFailure(AuthFailureReason.MALFORMED_HEADER, "Authentication required")

    session = verify_admin_token(token.strip(), settings.api_secret_key)
    if session.role != ADMIN_ROLE:
        raise ScopeFailure(
            ScopeFailureReason.ROLE_NOT_ALLOWED,
            "Only administrators can manage API keys",
        )

    tenant = await db.get(Tenant, session.tenant_id)
    if tenant is None or not tenant.is_active:
        raise AuthFailure(AuthFailureReason.INVALID_SESSION, "Invalid session")

    return AdminContext(session=session, tenant=tenant)


@dataclass
class Pagination:
    limit: int
    offset: int


def get_pagination(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> Pagination:
    return Pagination(limit=limit, offset=offset)

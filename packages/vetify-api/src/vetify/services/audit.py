"""Security event log for the API gateway.

Events are emitted as log records on the ``vetify.audit`` logger so any log
shipper can forward them to the audit store.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum

from fastapi import Request

audit_logger = logging.getLogger("vetify.audit")


class SecurityEventKind(str, Enum):
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    PERMISSION_DENIED = "permission_denied"
    SECURITY_EVENT = "security_event"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class RequestContext:
    """Request details attached to every security event."""

    ip_address: str
    user_agent: str | None
    method: str
    path: str

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent"),
            method=request.method,
            path=request.url.path,
        )


def client_ip(request: Request) -> str:
    """Best guess at the caller's address behind proxies."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()
    return request.client.host if request.client else "unknown"


def risk_level(kind: SecurityEventKind, metadata: dict | None = None) -> RiskLevel:
    if kind is SecurityEventKind.PERMISSION_DENIED:
        return RiskLevel.CRITICAL
    if kind is SecurityEventKind.RATE_LIMIT_EXCEEDED:
        return RiskLevel.HIGH
    override = (metadata or {}).get("risk_level")
    if override in {level.value for level in RiskLevel}:
        return RiskLevel(override)
    return RiskLevel.MEDIUM


class SecurityEventLog:
    """Audit sink accepting ``(context, kind, subject_id, metadata)`` records."""

    def record(
        self,
        context: RequestContext,
        kind: SecurityEventKind,
        subject_id: str | None = None,
        metadata: dict | None = None,
    ) -> dict:
        level = risk_level(kind, metadata)
        event = {
            "kind": kind.value,
            "risk_level": level.value,
            "subject_id": subject_id,
            "metadata": metadata or {},
            **asdict(context),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        log_level = (
            logging.WARNING
            if level in (RiskLevel.HIGH, RiskLevel.CRITICAL)
            else logging.INFO
        )
        audit_logger.log(
            log_level,
            "security event %s risk=%s subject=%s ip=%s %s %s metadata=%s",
            event["kind"],
            event["risk_level"],
            subject_id,
            context.ip_address,
            context.method,
            context.path,
            event["metadata"],
            extra={"security_event": event},
        )
        return event

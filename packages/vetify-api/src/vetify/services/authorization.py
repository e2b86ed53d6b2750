"""Scope and location checks for authenticated API keys."""

from vetify.errors import ScopeFailure, ScopeFailureReason
from vetify.models.api_key import ApiKey
from vetify.services.scopes import ApiScope


def has_scope(api_key: ApiKey, required_scope: ApiScope | str) -> bool:
    required = required_scope.value if isinstance(required_scope, ApiScope) else required_scope
    return required in set(api_key.scopes or ())


def authorize(api_key: ApiKey, required_scope: ApiScope | str) -> None:
    """Raise ``ScopeFailure`` unless the key holds ``required_scope``."""
    if not has_scope(api_key, required_scope):
        required = required_scope.value if isinstance(required_scope, ApiScope) else required_scope
        raise ScopeFailure(
            ScopeFailureReason.MISSING_SCOPE,
            f"Missing required scope: {required}",
        )


def effective_location_id(api_key: ApiKey, requested: str | None) -> str | None:
    """Return the location a request is confined to.

    A location-scoped key always resolves to its own location: a matching
    request passes, no request defaults to it, anything else is refused.
    A tenant-wide key resolves to whatever was requested, or None for all
    locations of the tenant.
    """
    if api_key.location_id is None:
        return requested or None
    if requested and requested != api_key.location_id:
        raise ScopeFailure(
            ScopeFailureReason.LOCATION_MISMATCH,
            "This API key is restricted to a different location",
        )
    return api_key.location_id

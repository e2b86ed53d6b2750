"""Permission scopes granted to API keys."""

from collections.abc import Iterable
from enum import Enum

from vetify.errors import ValidationFailure


class ApiScope(str, Enum):
    """Closed set of ``verb:resource`` permissions."""

    READ_PETS = "read:pets"
    WRITE_PETS = "write:pets"
    READ_APPOINTMENTS = "read:appointments"
    WRITE_APPOINTMENTS = "write:appointments"
    READ_CUSTOMERS = "read:customers"
    WRITE_CUSTOMERS = "write:customers"
    READ_INVENTORY = "read:inventory"
    WRITE_INVENTORY = "write:inventory"
    READ_LOCATIONS = "read:locations"
    READ_REPORTS = "read:reports"
    READ_SALES = "read:sales"
    WRITE_SALES = "write:sales"


ALL_SCOPES: frozenset[str] = frozenset(s.value for s in ApiScope)

SCOPE_BUNDLES: dict[str, tuple[str, ...]] = {
    "readonly": tuple(s.value for s in ApiScope if s.value.startswith("read:")),
    "full": tuple(s.value for s in ApiScope),
}


def normalize_scopes(scopes: Iterable[str]) -> list[str]:
    """Validate scope strings and return them de-duplicated and sorted.

    Raises:
        ValidationFailure: if the set is empty or contains an unknown scope.
    """
    unique = {s.strip() for s in scopes}
    if not unique:
        raise ValidationFailure("At least one scope is required")
    unknown = sorted(unique - ALL_SCOPES)
    if unknown:
        raise ValidationFailure("Unknown scopes: " + ", ".join(repr(s) for s in unknown))
    return sorted(unique)

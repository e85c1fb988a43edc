"""Value objects for identifiers in menu-tenancy."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TenantId:
    """Tenant identifier value object with basic validation.

    Platform databases hand out integer ids; they are normalized to strings
    so a tenant id can key caches and rate-limit buckets uniformly.
    """
    value: str

    def __post_init__(self):
        if isinstance(self.value, int) and not isinstance(self.value, bool):
            object.__setattr__(self, "value", str(self.value))
        if not self.value or not isinstance(self.value, str):
            raise ValueError("Tenant ID must be a non-empty string")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of(cls, value: Union["TenantId", str, int]) -> "TenantId":
        """Coerce a raw id or an existing TenantId."""
        if isinstance(value, TenantId):
            return value
        return cls(value)

"""Persisted mapping from a tenant to its database connection descriptor."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ....core.value_objects import TenantId
from .connection_descriptor import ConnectionDescriptor


@dataclass
class TenantDatabaseConfig:
    """One-to-one with Tenant; created by provisioning, replaced by admins."""

    tenant_id: TenantId
    connection_descriptor: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        self.tenant_id = TenantId.of(self.tenant_id)
        if not self.connection_descriptor:
            raise ValueError("connection_descriptor cannot be empty")

    @property
    def descriptor(self) -> ConnectionDescriptor:
        """Parsed descriptor; raises InvalidConnectionDescriptorError."""
        return ConnectionDescriptor.from_uri(self.connection_descriptor)

    @property
    def namespace(self):
        return ConnectionDescriptor.namespace_of(self.connection_descriptor)

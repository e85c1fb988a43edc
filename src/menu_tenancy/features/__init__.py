"""Features of the menu tenancy core.

- tenants/: tenant entities, resolution, custom domains and lifecycle
- database/: namespaces, registry, tenant pools and provisioning
- gate/: per-tenant rate limiting and subscription checks
"""

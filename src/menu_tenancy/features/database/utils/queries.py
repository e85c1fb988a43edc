"""SQL used by the platform repositories and the namespace store."""

# Platform: restaurants (tenants)
TENANT_SELECT_BY_SLUG = "SELECT id, slug, name, created_at FROM restaurants WHERE slug = $1"
TENANT_SELECT_BY_ID = "SELECT id, slug, name, created_at FROM restaurants WHERE id = $1"
TENANT_SLUG_EXISTS = "SELECT EXISTS(SELECT 1 FROM restaurants WHERE slug = $1)"
TENANT_INSERT = """
    INSERT INTO restaurants (name, slug, created_at)
    VALUES ($1, $2, NOW())
    RETURNING id, slug, name, created_at
"""
TENANT_DELETE = "DELETE FROM restaurants WHERE id = $1"

# Platform: subscriptions
SUBSCRIPTIONS_BY_TENANT = """
    SELECT restaurant_id, status, start_date, end_date, package_type
    FROM subscriptions
    WHERE restaurant_id = $1
    ORDER BY id DESC
"""
SUBSCRIPTION_INSERT = """
    INSERT INTO subscriptions (restaurant_id, package_type, start_date, end_date, status)
    VALUES ($1, $2, $3, $4, $5)
"""

# Platform: tenant_databases (the registry)
REGISTRY_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS tenant_databases (
        restaurant_id TEXT PRIMARY KEY,
        connection_url TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""
REGISTRY_SELECT = """
    SELECT restaurant_id, connection_url, created_at, updated_at
    FROM tenant_databases WHERE restaurant_id = $1
"""
REGISTRY_SELECT_ALL = """
    SELECT restaurant_id, connection_url, created_at, updated_at
    FROM tenant_databases ORDER BY restaurant_id
"""
REGISTRY_UPSERT = """
    INSERT INTO tenant_databases (restaurant_id, connection_url, created_at, updated_at)
    VALUES ($1, $2, NOW(), NOW())
    ON CONFLICT (restaurant_id)
    DO UPDATE SET connection_url = EXCLUDED.connection_url, updated_at = NOW()
    RETURNING restaurant_id, connection_url, created_at, updated_at
"""
REGISTRY_DELETE = "DELETE FROM tenant_databases WHERE restaurant_id = $1"

# Namespace management (maintenance database)
NAMESPACE_EXISTS = "SELECT 1 FROM pg_database WHERE datname = $1"
# Identifiers cannot be bound as parameters; names are validated and quoted first
NAMESPACE_CREATE = "CREATE DATABASE {name}"
NAMESPACE_DROP = "DROP DATABASE IF EXISTS {name} WITH (FORCE)"

# Tenant catalog bootstrap
BOOTSTRAP_CATEGORIES = """
    CREATE TABLE IF NOT EXISTS categories (
        id BIGSERIAL PRIMARY KEY,
        restaurant_id BIGINT NOT NULL,
        name VARCHAR(255) NOT NULL,
        description TEXT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""
BOOTSTRAP_MENU_ITEMS = """
    CREATE TABLE IF NOT EXISTS menu_items (
        id BIGSERIAL PRIMARY KEY,
        restaurant_id BIGINT NOT NULL,
        category_id BIGINT NOT NULL,
        name VARCHAR(255) NOT NULL,
        description TEXT NULL,
        price NUMERIC(10, 2) NOT NULL DEFAULT 0,
        image_url VARCHAR(512) NULL,
        is_available BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""
BOOTSTRAP_STATEMENTS = (BOOTSTRAP_CATEGORIES, BOOTSTRAP_MENU_ITEMS)

# Tenant catalog reads
CATALOG_CATEGORIES = "SELECT id, name, description FROM categories ORDER BY id"
CATALOG_AVAILABLE_ITEMS = """
    SELECT id, category_id, name, description, price, image_url
    FROM menu_items
    WHERE is_available
    ORDER BY category_id, id
"""

BASIC_HEALTH_CHECK = "SELECT 1"

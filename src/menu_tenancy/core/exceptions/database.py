"""Database-related exceptions for menu-tenancy."""

from .base import MenuTenancyError


class DatabaseError(MenuTenancyError):
    """Base class for database-related errors."""
    pass


class ConnectionPoolError(DatabaseError):
    """Raised when there's an error with a tenant connection pool."""
    pass


class DatabaseConfigurationError(DatabaseError):
    """Raised when there's a database configuration error."""
    pass


class InvalidConnectionDescriptorError(DatabaseConfigurationError):
    """Raised when a connection descriptor cannot be parsed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid connection descriptor: {reason}")


class NamespaceError(DatabaseError):
    """Base class for namespace (isolated database) errors."""
    pass


class InvalidNamespaceError(NamespaceError):
    """Raised when a namespace name or prefix is invalid or unsafe."""

    def __init__(self, value: str, reason: str = ""):
        self.value = value
        self.reason = reason
        message = f"Invalid namespace name '{value}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class RegistryError(DatabaseError):
    """Raised when the tenant registry cannot be read or written."""
    pass


class EncryptionError(DatabaseError):
    """Raised when descriptor encryption/decryption fails."""

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        message = f"Encryption {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)

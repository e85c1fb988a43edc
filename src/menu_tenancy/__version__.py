"""Version information for menu-tenancy."""

__version__ = "0.1.0"

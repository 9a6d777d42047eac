"""Version information for tenant-rbac."""

__version__ = "0.1.0"

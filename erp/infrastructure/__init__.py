"""Infrastructure layer implementations."""

from erp.infrastructure import storage

__all__ = ["storage"]

"""
SQLModel persistence models for database storage.

Available Models:

- **resource**: `DNSResource` table, one row per stored domain

Example:

    >>> from shaman_cache.storage.models.resource import DNSResource
    >>>
    >>> # Persistence models are normally built via the mapper functions
    >>> # See shaman_cache/mapper.py for domain ↔ persistence conversion
"""

__all__ = [
    "resource",
]

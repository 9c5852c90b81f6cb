"""
Mapper functions to convert between Domain Models and Persistence Models.

This module bridges the gap between:
- Domain Models (shaman_cache/resource.py) - Pydantic classes used by the DNS service
- Persistence Models (shaman_cache/storage/models/resource.py) - SQLModel rows for the database
"""

from .resource import Resource
from .storage.codec import decode_document, encode_document
from .storage.keys import add_prefix
from .storage.models.resource import DNSResource


def to_persistence(domain: str, resource: Resource) -> DNSResource:
    """
    Convert a domain model to a persistence model for database storage.

    Args:
        domain: Sanitized domain the row is keyed by
        resource: Resource to store

    Returns:
        DNSResource row ready for insertion or merge

    Example:
        >>> row = to_persistence("example.com.", Resource(domain="example.com."))
        >>> row.storage_key
        'domains:example.com.'
    """
    return DNSResource(
        storage_key=add_prefix(domain),
        domain=domain,
        payload=encode_document(resource),
    )


def to_domain(persistence: DNSResource) -> Resource:
    """
    Convert a persistence model back to a domain model.

    Raises:
        EncodingError: If the stored payload is not a valid envelope
    """
    return decode_document(persistence.payload)

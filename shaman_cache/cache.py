"""
Persistent record cache facade.

`RecordCache` is the single entry point the DNS service uses for persistence.
It selects one backend from a connection URI, initializes it, and delegates
every CRUD call to it after normalizing domains and resources.

Persistence is optional: if the backend cannot be initialized the cache logs
the failure and turns itself off, and every call becomes a successful no-op.
The service owns one `RecordCache` and passes it to whatever needs storage.

Example:

    >>> cache = RecordCache()
    >>> cache.initialize("boltdb:///var/db/shaman.db")
    >>> cache.add_record(Resource(domain="Example.com", records=[Record(address="127.0.0.1")]))
    >>> cache.get_record("EXAMPLE.com").domain
    'example.com.'
"""

import logging
from typing import Iterable, Optional

from .config import l2_connect, parse_connection_uri
from .errors import StorageError
from .resource import Resource, sanitize_domain
from .storage.backends.registry import get_backend
from .storage.interfaces import Cacher

logger = logging.getLogger(__name__)


class RecordCache:
    """Facade over the active storage backend, if any."""

    def __init__(self, backend: Optional[Cacher] = None):
        """Create a cache.

        Args:
            backend: Already-initialized backend to adopt; leave empty and call
                `initialize` to select one from a connection URI
        """
        self.backend = backend

    def initialize(self, connection_uri: Optional[str] = None) -> None:
        """Select and initialize the backend for a connection URI.

        Unknown schemes use the default backend. If the backend fails to
        initialize, storage is disabled instead of raising.

        Args:
            connection_uri: Connection URI (default: SHAMAN_L2_CONNECT)

        Raises:
            ConfigError: If the URI cannot be parsed
        """
        if connection_uri is None:
            connection_uri = l2_connect()
        target = parse_connection_uri(connection_uri)

        self.close()
        backend = None
        try:
            backend = get_backend(target)
            if backend is not None:
                backend.initialize()
        except StorageError as e:
            logger.info("Failed to initialize cache, turning off - %s", e)
            if backend is not None:
                backend.close()
            backend = None
        self.backend = backend

    @property
    def exists(self) -> bool:
        """Whether a storage backend is active."""
        return self.backend is not None

    def add_record(self, resource: Resource) -> None:
        """Add or replace a resource."""
        if self.backend is None:
            return
        resource.normalize()
        self.backend.add_record(resource)

    def get_record(self, domain: str) -> Optional[Resource]:
        """Get a resource by domain; None when storage is disabled.

        Raises:
            RecordNotFoundError: If storage is active and nothing is stored
        """
        if self.backend is None:
            return None
        return self.backend.get_record(sanitize_domain(domain))

    def update_record(self, domain: str, resource: Resource) -> None:
        """Add or replace the resource stored under a domain."""
        if self.backend is None:
            return
        resource.normalize()
        self.backend.update_record(sanitize_domain(domain), resource)

    def delete_record(self, domain: str) -> None:
        """Remove a resource."""
        if self.backend is None:
            return
        self.backend.delete_record(sanitize_domain(domain))

    def reset_records(self, resources: Iterable[Resource]) -> None:
        """Replace every stored resource with the given ones."""
        if self.backend is None:
            return
        resources = [resource.normalize() for resource in resources]
        self.backend.reset_records(resources)

    def list_records(self) -> list[Resource]:
        """List every stored resource; empty when storage is disabled."""
        if self.backend is None:
            return []
        return self.backend.list_records()

    def close(self) -> None:
        """Close the active backend and disable storage."""
        if self.backend is not None:
            self.backend.close()
            self.backend = None

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and close the backend."""
        self.close()
        return False

"""
Storage interface for persistent DNS resources.

This ABC allows the cache to work with different storage engines:
- boltdb: embedded transactional key-value file
- postgres: relational database
- scribble: JSON documents on the local filesystem
- consul: cluster-coordination key-value store

Every implementation must preserve the same observable behavior:
- add and update are upserts keyed by the sanitized domain
- delete of an absent domain is a no-op
- reset replaces the whole namespace, never merges into it
- list never returns a partial result; a corrupt value fails the whole call
"""

from abc import ABC, abstractmethod
from typing import Iterable
from urllib.parse import SplitResult

from ..errors import ResetError, StorageError
from ..resource import Resource


class Cacher(ABC):
    """Abstract interface for persistent resource storage."""

    @classmethod
    @abstractmethod
    def from_uri(cls, parts: SplitResult) -> "Cacher":
        """Build an uninitialized backend from a split connection URI.

        Raises:
            BackendConnectionError: If the URI is not usable by this backend
        """
        pass

    @abstractmethod
    def initialize(self) -> None:
        """Connect to the engine and ensure the DNS namespace exists.

        Must be idempotent: initializing an existing store keeps its data.

        Raises:
            BackendConnectionError: If the engine cannot be reached or opened
            SchemaError: If the namespace cannot be created
        """
        pass

    def add_record(self, resource: Resource) -> None:
        """Add or replace a resource, keyed by its own domain."""
        self.update_record(resource.domain, resource)

    @abstractmethod
    def get_record(self, domain: str) -> Resource:
        """Get a resource by domain.

        Raises:
            RecordNotFoundError: If nothing is stored for the domain
        """
        pass

    @abstractmethod
    def update_record(self, domain: str, resource: Resource) -> None:
        """Add or replace the resource stored under a domain."""
        pass

    @abstractmethod
    def delete_record(self, domain: str) -> None:
        """Remove a resource. Removing an absent domain succeeds."""
        pass

    @abstractmethod
    def drop_namespace(self) -> None:
        """Atomically replace the DNS namespace with an empty one."""
        pass

    def reset_records(self, resources: Iterable[Resource]) -> None:
        """Replace every stored resource with the given ones.

        The namespace is dropped and recreated first, then each resource is
        inserted through `add_record`. A failed insert stops the reset; the
        resources inserted before it are kept.

        Raises:
            ResetError: If a resource could not be saved
        """
        self.drop_namespace()
        for index, resource in enumerate(resources):
            try:
                self.add_record(resource)
            except StorageError as e:
                raise ResetError(resource.domain, index, e) from e

    @abstractmethod
    def list_records(self) -> list[Resource]:
        """List every stored resource, in backend order.

        Raises:
            EncodingError: If any stored value cannot be decoded
        """
        pass

    def close(self) -> None:
        """Close connections and clean up resources."""
        pass

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and close connection."""
        self.close()
        return False

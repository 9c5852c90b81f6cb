"""
Exceptions raised by the storage layer.

Backends translate engine-native failures into these types so callers only
ever need to handle `StorageError` and its subclasses.
"""

from typing import Optional


class StorageError(Exception):
    """Base class for all storage failures."""

    pass


class BackendConnectionError(StorageError):
    """The storage engine is unreachable or could not be opened."""

    pass


class SchemaError(StorageError):
    """The DNS bucket/namespace could not be created."""

    pass


class RecordNotFoundError(StorageError):
    """No resource is stored under the requested domain."""

    def __init__(self, domain: str):
        super().__init__(f"No Record Found for {domain!r}")
        self.domain = domain


class EncodingError(StorageError):
    """A resource could not be serialized, or a stored value could not be decoded."""

    pass


class ConfigError(StorageError):
    """The connection URI could not be parsed."""

    pass


class ResetError(StorageError):
    """Repopulating the namespace failed part way through a reset."""

    def __init__(self, domain: str, index: int, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to save records - record {index} ({domain!r}): {cause}")
        self.domain = domain
        self.index = index

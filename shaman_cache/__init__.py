from .cache import RecordCache
from .errors import (
    BackendConnectionError,
    ConfigError,
    EncodingError,
    RecordNotFoundError,
    ResetError,
    SchemaError,
    StorageError,
)
from .resource import Record, Resource, sanitize_domain

__all__ = [
    "RecordCache",
    "Record",
    "Resource",
    "sanitize_domain",
    "StorageError",
    "BackendConnectionError",
    "SchemaError",
    "RecordNotFoundError",
    "EncodingError",
    "ConfigError",
    "ResetError",
]

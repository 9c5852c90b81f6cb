"""
Storage layer for persistent DNS resources.

This package provides a clean abstraction for record persistence, separating
storage engines from the DNS service that uses them.

Key Components:

- **interfaces**: `Cacher`, the abstract contract every backend implements
- **keys**: key prefixing shared by all backends
- **codec**: versioned serialization of resources
- **backends**: concrete implementations (boltdb, postgres, scribble, consul)
- **models**: SQLModel schema for the relational backend

Example:

    >>> from shaman_cache.storage.backends.scribble import ScribbleStorage
    >>> from shaman_cache.resource import Resource, Record
    >>>
    >>> storage = ScribbleStorage("/tmp/shaman")
    >>> storage.initialize()
    >>> storage.add_record(Resource(domain="example.com.", records=[Record(address="127.0.0.1")]))
"""

__all__ = [
    "interfaces",
    "keys",
    "codec",
    "backends",
    "models",
]

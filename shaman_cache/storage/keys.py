"""
Key addressing shared by every backend.

Domains are stored under `DOMAIN_PREFIX + domain` inside the `BUCKET`
namespace. Backends must apply these helpers identically so data written by one
version stays readable by the next. Domains are expected to be sanitized
already; the prefix is applied after normalization, never before.
"""

BUCKET = "dns"
DOMAIN_PREFIX = "domains:"


def add_prefix(domain: str) -> str:
    """Return the storage key for a domain."""
    return DOMAIN_PREFIX + domain


def strip_prefix(key: str) -> str:
    """Return the domain a storage key was derived from."""
    if key.startswith(DOMAIN_PREFIX):
        return key[len(DOMAIN_PREFIX) :]
    return key


def key_bytes(domain: str) -> bytes:
    """Return the storage key for a domain as raw bytes."""
    return add_prefix(domain).encode("utf-8")

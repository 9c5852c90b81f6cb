"""
## Overview

Domain model for the DNS resources kept in persistent storage.

A `Resource` is everything the server knows about one domain: the domain name
(the primary key) and the list of `Record` answers served for it. The storage
layer only ever looks at `Resource.domain`; everything else is an opaque payload
that must survive a round trip through any backend unchanged.

Normalization rules:

- domain: lowercased, surrounding whitespace removed, exactly one trailing dot
- record class: defaults to "IN", uppercased
- record type: defaults to "A", uppercased
- record ttl: defaults to 60 seconds when unset (0)
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TTL = 60
DEFAULT_CLASS = "IN"
DEFAULT_TYPE = "A"


def sanitize_domain(domain: str) -> str:
    """
    Normalize a domain name before it is used as a storage key.

    Example:
        >>> sanitize_domain("Example.COM")
        'example.com.'
        >>> sanitize_domain("example.com.")
        'example.com.'
    """
    domain = domain.strip().lower().rstrip(".")
    return f"{domain}."


class Record(BaseModel):
    """
    A single DNS answer for a resource.

    Attributes:
        ttl: Time to live in seconds
        class_: DNS class (serialized as "class")
        type: Record type (A, AAAA, CNAME, MX, ...)
        address: Record value
    """

    model_config = ConfigDict(populate_by_name=True)

    ttl: int = DEFAULT_TTL
    class_: str = Field(default=DEFAULT_CLASS, alias="class")
    type: str = DEFAULT_TYPE
    address: str = ""

    def normalize(self) -> "Record":
        """Fill in defaults and uppercase class/type in place."""
        if not self.ttl:
            self.ttl = DEFAULT_TTL
        self.class_ = (self.class_ or DEFAULT_CLASS).upper()
        self.type = (self.type or DEFAULT_TYPE).upper()
        return self


class Resource(BaseModel):
    """
    A domain and the records served for it.

    Attributes:
        domain: Fully qualified domain name, the primary key in every backend
        records: DNS answers for the domain
    """

    model_config = ConfigDict(populate_by_name=True)

    domain: str
    records: List[Record] = Field(default_factory=list)

    def normalize(self) -> "Resource":
        """Sanitize the domain and normalize every record in place."""
        self.domain = sanitize_domain(self.domain)
        for record in self.records:
            record.normalize()
        return self

"""
Serialization of resources for storage.

Values are stored as a versioned JSON envelope:

    {"version": 1, "resource": {"domain": "example.com.", "records": [...]}}

The envelope is self-describing, so a value can be inspected with any JSON tool
and a future format change can be detected instead of silently misread.
"""

from pydantic import BaseModel, ValidationError

from ..errors import EncodingError
from ..resource import Resource

CODEC_VERSION = 1


class StoredResource(BaseModel):
    """Envelope written to storage around each resource."""

    version: int = CODEC_VERSION
    resource: Resource


def encode_payload(resource: Resource) -> str:
    """Serialize a resource to its JSON envelope."""
    try:
        return StoredResource(resource=resource).model_dump_json(by_alias=True)
    except (ValidationError, ValueError, TypeError) as e:
        raise EncodingError(f"Failed to encode resource {resource.domain!r}: {e}") from e


def encode_resource(resource: Resource) -> bytes:
    """Serialize a resource to bytes for storage."""
    return encode_payload(resource).encode("utf-8")


def encode_document(resource: Resource) -> dict:
    """Serialize a resource to its envelope as a JSON-compatible dict."""
    try:
        return StoredResource(resource=resource).model_dump(mode="json", by_alias=True)
    except (ValidationError, ValueError, TypeError) as e:
        raise EncodingError(f"Failed to encode resource {resource.domain!r}: {e}") from e


def decode_document(document: dict) -> Resource:
    """Deserialize an envelope dict (e.g. a JSON column) back into a resource."""
    try:
        stored = StoredResource.model_validate(document)
    except ValidationError as e:
        raise EncodingError(f"Failed to decode stored resource: {e}") from e
    if stored.version != CODEC_VERSION:
        raise EncodingError(f"Unsupported resource encoding version {stored.version}")
    return stored.resource


def decode_resource(data: bytes | str) -> Resource:
    """
    Deserialize a stored value back into a resource.

    Raises:
        EncodingError: If the value is not a valid envelope or was written by
            an unsupported codec version
    """
    try:
        stored = StoredResource.model_validate_json(data)
    except (ValidationError, ValueError) as e:
        raise EncodingError(f"Failed to decode stored resource: {e}") from e
    if stored.version != CODEC_VERSION:
        raise EncodingError(f"Unsupported resource encoding version {stored.version}")
    return stored.resource

"""
Consul implementation of the resource storage interface.

Implements Cacher over the Consul HTTP key-value API. Resources are stored
under `dns/domains:<domain>` as raw codec envelopes; the `dns/` key prefix is
the namespace, and a recursive delete on it is a single atomic operation in
Consul.
"""

import base64
import binascii
import logging
from typing import Optional
from urllib.parse import SplitResult, parse_qs, quote

import httpx

from ...config import consul_timeout
from ...errors import BackendConnectionError, EncodingError, RecordNotFoundError, SchemaError, StorageError
from ...resource import Resource
from ..codec import decode_resource, encode_resource
from ..interfaces import Cacher
from ..keys import BUCKET, add_prefix

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "127.0.0.1:8500"


class ConsulStorage(Cacher):
    """Consul key-value implementation of resource storage."""

    def __init__(
        self,
        address: str = DEFAULT_ADDRESS,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize Consul storage.

        Args:
            address: host:port of the Consul HTTP API
            token: ACL token sent as X-Consul-Token
            timeout: Request timeout in seconds (default: SHAMAN_CONSUL_TIMEOUT or 10)
            transport: Custom httpx transport, mainly for tests
        """
        self.address = address or DEFAULT_ADDRESS
        self.token = token
        self.timeout = timeout if timeout is not None else consul_timeout()
        self.transport = transport
        self._client: httpx.Client | None = None

    @classmethod
    def from_uri(cls, parts: SplitResult) -> "ConsulStorage":
        """Build storage from a `consul://host:port?token=...` URI."""
        token = parse_qs(parts.query).get("token", [None])[0]
        return cls(parts.netloc or DEFAULT_ADDRESS, token=token)

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            headers = {"X-Consul-Token": self.token} if self.token else {}
            self._client = httpx.Client(
                base_url=f"http://{self.address}",
                headers=headers,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    def _kv_path(self, key: str) -> str:
        return "/v1/kv/" + quote(key, safe="/:")

    def _key(self, domain: str) -> str:
        return f"{BUCKET}/{add_prefix(domain)}"

    def initialize(self) -> None:
        """Check that the Consul agent is reachable and has a leader."""
        try:
            response = self.client.get("/v1/status/leader")
            response.raise_for_status()
            leader = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BackendConnectionError(f"Consul at {self.address} is unavailable: {e}") from e
        if not leader:
            raise BackendConnectionError(f"Consul at {self.address} has no cluster leader")
        logger.debug("connected to consul at %s, leader %s", self.address, leader)

    def get_record(self, domain: str) -> Resource:
        """Get a resource by domain."""
        try:
            response = self.client.get(self._kv_path(self._key(domain)), params={"raw": ""})
            if response.status_code == 404:
                raise RecordNotFoundError(domain)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to read {domain!r}: {e}") from e
        return decode_resource(response.content)

    def update_record(self, domain: str, resource: Resource) -> None:
        """Add or replace the resource stored under a domain."""
        value = encode_resource(resource)
        try:
            response = self.client.put(self._kv_path(self._key(domain)), content=value)
            response.raise_for_status()
            saved = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StorageError(f"Failed to save {domain!r}: {e}") from e
        if saved is not True:
            raise StorageError(f"Consul refused to save {domain!r}")

    def delete_record(self, domain: str) -> None:
        """Remove a resource; Consul treats deleting an absent key as success."""
        try:
            response = self.client.delete(self._kv_path(self._key(domain)))
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to delete {domain!r}: {e}") from e

    def drop_namespace(self) -> None:
        """Delete every key under the DNS prefix in one request."""
        try:
            response = self.client.delete(self._kv_path(f"{BUCKET}/"), params={"recurse": ""})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SchemaError(f"Failed to reset namespace: {e}") from e

    def list_records(self) -> list[Resource]:
        """List every stored resource, in key order."""
        try:
            response = self.client.get(self._kv_path(f"{BUCKET}/"), params={"recurse": ""})
            if response.status_code == 404:
                return []
            response.raise_for_status()
            entries = response.json()
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to list records: {e}") from e
        except ValueError as e:
            raise EncodingError(f"Malformed Consul response: {e}") from e

        results = []
        for entry in entries:
            if entry.get("Value") is None:
                continue
            try:
                value = base64.b64decode(entry["Value"], validate=True)
            except (binascii.Error, ValueError) as e:
                raise EncodingError(f"Malformed value for {entry.get('Key')!r}: {e}") from e
            results.append(decode_resource(value))
        return results

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

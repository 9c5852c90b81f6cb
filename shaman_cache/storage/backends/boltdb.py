"""
Embedded key-value implementation of the resource storage interface.

This implementation keeps every resource in a single LMDB file. Resources live
in a named sub-database (the "dns" bucket), keyed by `domains:<domain>` and
stored as codec envelopes. Every call runs in its own transaction: reads in a
read-only transaction, mutations in a read-write transaction that commits once.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import SplitResult, parse_qs

import lmdb

from ...errors import BackendConnectionError, RecordNotFoundError, SchemaError, StorageError
from ...resource import Resource
from ..codec import decode_resource, encode_resource
from ..interfaces import Cacher
from ..keys import BUCKET, key_bytes

logger = logging.getLogger(__name__)

# Initial upper bound on the file size; doubled whenever a write fills it.
DEFAULT_MAP_SIZE = 64 * 1024 * 1024


class BoltStorage(Cacher):
    """LMDB implementation of resource storage.

    Uses one LMDB file with a named database per bucket. Suitable for a single
    host that needs durable records without running a database server.
    """

    def __init__(self, db_path: Path | str, map_size: int = DEFAULT_MAP_SIZE):
        """Initialize LMDB storage.

        Args:
            db_path: Path to the data file; created with owner read/write only
            map_size: Maximum size of the data file in bytes
        """
        self.db_path = Path(db_path)
        self.map_size = map_size
        self.env: Optional[lmdb.Environment] = None
        self._db = None

    @classmethod
    def from_uri(cls, parts: SplitResult) -> "BoltStorage":
        """Build storage from a `boltdb:///path/to/file.db[?map_size=BYTES]` URI."""
        path = parts.netloc + parts.path
        if not path:
            raise BackendConnectionError("boltdb connection URI has no file path")
        map_size = parse_qs(parts.query).get("map_size", [None])[0]
        if map_size is None:
            return cls(path)
        try:
            size = int(map_size)
        except ValueError:
            raise BackendConnectionError(f"Invalid map_size {map_size!r}") from None
        if size <= 0:
            raise BackendConnectionError(f"Invalid map_size {map_size!r}")
        return cls(path, map_size=size)

    def initialize(self) -> None:
        """Open (or create) the data file and ensure the DNS bucket exists."""
        if self.env is not None:
            return
        try:
            env = lmdb.open(str(self.db_path), subdir=False, lock=True, max_dbs=2, map_size=self.map_size, mode=0o600)
        except (lmdb.Error, OSError) as e:
            raise BackendConnectionError(f"Failed to open {self.db_path}: {e}") from e

        try:
            with env.begin(write=True) as txn:
                db = env.open_db(BUCKET.encode(), txn=txn, create=True)
        except lmdb.Error as e:
            env.close()
            raise SchemaError(f"create bucket: {e}") from e

        self.env = env
        self._db = db
        logger.debug("opened boltdb file %s", self.db_path)

    def _require_open(self) -> lmdb.Environment:
        if self.env is None:
            raise BackendConnectionError(f"Storage at {self.db_path} is not initialized")
        return self.env

    def get_record(self, domain: str) -> Resource:
        """Get a resource by domain."""
        env = self._require_open()
        try:
            with env.begin(db=self._db) as txn:
                value = txn.get(key_bytes(domain))
        except lmdb.Error as e:
            raise StorageError(f"Failed to read {domain!r}: {e}") from e
        if value is None:
            raise RecordNotFoundError(domain)
        return decode_resource(value)

    def update_record(self, domain: str, resource: Resource) -> None:
        """Add or replace the resource stored under a domain."""
        env = self._require_open()
        value = encode_resource(resource)
        try:
            try:
                self._put(env, key_bytes(domain), value)
            except lmdb.MapFullError:
                self._grow(env)
                self._put(env, key_bytes(domain), value)
        except lmdb.Error as e:
            raise StorageError(f"Failed to save {domain!r}: {e}") from e

    def _put(self, env: lmdb.Environment, key: bytes, value: bytes) -> None:
        with env.begin(write=True, db=self._db) as txn:
            txn.put(key, value)

    def _grow(self, env: lmdb.Environment) -> None:
        self.map_size *= 2
        env.set_mapsize(self.map_size)
        logger.info("boltdb file %s is full, map size raised to %d bytes", self.db_path, self.map_size)

    def delete_record(self, domain: str) -> None:
        """Remove a resource if present."""
        env = self._require_open()
        try:
            with env.begin(write=True, db=self._db) as txn:
                txn.delete(key_bytes(domain))
        except lmdb.Error as e:
            raise StorageError(f"Failed to delete {domain!r}: {e}") from e

    def drop_namespace(self) -> None:
        """Empty the DNS bucket in a single write transaction."""
        env = self._require_open()
        try:
            with env.begin(write=True) as txn:
                # delete=False empties the bucket but keeps its handle valid
                txn.drop(self._db, delete=False)
        except lmdb.Error as e:
            raise SchemaError(f"Failed to reset bucket: {e}") from e

    def list_records(self) -> list[Resource]:
        """List every stored resource, in key order."""
        env = self._require_open()
        try:
            with env.begin(db=self._db) as txn:
                values = [bytes(value) for _, value in txn.cursor()]
        except lmdb.Error as e:
            raise StorageError(f"Failed to list records: {e}") from e
        return [decode_resource(value) for value in values]

    def close(self) -> None:
        """Close the data file."""
        if self.env is not None:
            self.env.close()
            self.env = None
            self._db = None

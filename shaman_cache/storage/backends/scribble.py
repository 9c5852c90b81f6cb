"""
Document-file implementation of the resource storage interface.

A tiny JSON document store: the "dns" collection is a directory under the
configured root and every resource is one `<sha256 of key>.json` file inside
it. The digest keeps names under the filesystem limit for any valid domain;
the domain itself is read back from the document. Writes
go to a temporary file that is renamed into place, so readers only ever see
complete documents. This is the default backend because it needs nothing but
a writable directory.
"""

import hashlib
import logging
import os
import shutil
import tempfile
import threading
from pathlib import Path
from urllib.parse import SplitResult

from ...errors import BackendConnectionError, RecordNotFoundError, SchemaError, StorageError
from ...resource import Resource
from ..codec import decode_resource, encode_resource
from ..interfaces import Cacher
from ..keys import BUCKET, add_prefix

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "/var/db/shaman"
DOCUMENT_SUFFIX = ".json"


class ScribbleStorage(Cacher):
    """JSON-document implementation of resource storage."""

    def __init__(self, root: Path | str = DEFAULT_ROOT):
        """Initialize document storage.

        Args:
            root: Directory holding the collections
        """
        self.root = Path(root)
        self.collection = self.root / BUCKET
        self._lock = threading.Lock()

    @classmethod
    def from_uri(cls, parts: SplitResult) -> "ScribbleStorage":
        """Build storage from a `scribble:///path/to/dir` URI."""
        return cls((parts.netloc + parts.path) or DEFAULT_ROOT)

    def initialize(self) -> None:
        """Create the root and collection directories if missing."""
        try:
            self.root.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise BackendConnectionError(f"Failed to create {self.root}: {e}") from e
        try:
            self.collection.mkdir(mode=0o700, exist_ok=True)
        except OSError as e:
            raise SchemaError(f"create collection: {e}") from e
        if not os.access(self.collection, os.W_OK):
            raise BackendConnectionError(f"Collection {self.collection} is not writable")
        logger.debug("using scribble collection %s", self.collection)

    def _path(self, domain: str) -> Path:
        digest = hashlib.sha256(add_prefix(domain).encode()).hexdigest()
        return self.collection / (digest + DOCUMENT_SUFFIX)

    def get_record(self, domain: str) -> Resource:
        """Get a resource by domain."""
        with self._lock:
            try:
                data = self._path(domain).read_bytes()
            except FileNotFoundError:
                raise RecordNotFoundError(domain) from None
            except OSError as e:
                raise StorageError(f"Failed to read {domain!r}: {e}") from e
        return decode_resource(data)

    def update_record(self, domain: str, resource: Resource) -> None:
        """Add or replace the resource stored under a domain."""
        data = encode_resource(resource)
        path = self._path(domain)
        with self._lock:
            try:
                fd, tmp = tempfile.mkstemp(dir=self.collection, prefix=".tmp-", suffix=DOCUMENT_SUFFIX)
                try:
                    with os.fdopen(fd, "wb") as f:
                        f.write(data)
                    os.replace(tmp, path)
                except BaseException:
                    os.unlink(tmp)
                    raise
            except OSError as e:
                raise StorageError(f"Failed to save {domain!r}: {e}") from e

    def delete_record(self, domain: str) -> None:
        """Remove a resource if present."""
        with self._lock:
            try:
                self._path(domain).unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"Failed to delete {domain!r}: {e}") from e

    def drop_namespace(self) -> None:
        """Swap the collection for an empty one.

        If the swap fails part way, the old collection is moved back, so the
        store is either fully reset or left as it was.
        """
        with self._lock:
            try:
                fresh = Path(tempfile.mkdtemp(dir=self.root, prefix=f".{BUCKET}-"))
            except OSError as e:
                raise SchemaError(f"Failed to reset collection: {e}") from e
            stale = fresh.with_name(fresh.name + ".stale")
            try:
                self.collection.rename(stale)
                try:
                    fresh.rename(self.collection)
                except OSError:
                    stale.rename(self.collection)
                    raise
            except OSError as e:
                shutil.rmtree(fresh, ignore_errors=True)
                raise SchemaError(f"Failed to reset collection: {e}") from e
            shutil.rmtree(stale, ignore_errors=True)

    def list_records(self) -> list[Resource]:
        """List every stored resource, in file name order."""
        with self._lock:
            try:
                paths = sorted(p for p in self.collection.iterdir() if p.suffix == DOCUMENT_SUFFIX and not p.name.startswith("."))
                blobs = [p.read_bytes() for p in paths]
            except OSError as e:
                raise StorageError(f"Failed to list records: {e}") from e
        return [decode_resource(blob) for blob in blobs]

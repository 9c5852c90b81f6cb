"""
PostgreSQL implementation of the resource storage interface.

This implementation uses SQLModel persistence models and mapper functions for
domain ↔ persistence conversion. Each call opens its own session and commits
once, so the database's transaction isolation is the only concurrency control.

Any SQLAlchemy URL can be injected instead of a `postgres://` URI, which is how
the test suite runs this backend against SQLite.
"""

import logging
from typing import Optional
from urllib.parse import SplitResult

from sqlalchemy import delete, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine, select

from ...errors import BackendConnectionError, RecordNotFoundError, SchemaError, StorageError
from ...mapper import to_domain, to_persistence
from ...resource import Resource
from ..interfaces import Cacher
from ..keys import add_prefix
from ..models.resource import DNSResource

logger = logging.getLogger(__name__)

POSTGRES_DRIVER = "postgresql+psycopg2"


def to_sqlalchemy_url(uri: str) -> str:
    """
    Rewrite a `postgres://` or `postgresql://` URI for the psycopg2 driver.

    Example:
        >>> to_sqlalchemy_url("postgres://dns@localhost/shaman")
        'postgresql+psycopg2://dns@localhost/shaman'
    """
    try:
        url = make_url(uri)
    except ArgumentError as e:
        raise BackendConnectionError(f"Invalid database URL: {e}") from e
    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername=POSTGRES_DRIVER)
    return url.render_as_string(hide_password=False)


class PostgresStorage(Cacher):
    """Relational implementation of resource storage."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        """Initialize relational storage.

        Args:
            database_url: SQLAlchemy database URL, used if no engine is given
            engine: Pre-built engine to use instead of creating one
        """
        if database_url is None and engine is None:
            raise ValueError("database_url or engine is required")
        self.database_url = database_url
        self.engine: Optional[Engine] = engine

    @classmethod
    def from_uri(cls, parts: SplitResult) -> "PostgresStorage":
        """Build storage from a `postgres://` or `postgresql://` URI."""
        return cls(to_sqlalchemy_url(parts.geturl()))

    def initialize(self) -> None:
        """Connect to the database and create the resources table if missing."""
        if self.engine is None:
            if self.database_url is None:
                raise BackendConnectionError("No database URL to connect to")
            try:
                self.engine = create_engine(self.database_url, echo=False)
            except (ArgumentError, NoSuchModuleError, ImportError) as e:
                raise BackendConnectionError(f"Failed to create engine: {e}") from e

        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            # OperationalError for unreachable hosts, ProgrammingError for rejected DSN options
            raise BackendConnectionError(f"Failed to connect: {e}") from e

        try:
            SQLModel.metadata.create_all(self.engine, tables=[DNSResource.__table__])
        except SQLAlchemyError as e:
            raise SchemaError(f"create table: {e}") from e
        logger.debug("using table %s on %s", DNSResource.__tablename__, self.engine.url.render_as_string(hide_password=True))

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise BackendConnectionError("Storage is not initialized")
        return self.engine

    def get_record(self, domain: str) -> Resource:
        """Get a resource by domain."""
        engine = self._require_engine()
        try:
            with Session(engine) as session:
                persistence = session.get(DNSResource, add_prefix(domain))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {domain!r}: {e}") from e
        if persistence is None:
            raise RecordNotFoundError(domain)
        return to_domain(persistence)

    def update_record(self, domain: str, resource: Resource) -> None:
        """Add or replace the resource stored under a domain."""
        engine = self._require_engine()
        persistence = to_persistence(domain, resource)
        try:
            with Session(engine) as session:
                # Use merge to handle updates
                session.merge(persistence)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save {domain!r}: {e}") from e

    def delete_record(self, domain: str) -> None:
        """Remove a resource if present."""
        engine = self._require_engine()
        try:
            with Session(engine) as session:
                session.execute(delete(DNSResource).where(DNSResource.storage_key == add_prefix(domain)))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {domain!r}: {e}") from e

    def drop_namespace(self) -> None:
        """Delete every resource row in a single transaction."""
        engine = self._require_engine()
        try:
            with Session(engine) as session:
                session.execute(delete(DNSResource))
                session.commit()
        except SQLAlchemyError as e:
            raise SchemaError(f"Failed to reset table: {e}") from e

    def list_records(self) -> list[Resource]:
        """List every stored resource, in key order."""
        engine = self._require_engine()
        try:
            with Session(engine) as session:
                persistences = session.exec(select(DNSResource).order_by(DNSResource.storage_key)).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list records: {e}") from e
        return [to_domain(p) for p in persistences]

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

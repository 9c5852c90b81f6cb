"""Tests for the DNSResource SQLModel table definition."""

from sqlalchemy import JSON
from sqlalchemy.dialects import postgresql, sqlite

from shaman_cache.storage.models.resource import DNSResource


def test_table_name_and_key():
    table = DNSResource.__table__
    assert table.name == "dns_resources"
    assert [c.name for c in table.primary_key.columns] == ["storage_key"]


def test_payload_is_jsonb_on_postgres():
    payload = DNSResource.__table__.c.payload
    assert isinstance(payload.type.dialect_impl(postgresql.dialect()), postgresql.JSONB)

    sqlite_impl = payload.type.dialect_impl(sqlite.dialect())
    assert isinstance(sqlite_impl, JSON)
    assert not isinstance(sqlite_impl, postgresql.JSONB)
    assert payload.nullable is False


def test_updated_at_defaults_to_now():
    row = DNSResource(storage_key="domains:example.com.", domain="example.com.", payload={})
    assert row.updated_at is not None
    assert row.updated_at.tzinfo is not None

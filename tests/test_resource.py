"""Tests for the resource domain model and its normalization rules."""

import pytest

from shaman_cache.resource import DEFAULT_TTL, Record, Resource, sanitize_domain


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com", "example.com."),
        ("Example.COM", "example.com."),
        ("example.com.", "example.com."),
        ("  WWW.Example.com.  ", "www.example.com."),
    ],
)
def test_sanitize_domain(raw, expected):
    assert sanitize_domain(raw) == expected


def test_sanitize_domain_is_idempotent():
    once = sanitize_domain("Sub.Example.Org")
    assert sanitize_domain(once) == once


def test_record_defaults():
    record = Record(address="127.0.0.1")
    assert record.ttl == DEFAULT_TTL
    assert record.class_ == "IN"
    assert record.type == "A"


def test_record_normalize_fills_and_uppercases():
    record = Record(ttl=0, class_="in", type="aaaa", address="::1").normalize()
    assert record.ttl == DEFAULT_TTL
    assert record.class_ == "IN"
    assert record.type == "AAAA"


def test_record_class_alias():
    """The wire name of class_ is 'class'."""
    record = Record.model_validate({"class": "ch", "type": "txt", "address": "x"})
    assert record.class_ == "ch"
    assert record.model_dump(by_alias=True)["class"] == "ch"


def test_resource_normalize_in_place():
    resource = Resource(domain="Example.com", records=[Record(type="mx", address="mail.example.com.")])
    result = resource.normalize()

    assert result is resource
    assert resource.domain == "example.com."
    assert resource.records[0].type == "MX"


def test_resource_equality_covers_records():
    a = Resource(domain="example.com.", records=[Record(address="1.1.1.1")])
    b = Resource(domain="example.com.", records=[Record(address="1.1.1.2")])
    assert a != b
    assert a == a.model_copy(deep=True)

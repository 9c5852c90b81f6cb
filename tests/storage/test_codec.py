"""
Tests for key addressing and resource serialization.

Run with: pytest tests/storage/test_codec.py -v
"""

import json

import pytest

from shaman_cache.errors import EncodingError
from shaman_cache.resource import Record, Resource
from shaman_cache.storage.codec import (
    CODEC_VERSION,
    decode_document,
    decode_resource,
    encode_document,
    encode_resource,
)
from shaman_cache.storage.keys import BUCKET, DOMAIN_PREFIX, add_prefix, key_bytes, strip_prefix


class TestKeys:
    def test_prefix_applied(self):
        assert add_prefix("example.com.") == "domains:example.com."
        assert key_bytes("example.com.") == b"domains:example.com."

    def test_strip_prefix_inverts_add_prefix(self):
        assert strip_prefix(add_prefix("a.example.com.")) == "a.example.com."

    def test_distinct_domains_never_collide(self):
        domains = ["example.com.", "example.co.", "xample.com.", "domains:example.com."]
        keys = {add_prefix(d) for d in domains}
        assert len(keys) == len(domains)

    def test_constants(self):
        assert BUCKET == "dns"
        assert DOMAIN_PREFIX == "domains:"


class TestCodec:
    def test_envelope_is_versioned_json(self):
        resource = Resource(domain="example.com.", records=[Record(address="127.0.0.1")])
        document = json.loads(encode_resource(resource))

        assert document["version"] == CODEC_VERSION
        assert document["resource"]["domain"] == "example.com."
        assert document["resource"]["records"][0]["class"] == "IN"

    def test_round_trip_keeps_every_field(self, small_resources):
        for resource in small_resources.values():
            assert decode_resource(encode_resource(resource)) == resource
            assert decode_document(encode_document(resource)) == resource

    def test_decode_accepts_str(self, small_resources):
        resource = small_resources["mail"]
        assert decode_resource(encode_resource(resource).decode()) == resource

    @pytest.mark.parametrize("data", [b"", b"not json", b"{}", b'{"version": 1}', b'{"version": 1, "resource": {"records": []}}'])
    def test_corrupt_values_raise(self, data):
        with pytest.raises(EncodingError):
            decode_resource(data)

    def test_unknown_version_rejected(self):
        data = json.dumps({"version": CODEC_VERSION + 1, "resource": {"domain": "example.com.", "records": []}})
        with pytest.raises(EncodingError, match="Unsupported"):
            decode_resource(data)

    def test_unknown_version_rejected_for_documents(self):
        with pytest.raises(EncodingError):
            decode_document({"version": 0, "resource": {"domain": "example.com."}})

"""
Tests for the shaman_cache package.

This directory contains unit tests for:
- Domain model and normalization (resource.py)
- Connection-URI configuration (config.py)
- The RecordCache facade (cache.py) and CLI (cli.py)
- Storage codec, keys, backends and persistence models (storage/)
"""

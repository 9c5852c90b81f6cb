"""
Tests for storage layer.

This package contains tests for the storage codec, backends, and models.

Test Structure:

- **backends/**: Tests for backend implementations (boltdb, postgres, scribble, consul)
- **models/**: Tests for SQLModel schema definitions

Run all storage tests:
    pytest tests/storage/ -v

Run backend tests only:
    pytest tests/storage/backends/ -v
"""

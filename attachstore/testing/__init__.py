"""Testing utilities for attachstore.

This module provides an in-memory S3 client and helpers for building
attachments against it.

Usage in conftest.py:
    pytest_plugins = ["attachstore.testing.fixtures"]
"""

from attachstore.testing.mocks import InMemoryS3, mock_s3_client
from attachstore.testing.utils import create_test_options, create_test_settings

__all__ = [
    "InMemoryS3",
    "mock_s3_client",
    "create_test_options",
    "create_test_settings",
]

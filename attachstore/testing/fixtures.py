"""Pytest fixtures for attachstore testing.

To use these fixtures, add to your conftest.py:

    pytest_plugins = ["attachstore.testing.fixtures"]
"""

from dataclasses import dataclass

import pytest

from attachstore.attachment import Attachment
from attachstore.core.settings import StorageSettings
from attachstore.storage.object_storage import ObjectStorage
from attachstore.testing.mocks import InMemoryS3
from attachstore.testing.utils import create_test_options, create_test_settings


@dataclass
class FakeRecord:
    """Stand-in for a model instance that owns attachments."""

    id: int = 1


@pytest.fixture
def storage_settings() -> StorageSettings:
    """Provide test settings for attachstore."""
    return create_test_settings()


@pytest.fixture
def s3_test_bucket() -> str:
    """Provide test bucket name."""
    return "test-bucket"


@pytest.fixture
def mock_s3() -> InMemoryS3:
    """Provide an in-memory S3 mock with no buckets."""
    s3 = InMemoryS3()
    yield s3
    s3.clear()


@pytest.fixture
def s3_client(mock_s3: InMemoryS3, s3_test_bucket: str) -> InMemoryS3:
    """Provide an in-memory S3 mock with the test bucket created."""
    mock_s3.create_bucket(Bucket=s3_test_bucket)
    mock_s3.calls.clear()
    return mock_s3


@pytest.fixture
def make_attachment(storage_settings: StorageSettings, s3_test_bucket: str):
    """Provide a factory for attachments wired to a given S3 client.

    Example:
        def test_something(make_attachment, s3_client):
            attachment = make_attachment(s3_client, fog_public=False)
    """

    def _make(client, name: str = "avatar", record=None, **option_overrides):
        options = create_test_options(s3_test_bucket, **option_overrides)

        class _Storage(ObjectStorage):
            def __init__(self, attachment):
                super().__init__(attachment, settings=storage_settings, connection=client)

        return Attachment(name, record or FakeRecord(), options, storage_class=_Storage)

    return _make

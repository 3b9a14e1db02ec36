"""Testing utilities for attachstore."""

from typing import Any

from attachstore.core.settings import StorageSettings
from attachstore.storage.options import StorageOptions


def create_test_settings(
    environment: str | None = "test",
    **overrides: Any,
) -> StorageSettings:
    """Create storage settings for testing.

    Args:
        environment: Deployment environment name
        **overrides: Additional settings to override

    Returns:
        StorageSettings instance configured for testing
    """
    values = {
        "environment": environment,
        "default_region": "us-east-1",
        "retry_attempts": 1,
    }
    values.update(overrides)
    return StorageSettings(**values)


def create_test_options(
    bucket_name: str = "test-bucket",
    **overrides: Any,
) -> StorageOptions:
    """Create attachment storage options for testing.

    Args:
        bucket_name: The bucket the attachment is stored in
        **overrides: Additional options to override

    Returns:
        StorageOptions instance with fake credentials
    """
    defaults = {
        "path": ":class/:attachment/:id/:style/:filename",
        "fog_credentials": {
            "provider": "AWS",
            "aws_access_key_id": "testing",
            "aws_secret_access_key": "testing",
            "region": "us-east-1",
        },
        "fog_directory": bucket_name,
    }
    defaults.update(overrides)
    return StorageOptions(**defaults)

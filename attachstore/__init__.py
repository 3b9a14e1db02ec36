"""attachstore: store file attachments in S3 and serve them through signed URLs."""

__version__ = "0.1.0"

# Core components
from attachstore.core.client import Directory, adjust_endpoint_url, connect
from attachstore.core.exceptions import (
    AttachStoreError,
    BucketNotFoundError,
    ConfigurationError,
    MissingDependencyError,
    S3ConnectionError,
    S3OperationError,
)
from attachstore.core.settings import StorageSettings

# Storage components
from attachstore.storage import (
    CloudFrontURLSigner,
    ObjectStorage,
    SignedGrant,
    StorageOptions,
    generate_cloudfront_url,
    parse_credentials,
)

# Attachments
from attachstore.attachment import Attachment
from attachstore.interpolations import interpolate, interpolates

__all__ = [
    # Version
    "__version__",
    # Core
    "Directory",
    "adjust_endpoint_url",
    "connect",
    "StorageSettings",
    "AttachStoreError",
    "BucketNotFoundError",
    "ConfigurationError",
    "MissingDependencyError",
    "S3ConnectionError",
    "S3OperationError",
    # Storage
    "ObjectStorage",
    "StorageOptions",
    "CloudFrontURLSigner",
    "SignedGrant",
    "generate_cloudfront_url",
    "parse_credentials",
    # Attachments
    "Attachment",
    "interpolate",
    "interpolates",
]

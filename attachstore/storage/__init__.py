"""Storage components for attachstore.

This module provides the S3 storage adapter used by attachments,
credential resolution and CloudFront URL signing.
"""

from attachstore.storage.cloudfront import (
    CloudFrontURLSigner,
    SignedGrant,
    generate_cloudfront_url,
)
from attachstore.storage.credentials import parse_credentials
from attachstore.storage.object_storage import ObjectStorage
from attachstore.storage.options import StorageOptions

__all__ = [
    "CloudFrontURLSigner",
    "SignedGrant",
    "generate_cloudfront_url",
    "parse_credentials",
    "ObjectStorage",
    "StorageOptions",
]

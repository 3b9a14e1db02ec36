"""S3 connection and bucket handles used by the storage adapter."""

import logging
from collections.abc import Mapping
from typing import IO, Any, Protocol, runtime_checkable
from urllib.parse import quote, urlsplit

from boto3.session import Session
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import ClientError
from botocore.utils import check_dns_name

from attachstore.core.exceptions import (
    BucketNotFoundError,
    ConfigurationError,
    S3ConnectionError,
    S3OperationError,
)
from attachstore.core.settings import StorageSettings

logger = logging.getLogger(__name__)

# Error codes S3 uses for "no such object" on HEAD/GET
_MISSING_OBJECT_CODES = ("404", "NoSuchKey", "NotFound")

# fog_credentials keys understood by connect(), mapped to boto3 client kwargs
_CREDENTIAL_KEYS = {
    "aws_access_key_id": "aws_access_key_id",
    "aws_secret_access_key": "aws_secret_access_key",
    "aws_session_token": "aws_session_token",
    "region": "region_name",
    "aws_default_region": "region_name",
    "endpoint": "endpoint_url",
    "aws_url": "endpoint_url",
}


@runtime_checkable
class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the adapter calls."""

    def put_object(self, Bucket: str, Key: str, Body: Any, **kwargs) -> dict[str, Any]:
        """Put an object to S3."""
        ...

    def get_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        """Get an object from S3."""
        ...

    def head_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        """Get object metadata."""
        ...

    def delete_object(self, Bucket: str, Key: str, **kwargs) -> dict[str, Any]:
        """Delete an object from S3."""
        ...

    def create_bucket(self, Bucket: str, **kwargs) -> dict[str, Any]:
        """Create a bucket."""
        ...

    def generate_presigned_url(
        self, ClientMethod: str, Params: dict, ExpiresIn: int = 3600, **kwargs
    ) -> str:
        """Generate a presigned URL."""
        ...


def adjust_endpoint_url(
    endpoint_url: str | None, bucket_name: str | None
) -> str | None:
    """Adjust endpoint URL for path-style addressing if needed.

    Args:
        endpoint_url: The S3 endpoint URL
        bucket_name: The S3 bucket name

    Returns:
        Adjusted endpoint URL or None
    """
    if not endpoint_url:
        return None
    if bucket_name and f"{bucket_name}." in endpoint_url:
        return endpoint_url.replace(f"{bucket_name}.", "")
    return endpoint_url


def connect(
    credentials: Mapping[str, Any],
    bucket_name: str | None = None,
    settings: StorageSettings | None = None,
) -> BaseClient:
    """Create a boto3 S3 client from a resolved credential map.

    Args:
        credentials: Flat credential map (see ``parse_credentials``)
        bucket_name: Bucket the client will talk to, used to normalize
            virtual-host style endpoints
        settings: Process settings supplying region and retry defaults

    Returns:
        A boto3 S3 client

    Raises:
        ConfigurationError: If the credentials name a provider other than AWS
        S3ConnectionError: If client creation fails
    """
    settings = settings or StorageSettings()

    provider = credentials.get("provider")
    if provider is not None and str(provider).lower() != "aws":
        raise ConfigurationError(
            f"Unsupported storage provider '{provider}', only 'AWS' (and "
            "S3-compatible endpoints) can be used"
        )

    kwargs: dict[str, Any] = {"region_name": settings.default_region}
    for key, value in credentials.items():
        if key in _CREDENTIAL_KEYS:
            if value is not None:
                kwargs[_CREDENTIAL_KEYS[key]] = value
        elif key != "provider":
            logger.debug(f"Ignoring unknown credential key '{key}'")

    endpoint_url = adjust_endpoint_url(kwargs.pop("endpoint_url", None), bucket_name)

    config = Config(
        retries={
            "max_attempts": settings.retry_attempts,
            "mode": "standard",
        },
    )
    if endpoint_url:
        config = config.merge(Config(s3={"addressing_style": "path"}))

    try:
        client = Session().client(
            "s3",
            endpoint_url=endpoint_url,
            config=config,
            **kwargs,
        )
    except Exception as e:
        raise S3ConnectionError(
            message=f"Failed to create S3 client: {e}",
            original_error=e,
            endpoint=endpoint_url,
        ) from e

    logger.debug(
        f"Created S3 client for region {kwargs['region_name']} "
        f"at {endpoint_url or 'AWS'}"
    )
    return client


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class Directory:
    """Handle on a single bucket.

    Nothing is checked against the provider when the handle is built;
    a missing bucket surfaces as ``BucketNotFoundError`` from ``create``.
    """

    def __init__(self, client: S3ClientProtocol, bucket_name: str):
        """Initialize the bucket handle.

        Args:
            client: The S3 client to use
            bucket_name: The bucket name
        """
        self.client = client
        self.bucket_name = bucket_name

    def __repr__(self) -> str:
        return f"Directory(bucket_name={self.bucket_name!r})"

    def save(self) -> None:
        """Create the bucket on the provider.

        Raises:
            S3OperationError: If the bucket cannot be created
        """
        logger.warning(f"Creating missing bucket '{self.bucket_name}'")
        params: dict[str, Any] = {"Bucket": self.bucket_name}
        region = getattr(getattr(self.client, "meta", None), "region_name", None)
        if region and region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}
        try:
            self.client.create_bucket(**params)
        except ClientError as e:
            if _error_code(e) in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
                return
            raise S3OperationError(
                f"Failed to create bucket '{self.bucket_name}': {e}",
                operation="create_bucket",
                original_error=e,
            ) from e

    def head(self, key: str) -> dict[str, Any] | None:
        """Return the object's metadata, or None when it does not exist."""
        try:
            return self.client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _error_code(e) in _MISSING_OBJECT_CODES:
                return None
            raise S3OperationError(
                f"Failed to check object: {e}",
                operation="head_object",
                key=key,
                original_error=e,
            ) from e

    def create(
        self,
        key: str,
        body: IO[bytes] | bytes,
        public: bool = True,
        **extra: Any,
    ) -> dict[str, Any]:
        """Upload an object.

        Args:
            key: The object key
            body: File-like object or bytes to upload
            public: Upload with a public-read ACL when True
            **extra: Additional ``put_object`` parameters (e.g. ContentType)

        Returns:
            The provider response

        Raises:
            BucketNotFoundError: If the bucket does not exist
            S3OperationError: If the upload fails for another reason
        """
        if hasattr(body, "seek"):
            body.seek(0)
        params = {
            **extra,
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": body,
            "ACL": "public-read" if public else "private",
        }
        try:
            return self.client.put_object(**params)
        except ClientError as e:
            if _error_code(e) == "NoSuchBucket":
                raise BucketNotFoundError(self.bucket_name, original_error=e) from e
            raise S3OperationError(
                f"Failed to upload object: {e}",
                operation="put_object",
                key=key,
                original_error=e,
            ) from e

    def get(self, key: str) -> bytes:
        """Download an object's body.

        Raises:
            S3OperationError: If the object cannot be read
        """
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            raise S3OperationError(
                f"Failed to download object: {e}",
                operation="get_object",
                key=key,
                original_error=e,
            ) from e
        return response["Body"].read()

    def destroy(self, key: str) -> None:
        """Delete an object. S3 treats deleting a missing key as success."""
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            raise S3OperationError(
                f"Failed to delete object: {e}",
                operation="delete_object",
                key=key,
                original_error=e,
            ) from e

    def public_url(self, key: str) -> str:
        """Build the provider's canonical public URL for a key.

        DNS-compatible bucket names on AWS use virtual-host addressing,
        everything else (dotted names, custom endpoints) uses path-style.
        """
        endpoint = getattr(getattr(self.client, "meta", None), "endpoint_url", None)
        endpoint = (endpoint or "https://s3.amazonaws.com").rstrip("/")
        quoted_key = quote(key, safe="/~")

        parts = urlsplit(endpoint)
        if (
            parts.hostname
            and parts.hostname.endswith("amazonaws.com")
            and "." not in self.bucket_name
            and check_dns_name(self.bucket_name)
        ):
            return f"https://{self.bucket_name}.{parts.hostname}/{quoted_key}"
        return f"{endpoint}/{self.bucket_name}/{quoted_key}"

    def presigned_url(self, key: str, expires_in: int) -> str:
        """Generate a provider-signed GET URL valid for ``expires_in`` seconds."""
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket_name, "Key": key},
            ExpiresIn=expires_in,
        )

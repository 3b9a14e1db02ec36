"""Object storage adapter for attachments.

Uploads queued attachment files to an S3 bucket, deletes replaced ones,
and builds public, presigned and CloudFront-signed URLs for stored keys.
"""

import hashlib
import importlib
import logging
import os
import tempfile
import time
from collections.abc import Mapping
from dataclasses import replace
from typing import IO, TYPE_CHECKING, Any

from attachstore.core.client import Directory, S3ClientProtocol, connect
from attachstore.core.exceptions import (
    BucketNotFoundError,
    ConfigurationError,
    MissingDependencyError,
)
from attachstore.core.settings import StorageSettings
from attachstore.interpolations import interpolates, is_registered
from attachstore.storage.credentials import parse_credentials

if TYPE_CHECKING:
    from attachstore.attachment import Attachment

logger = logging.getLogger(__name__)

PUBLIC_URL_TOKEN = "fog_public_url"

# Number of hosts a "%d" fog_host template is spread over
SHARD_COUNT = 4


def shard_index(key: str) -> int:
    """Pick the asset host shard for a key. Stable across processes."""
    return int(hashlib.md5(key.encode("utf-8")).hexdigest(), 16) % SHARD_COUNT


def _public_url_interpolation(attachment: "Attachment", style: str) -> str:
    return attachment.storage.public_url(style)


class ObjectStorage:
    """Stores an attachment's styles in an S3 bucket.

    The S3 client and the bucket handle are created on first use and
    reused for the lifetime of the adapter. Each attachment owns its own
    adapter; adapters are not meant to be shared between threads.
    """

    def __init__(
        self,
        attachment: "Attachment",
        settings: StorageSettings | None = None,
        connection: S3ClientProtocol | None = None,
    ):
        """Initialize the adapter and prepare the attachment's templates.

        Args:
            attachment: The attachment whose queues this adapter flushes
            settings: Process settings (environment, region, default TTL)
            connection: Pre-built S3 client to use instead of connecting

        Raises:
            MissingDependencyError: If a library the options need is missing
        """
        self.attachment = attachment
        self.settings = settings or StorageSettings()
        self._connection = connection
        self._directory: Directory | None = None
        self._credentials: dict[str, Any] | None = None

        self._check_dependencies()
        self._setup()

    @property
    def options(self):
        return self.attachment.options

    def _check_dependencies(self) -> None:
        required = {}
        if not isinstance(self.options.fog_credentials, Mapping):
            required.update({"yaml": "PyYAML", "jinja2": "Jinja2"})
        if self.options.cloudfront_host:
            required["cryptography"] = "cryptography"

        for module, package in required.items():
            try:
                importlib.import_module(module)
            except ImportError as e:
                raise MissingDependencyError(package, e) from e

    def _setup(self) -> None:
        options = self.options
        if not (options.url.startswith(":fog") and options.url.endswith("url")):
            self.attachment.options = replace(
                options,
                path=options.path.replace(":url", options.url),
                url=f":{PUBLIC_URL_TOKEN}",
            )
        if not is_registered(PUBLIC_URL_TOKEN):
            interpolates(PUBLIC_URL_TOKEN, _public_url_interpolation)

    # Configuration

    @property
    def fog_credentials(self) -> dict[str, Any]:
        if self._credentials is None:
            self._credentials = parse_credentials(
                self.options.fog_credentials, self.settings.environment
            )
        return self._credentials

    @property
    def fog_file(self) -> dict[str, Any]:
        return dict(self.options.fog_file or {})

    @property
    def fog_public(self) -> bool:
        return self.options.fog_public

    @property
    def connection(self) -> S3ClientProtocol:
        if self._connection is None:
            self._connection = connect(
                self.fog_credentials,
                bucket_name=self.options.fog_directory,
                settings=self.settings,
            )
        return self._connection

    @property
    def directory(self) -> Directory:
        if self._directory is None:
            if not self.options.fog_directory:
                raise ConfigurationError(missing_fields=["fog_directory"])
            self._directory = Directory(self.connection, self.options.fog_directory)
        return self._directory

    def _path(self, style: str | None) -> str:
        return self.attachment.path(style or self.attachment.default_style)

    # Queries

    def exists(self, style: str | None = None) -> bool:
        """Whether the style of the current file is stored in the bucket."""
        if not self.attachment.original_filename:
            return False
        return self.directory.head(self._path(style)) is not None

    def filename_exists(self, filename: str | None) -> bool:
        """Whether an arbitrary key is stored in the bucket."""
        if not filename:
            return False
        return self.directory.head(filename) is not None

    # Flushing

    def flush_writes(self) -> None:
        """Upload every queued style, creating the bucket once if missing.

        Raises:
            BucketNotFoundError: If the bucket is still missing after
                being created
            S3OperationError: If an upload fails
        """
        for style, file in self.attachment.queued_for_write.items():
            key = self._path(style)
            logger.info(f"saving {key}")
            self._create(key, file)

        self.attachment.after_flush_writes()
        self.attachment.queued_for_write = {}

    def _create(self, key: str, file: IO[bytes]) -> None:
        retried = False
        while True:
            try:
                self.directory.create(
                    key=key,
                    body=file,
                    public=self.fog_public,
                    **self.fog_file,
                )
                return
            except BucketNotFoundError:
                if retried:
                    raise
                retried = True
                self.directory.save()

    def flush_deletes(self) -> None:
        """Delete every queued key."""
        for key in self.attachment.queued_for_delete:
            logger.info(f"deleting {key}")
            self.directory.destroy(key)
        self.attachment.queued_for_delete = []

    # Files and URLs

    def to_file(self, style: str | None = None) -> IO[bytes]:
        """Return the style's data as a file.

        A style still waiting to be uploaded is returned as queued;
        otherwise the object is downloaded into a named temporary file.
        """
        style = style or self.attachment.default_style
        queued = self.attachment.queued_for_write.get(style)
        if queued is not None:
            return queued

        key = self._path(style)
        body = self.directory.get(key)
        basename, extname = os.path.splitext(os.path.basename(key))
        file = tempfile.NamedTemporaryFile(prefix=basename, suffix=extname)
        file.write(body)
        file.seek(0)
        return file

    def public_url(self, style: str | None = None) -> str:
        """Public URL of a style, through ``fog_host`` when configured."""
        key = self._path(style)
        host = self.options.fog_host
        if host:
            if "%d" in host:
                host = host % shard_index(key)
            return f"{host}/{key}"
        return self.directory.public_url(key)

    def expiring_url(
        self,
        expires_in: int | None = None,
        style: str | None = None,
    ) -> str:
        """Time-limited URL for a style.

        Signed by CloudFront when ``cloudfront_host`` is set, otherwise
        presigned by S3.
        """
        return self._expiring_url(self._path(style), expires_in)

    def authenticated_url(
        self,
        style: str | None = None,
        expires_in: int | None = None,
    ) -> str:
        return self.expiring_url(expires_in, style)

    def filename_expiring_url(
        self,
        filename: str,
        expires_in: int | None = None,
    ) -> str:
        """Time-limited URL for an arbitrary key in the bucket."""
        return self._expiring_url(filename, expires_in)

    def _expiring_url(self, key: str, expires_in: int | None) -> str:
        if expires_in is None:
            expires_in = self.settings.default_ttl
        if self.options.cloudfront_host:
            expires_at = int(time.time()) + int(expires_in)
            return self.generate_cloudfront_url(
                f"https://{self.options.cloudfront_host}/{key}", expires_at
            )
        return self.directory.presigned_url(key, int(expires_in))

    def generate_cloudfront_url(self, resource: str, expires_at: int) -> str:
        """Sign ``resource`` with the configured CloudFront key pair."""
        from attachstore.storage.cloudfront import generate_cloudfront_url

        if not self.options.cloudfront_private_key or not self.options.cloudfront_access_key:
            raise ConfigurationError(
                missing_fields=[
                    name
                    for name in ("cloudfront_private_key", "cloudfront_access_key")
                    if not getattr(self.options, name)
                ]
            )
        return generate_cloudfront_url(
            resource,
            expires_at,
            self.options.cloudfront_private_key,
            self.options.cloudfront_access_key,
        )

"""Per-attachment storage options."""

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class StorageOptions:
    """Options for an attachment stored in S3.

    Attributes:
        path: Key template, e.g. ":class/:attachment/:id/:style/:filename".
            May contain ":url", which is replaced by ``url`` at setup.
        url: URL template; replaced by ":fog_public_url" at setup
        fog_credentials: Credential mapping, YAML path, or open YAML file
        fog_directory: Bucket name
        fog_public: Upload objects with a public-read ACL
        fog_host: Host serving the bucket, optionally with a "%d" shard slot
            (e.g. "https://assets%d.example.com")
        fog_file: Extra ``put_object`` parameters (e.g. {"CacheControl": ...})
        cloudfront_host: CloudFront distribution host for signed URLs
        cloudfront_private_key: RSA private key for the CloudFront key pair
        cloudfront_access_key: CloudFront key pair ID
        styles: Style names the attachment is stored under
        default_style: Style used when none is given
    """

    path: str = ":class/:attachment/:id/:style/:filename"
    url: str = "/system/:class/:attachment/:id/:style/:filename"
    fog_credentials: Any = None
    fog_directory: str | None = None
    fog_public: bool = True
    fog_host: str | None = None
    fog_file: Mapping[str, Any] = field(default_factory=dict)
    cloudfront_host: str | None = None
    cloudfront_private_key: Any = None
    cloudfront_access_key: str | None = None
    styles: tuple[str, ...] = ("original",)
    default_style: str = "original"

"""CloudFront signed URLs with a canned policy.

The policy, signature encoding and query layout follow CloudFront's
canned-policy format::

    {"Statement":[{"Resource":"<url>","Condition":{"DateLessThan":{"AWS:EpochTime":<expiry>}}}]}

signed with RSA/SHA-1, base64 encoded, then made URL-safe with
``+`` -> ``-``, ``=`` -> ``_`` and ``/`` -> ``~``. The resource is placed
in the policy verbatim, so non-ASCII keys are signed as UTF-8.
"""

import base64
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CANNED_POLICY = (
    '{{"Statement":[{{"Resource":"{resource}",'
    '"Condition":{{"DateLessThan":{{"AWS:EpochTime":{expires}}}}}}}]}}'
)


@dataclass(frozen=True)
class SignedGrant:
    """Expiry and URL-safe signature for one resource.

    Attributes:
        expires: Expiry as epoch seconds
        signature: URL-safe base64 signature of the canned policy
    """

    expires: int
    signature: str


def url_safe_b64encode(data: bytes) -> str:
    """Base64 encode ``data`` using CloudFront's URL-safe alphabet."""
    encoded = base64.b64encode(data).decode("ascii").replace("\n", "")
    return encoded.replace("+", "-").replace("=", "_").replace("/", "~")


def load_private_key(private_key: Any) -> Any:
    """Return an RSA private key object.

    Args:
        private_key: A ``cryptography`` private key, PEM text or bytes, or
            a path to a PEM file

    Returns:
        A private key object with a ``sign`` method
    """
    if hasattr(private_key, "sign"):
        return private_key

    from cryptography.hazmat.primitives import serialization

    if isinstance(private_key, os.PathLike):
        private_key = Path(private_key).read_bytes()
    if isinstance(private_key, str):
        private_key = private_key.encode("utf-8")
    return serialization.load_pem_private_key(private_key, password=None)


class CloudFrontURLSigner:
    """Signs resource URLs for a CloudFront key pair.

    Example:
        signer = CloudFrontURLSigner(pem_text, "APKAEXAMPLE")
        url = signer.generate_url("https://cdn.example.com/a.jpg", 1700000000)
    """

    def __init__(self, private_key: Any, key_pair_id: str):
        """Initialize the signer.

        Args:
            private_key: RSA private key (object, PEM, or PEM path)
            key_pair_id: CloudFront key pair ID sent as ``Key-Pair-Id``
        """
        self.key_pair_id = key_pair_id
        self._private_key = load_private_key(private_key)

    def _rsa_sign(self, message: bytes) -> bytes:
        from cryptography.hazmat.primitives import hashes
        from cryptography.hazmat.primitives.asymmetric import padding

        return self._private_key.sign(message, padding.PKCS1v15(), hashes.SHA1())

    def policy(self, resource: str, expires_at: int) -> str:
        """Build the canned policy statement for a resource."""
        return CANNED_POLICY.format(resource=resource, expires=int(expires_at))

    def sign(self, resource: str, expires_at: int) -> SignedGrant:
        """Sign the canned policy for ``resource`` expiring at ``expires_at``."""
        policy = self.policy(resource, expires_at).encode("utf-8")
        return SignedGrant(
            expires=int(expires_at),
            signature=url_safe_b64encode(self._rsa_sign(policy)),
        )

    def generate_url(self, resource: str, expires_at: int) -> str:
        """Return ``resource`` with Expires, Signature and Key-Pair-Id appended."""
        grant = self.sign(resource, expires_at)
        return (
            f"{resource}?Expires={grant.expires}"
            f"&Signature={grant.signature}"
            f"&Key-Pair-Id={self.key_pair_id}"
        )


def generate_cloudfront_url(
    resource: str,
    expires_at: int,
    private_key: Any,
    key_pair_id: str,
) -> str:
    """Sign ``resource`` for the given key pair.

    Args:
        resource: Full https URL of the CDN resource
        expires_at: Expiry as epoch seconds
        private_key: RSA private key (object, PEM, or PEM path)
        key_pair_id: CloudFront key pair ID

    Returns:
        The signed URL
    """
    return CloudFrontURLSigner(private_key, key_pair_id).generate_url(
        resource, expires_at
    )

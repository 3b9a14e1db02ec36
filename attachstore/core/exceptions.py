"""Custom exceptions for attachstore.

Every error raised by the storage adapter derives from ``AttachStoreError``
and may carry a hint that tells the developer how to fix the problem.
"""


class AttachStoreError(Exception):
    """Base exception for all attachstore errors.

    All attachstore exceptions inherit from this class, making it easy
    to catch all library-specific errors.
    """

    def __init__(self, message: str, hint: str | None = None):
        """Initialize the exception.

        Args:
            message: The error message
            hint: Optional hint for resolving the error
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigurationError(AttachStoreError):
    """Raised when storage options or credentials are invalid."""

    def __init__(
        self,
        message: str | None = None,
        missing_fields: list[str] | None = None,
    ):
        """Initialize the configuration error.

        Args:
            message: Custom error message
            missing_fields: List of missing configuration fields
        """
        self.missing_fields = missing_fields or []

        if missing_fields:
            fields_str = ", ".join(missing_fields)
            message = f"Missing required storage option: {fields_str}"
            hint = "Pass these options when declaring the attachment."
        else:
            hint = (
                "fog_credentials must be a mapping, a path to a YAML file, "
                "or an open YAML file."
            )

        super().__init__(message or "Invalid storage configuration", hint)


class MissingDependencyError(AttachStoreError, ImportError):
    """Raised when a library the adapter needs cannot be imported."""

    def __init__(self, package: str, original_error: Exception | None = None):
        """Initialize the missing dependency error.

        Args:
            package: Distribution name that provides the missing module
            original_error: The ImportError that triggered this error
        """
        self.package = package
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(
            f"Required library '{package}' is not available{detail}",
            f"You may need to install it: pip install {package}",
        )


class S3ConnectionError(AttachStoreError):
    """Raised when the S3 client cannot be created from fog_credentials."""

    def __init__(
        self,
        message: str = "Failed to create S3 client",
        original_error: Exception | None = None,
        endpoint: str | None = None,
    ):
        """Initialize the connection error.

        Args:
            message: The error message
            original_error: The original exception that caused this error
            endpoint: The S3 endpoint URL being connected to
        """
        self.original_error = original_error
        self.endpoint = endpoint

        if endpoint:
            hint = f"Check the endpoint '{endpoint}' in fog_credentials."
        else:
            hint = "Check the region and keys in fog_credentials."

        super().__init__(message, hint)


class BucketNotFoundError(AttachStoreError):
    """Raised when the configured bucket doesn't exist.

    During a write this is recovered from once by creating the bucket;
    a second occurrence for the same write is fatal.
    """

    def __init__(self, bucket_name: str, original_error: Exception | None = None):
        """Initialize the bucket not found error.

        Args:
            bucket_name: The bucket that was not found
            original_error: The provider error that reported it
        """
        self.bucket_name = bucket_name
        self.original_error = original_error
        super().__init__(
            f"Bucket '{bucket_name}' not found",
            f"Create the bucket with: aws s3 mb s3://{bucket_name}\n"
            "Or check the fog_directory option.",
        )


class S3OperationError(AttachStoreError):
    """Raised when an S3 operation fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        key: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the operation error.

        Args:
            message: The error message
            operation: The S3 operation that failed (e.g., 'put_object')
            key: The S3 key involved in the operation
            original_error: The original exception
        """
        self.operation = operation
        self.key = key
        self.original_error = original_error

        hint = None
        if "NoSuchKey" in message:
            hint = f"The object at key '{key}' does not exist."
        elif "AccessDenied" in message:
            hint = "Check your IAM permissions for this operation."

        super().__init__(message, hint)

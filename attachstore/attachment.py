"""File attachments backed by object storage."""

import logging
from typing import IO, Any, Type

from attachstore.interpolations import interpolate
from attachstore.storage.object_storage import ObjectStorage
from attachstore.storage.options import StorageOptions

logger = logging.getLogger(__name__)


class Attachment:
    """A file attached to a model instance under a name.

    Assigning a file queues it for upload under every style; replacing or
    destroying it queues the old keys for deletion. Nothing reaches the
    provider until ``save()`` or ``destroy()`` flushes the queues.

    Example:
        attachment = Attachment("avatar", user, StorageOptions(
            fog_credentials={"aws_access_key_id": "...", "aws_secret_access_key": "..."},
            fog_directory="my-bucket",
        ))
        attachment.assign(open("me.png", "rb"), "me.png")
        attachment.save()
        attachment.url()  # https://my-bucket.s3.amazonaws.com/users/avatars/1/original/me.png
    """

    def __init__(
        self,
        name: str,
        instance: Any,
        options: StorageOptions | None = None,
        original_filename: str | None = None,
        storage_class: Type[ObjectStorage] = ObjectStorage,
    ):
        """Initialize the attachment.

        Args:
            name: Attachment name on the model (e.g. "avatar")
            instance: The model instance the file belongs to
            options: Storage options
            original_filename: Name of an already stored file, if any
            storage_class: Storage adapter class
        """
        self.name = name
        self.instance = instance
        self.options = options or StorageOptions()
        self.original_filename = original_filename
        self.queued_for_write: dict[str, IO[bytes]] = {}
        self.queued_for_delete: list[str] = []
        # Storage setup may rewrite self.options (path/url templates)
        self.storage = storage_class(self)

    @property
    def default_style(self) -> str:
        return self.options.default_style

    @property
    def styles(self) -> tuple[str, ...]:
        return self.options.styles

    def path(self, style: str | None = None) -> str:
        """Storage key for a style."""
        return interpolate(self.options.path, self, style or self.default_style)

    def url(self, style: str | None = None) -> str:
        """Public URL for a style."""
        return interpolate(self.options.url, self, style or self.default_style)

    def assign(self, file: IO[bytes], filename: str) -> None:
        """Queue ``file`` for upload under every style.

        The attachment takes ownership of ``file`` and closes it after
        the next successful ``save()``.
        """
        if self.original_filename:
            self._queue_all_for_delete()
        self.original_filename = filename
        self.queued_for_write = {style: file for style in self.styles}

    def save(self) -> None:
        """Flush queued deletions, then queued uploads."""
        self.storage.flush_deletes()
        self.storage.flush_writes()

    def destroy(self) -> None:
        """Delete every style of the stored file."""
        self._queue_all_for_delete()
        self.original_filename = None
        self.queued_for_write = {}
        self.storage.flush_deletes()

    def after_flush_writes(self) -> None:
        """Close the files that were just uploaded."""
        for file in self.queued_for_write.values():
            close = getattr(file, "close", None)
            if close is not None and not getattr(file, "closed", False):
                close()

    def _queue_all_for_delete(self) -> None:
        if not self.original_filename:
            return
        for style in self.styles:
            key = self.path(style)
            if key not in self.queued_for_delete:
                self.queued_for_delete.append(key)

    def __repr__(self) -> str:
        return f"Attachment(name={self.name!r}, original_filename={self.original_filename!r})"

"""Named tokens used in attachment path and URL templates.

A template such as ``":class/:attachment/:id/:style/:filename"`` is
rendered by replacing each ``:token`` with the value returned by the
function registered for it. Unregistered tokens are left as they are.
"""

import os
import re
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from attachstore.attachment import Attachment

Interpolation = Callable[["Attachment", str], str]

_TOKEN = re.compile(r":([a-z_]+)")

_registry: dict[str, Interpolation] = {}


def interpolates(name: str, func: Interpolation) -> None:
    """Register ``func`` as the value of ``:name`` in templates."""
    _registry[name] = func


def is_registered(name: str) -> bool:
    return name in _registry


def unregister(name: str) -> None:
    _registry.pop(name, None)


def interpolate(pattern: str, attachment: "Attachment", style: str) -> str:
    """Render ``pattern`` for an attachment and style."""

    def replace(match: re.Match) -> str:
        func = _registry.get(match.group(1))
        if func is None:
            return match.group(0)
        return str(func(attachment, style))

    return _TOKEN.sub(replace, pattern)


def _class_name(attachment: "Attachment", style: str) -> str:
    return f"{type(attachment.instance).__name__.lower()}s"


def _basename(attachment: "Attachment", style: str) -> str:
    return os.path.splitext(attachment.original_filename or "")[0]


def _extension(attachment: "Attachment", style: str) -> str:
    return os.path.splitext(attachment.original_filename or "")[1].lstrip(".")


interpolates("class", _class_name)
interpolates("attachment", lambda attachment, style: f"{attachment.name}s")
interpolates("id", lambda attachment, style: getattr(attachment.instance, "id", ""))
interpolates("style", lambda attachment, style: style)
interpolates("filename", lambda attachment, style: attachment.original_filename or "")
interpolates("basename", _basename)
interpolates("extension", _extension)

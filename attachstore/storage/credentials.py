"""Resolution of ``fog_credentials`` into a flat credential map.

Credentials may be given inline as a mapping, or as a YAML file (by path
or as an open file). Files are rendered as Jinja2 templates before being
parsed, so secrets can come from the environment::

    production:
      provider: AWS
      aws_access_key_id: "{{ env['AWS_ACCESS_KEY_ID'] }}"
      aws_secret_access_key: "{{ env['AWS_SECRET_ACCESS_KEY'] }}"
      region: eu-west-1
    development:
      provider: AWS
      endpoint: http://localhost:4566

A top-level section named after the current environment wins over the
document as a whole.
"""

import io
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from attachstore.core.exceptions import ConfigurationError

CredentialSource = Mapping[str, Any] | str | os.PathLike | io.IOBase


def _render(source: str) -> Any:
    import jinja2
    import yaml

    template = jinja2.Template(source, undefined=jinja2.StrictUndefined)
    return yaml.safe_load(template.render(env=os.environ))


def find_credentials(creds: Any) -> Mapping[str, Any]:
    """Load the raw credential document.

    Args:
        creds: A mapping, a path to a YAML file, or an open YAML file

    Returns:
        The top-level credential mapping

    Raises:
        ConfigurationError: If ``creds`` is not a mapping, path or file, or
            the file does not contain a mapping
    """
    if isinstance(creds, Mapping):
        return creds

    if isinstance(creds, (str, os.PathLike)):
        document = _render(Path(creds).read_text(encoding="utf-8"))
    elif hasattr(creds, "read") and callable(creds.read):
        content = creds.read()
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        document = _render(content)
    else:
        raise ConfigurationError(
            f"Credentials are not a path, file, or mapping: {type(creds).__name__}"
        )

    if not isinstance(document, Mapping):
        raise ConfigurationError(
            f"Credentials file must contain a mapping, got {type(document).__name__}"
        )
    return document


def parse_credentials(
    creds: CredentialSource,
    environment: str | None = None,
) -> dict[str, Any]:
    """Resolve ``fog_credentials`` for the given deployment environment.

    Args:
        creds: A mapping, a path to a YAML file, or an open YAML file
        environment: Name of the environment section to prefer, if present

    Returns:
        A new dict with string keys
    """
    document = {str(key): value for key, value in find_credentials(creds).items()}

    if environment is not None:
        scoped = document.get(environment)
        if isinstance(scoped, Mapping):
            return {str(key): value for key, value in scoped.items()}
    return document

"""Identifier normalization.

Turns a fediverse handle (``@user@host`` or ``user@host``), an ``acct:`` URI or any
other absolute URI into a URL value.
"""

import re
from typing import Union

from yarl import URL

HANDLE_PATTERN = re.compile(
    r"^@?((?:[-A-Za-z0-9._~!$&'()*+,;=]|%[A-Fa-f0-9]{2})+)@([^@]+)$"
)


class MalformedIdentifierError(ValueError):
    """Raised when an identifier cannot be parsed as an absolute URI."""


def normalize_identifier(identifier: Union[str, URL]) -> URL:
    """Normalize an identifier to a URL.

    Handles are rewritten to ``acct:<user>@<host>``; the leading ``@`` is dropped
    and the host is kept verbatim.

    Args:
        identifier: Handle, acct: URI, other URI string, or URL

    Returns:
        Parsed URL

    Raises:
        MalformedIdentifierError: If the identifier is not an absolute URI
    """
    if isinstance(identifier, URL):
        return identifier

    match = HANDLE_PATTERN.match(identifier)
    if match is not None:
        identifier = f"acct:{match.group(1)}@{match.group(2)}"

    try:
        url = URL(identifier, encoded=True)
        # yarl validates the port lazily
        url.port
        str(url)
    except (ValueError, TypeError) as e:
        raise MalformedIdentifierError(f"Invalid identifier: {identifier!r}") from e

    if not url.scheme:
        raise MalformedIdentifierError(f"Invalid identifier: {identifier!r}")
    return url

"""
Object Lookup

This package resolves fediverse identifiers to ActivityStreams objects and traverses
collections.

Key Components:
- identifier.py: Handle and URI normalization
- object.py: Object lookup with WebFinger fallback
- traverse.py: Lazy collection traversal
- __main__.py: CLI interface for lookup

The lookup flow follows these steps:
1. Normalize the identifier (handles become acct: URIs)
2. For http(s) URIs, fetch the document directly
3. Otherwise, or if that fails, query WebFinger and fetch the first
   ActivityStreams "self" link that can be retrieved
4. Materialize the document as a typed object

"Not found", "fetch failed" and "malformed document" all result in None.
"""

from social.graze.fedi.lookup.identifier import (
    MalformedIdentifierError,
    normalize_identifier,
)
from social.graze.fedi.lookup.object import lookup_object
from social.graze.fedi.lookup.traverse import traverse_collection

__all__ = [
    "MalformedIdentifierError",
    "lookup_object",
    "normalize_identifier",
    "traverse_collection",
]

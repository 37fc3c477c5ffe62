"""
Common testing utilities for lookup and traversal tests.

Provides an in-memory document loader and builders for ActivityStreams documents
so tests can describe remote servers as plain dictionaries.
"""

from typing import Any, Dict, List, Optional

from social.graze.fedi.activitypub.docloader import FetchError, RemoteDocument

AS_CONTEXT = "https://www.w3.org/ns/activitystreams"


class StaticDocumentLoader:
    """Document loader serving documents from a dictionary keyed by URL.

    Unknown URLs raise FetchError like a 404 would; exception values are raised
    as-is. Every requested URL is recorded in order.
    """

    def __init__(self, documents: Optional[Dict[str, Any]] = None) -> None:
        self.documents: Dict[str, Any] = dict(documents or {})
        self.requested: List[str] = []

    async def __call__(self, url: str) -> RemoteDocument:
        self.requested.append(url)
        if url not in self.documents:
            raise FetchError(url, "Not found", status=404)
        document = self.documents[url]
        if isinstance(document, BaseException):
            raise document
        return RemoteDocument(document_url=url, document=document)


def note_document(note_id: str, content: str = "Hello") -> Dict[str, Any]:
    """Build a Note document."""
    return {
        "@context": AS_CONTEXT,
        "id": note_id,
        "type": "Note",
        "content": content,
    }


def person_document(actor_id: str, username: str = "alice") -> Dict[str, Any]:
    """Build a Person document."""
    return {
        "@context": [AS_CONTEXT, "https://w3id.org/security/v1"],
        "id": actor_id,
        "type": "Person",
        "preferredUsername": username,
        "inbox": f"{actor_id}/inbox",
        "outbox": f"{actor_id}/outbox",
        "followers": f"{actor_id}/followers",
    }


def page_document(
    page_id: str,
    items: List[Any],
    next_id: Optional[str] = None,
    part_of: Optional[str] = None,
) -> Dict[str, Any]:
    """Build an OrderedCollectionPage document."""
    document: Dict[str, Any] = {
        "@context": AS_CONTEXT,
        "id": page_id,
        "type": "OrderedCollectionPage",
        "orderedItems": items,
    }
    if next_id is not None:
        document["next"] = next_id
    if part_of is not None:
        document["partOf"] = part_of
    return document


def jrd_document(subject: str, links: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Build a WebFinger JRD document."""
    return {"subject": subject, "links": links}

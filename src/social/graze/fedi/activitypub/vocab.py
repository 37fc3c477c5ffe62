"""ActivityStreams 2.0 vocabulary.

Typed models for the object graph exchanged between ActivityPub servers, and
``from_json_ld`` which materializes a fetched document into the matching model.
Documents are read in their compacted form; properties the models do not name are
retained as extra fields.
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from social.graze.fedi.activitypub.docloader import (
    DocumentLoader,
    fetch_document_loader,
)

logger = logging.getLogger(__name__)

PRELOADED_CONTEXTS = frozenset(
    [
        "https://www.w3.org/ns/activitystreams",
        "http://www.w3.org/ns/activitystreams",
        "https://w3id.org/security/v1",
        "https://w3id.org/security/data-integrity/v1",
        "https://w3id.org/security/multikey/v1",
        "https://w3id.org/identity/v1",
        "https://www.w3.org/ns/did/v1",
    ]
)

LINK_TYPES = frozenset(["Link", "Mention", "Hashtag"])

Reference = Union[str, Dict[str, Any]]


class MalformedDocumentError(ValueError):
    """Raised when a document does not have the shape of an ActivityStreams object."""


class ActivityStreamsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class Link(ActivityStreamsModel):
    """A reference to a resource, carrying only the link and its metadata."""

    id: Optional[str] = None
    type: Optional[str] = "Link"
    href: Optional[str] = None
    rel: Optional[Union[str, List[str]]] = None
    media_type: Optional[str] = None
    name: Optional[str] = None
    hreflang: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None


class Object(ActivityStreamsModel):
    """An ActivityStreams object of any type without a more specific model."""

    id: Optional[str] = None
    type: Optional[Union[str, List[str]]] = None
    name: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[str] = None
    url: Optional[Any] = None
    attributed_to: Optional[Any] = None
    published: Optional[str] = None
    updated: Optional[str] = None
    to: Optional[Any] = None
    cc: Optional[Any] = None


class Actor(Object):
    """An actor: Person, Service, Application, Group or Organization."""

    preferred_username: Optional[str] = None
    inbox: Optional[Reference] = None
    outbox: Optional[Reference] = None
    followers: Optional[Reference] = None
    following: Optional[Reference] = None
    liked: Optional[Reference] = None
    endpoints: Optional[Dict[str, Any]] = None
    icon: Optional[Any] = None
    image: Optional[Any] = None


class Collection(Object):
    """A collection of objects, either inline or split into pages.

    A collection with a ``first`` page is paginated; its items are reached through
    ``get_first`` and the pages' ``get_next``. Otherwise its items are embedded.
    """

    total_items: Optional[int] = None
    current: Optional[Reference] = None
    first: Optional[Reference] = None
    last: Optional[Reference] = None
    items: Optional[List[Any]] = None
    ordered_items: Optional[List[Any]] = None

    @field_validator("items", "ordered_items", mode="before")
    @classmethod
    def wrap_single_item(cls, v):
        if v is None or isinstance(v, list):
            return v
        return [v]

    @property
    def first_id(self) -> Optional[str]:
        """URI of the first page, None for collections that are not paginated."""
        return reference_id(self.first)

    async def get_items(
        self,
        document_loader: Optional[DocumentLoader] = None,
        context_loader: Optional[DocumentLoader] = None,
    ) -> AsyncIterator[Union[Object, Link]]:
        """Yield the items embedded in this collection or page, in stored order.

        Embedded objects are materialized; bare URIs and links are yielded as Link
        without being fetched.
        """
        entries = self.ordered_items if self.ordered_items is not None else self.items
        for entry in entries or []:
            yield await materialize_item(
                entry, document_loader=document_loader, context_loader=context_loader
            )

    async def get_first(
        self,
        document_loader: Optional[DocumentLoader] = None,
        context_loader: Optional[DocumentLoader] = None,
    ) -> Optional["CollectionPage"]:
        return await load_page(
            self.first, document_loader=document_loader, context_loader=context_loader
        )


class OrderedCollection(Collection):
    pass


class CollectionPage(Collection):
    """One page of a paginated collection."""

    part_of: Optional[Reference] = None
    next: Optional[Reference] = None
    prev: Optional[Reference] = None

    @property
    def next_id(self) -> Optional[str]:
        return reference_id(self.next)

    async def get_next(
        self,
        document_loader: Optional[DocumentLoader] = None,
        context_loader: Optional[DocumentLoader] = None,
    ) -> Optional["CollectionPage"]:
        """Fetch the page following this one, None on the last page."""
        return await load_page(
            self.next, document_loader=document_loader, context_loader=context_loader
        )


class OrderedCollectionPage(CollectionPage):
    start_index: Optional[int] = None


ACTOR_TYPES = ["Person", "Service", "Application", "Group", "Organization"]

MODEL_TYPES: Dict[str, Type[Object]] = {
    **{name: Actor for name in ACTOR_TYPES},
    "Collection": Collection,
    "OrderedCollection": OrderedCollection,
    "CollectionPage": CollectionPage,
    "OrderedCollectionPage": OrderedCollectionPage,
}


def type_names(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []


def is_link_type(value: Any) -> bool:
    return any(name in LINK_TYPES for name in type_names(value))


def model_for(value: Any) -> Type[Object]:
    for name in type_names(value):
        model = MODEL_TYPES.get(name)
        if model is not None:
            return model
    return Object


def reference_id(value: Optional[Reference]) -> Optional[str]:
    """Return the URI a reference points to.

    A reference is either a URI string or an embedded object or link.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        key = "href" if is_link_type(value.get("type")) else "id"
        ref = value.get(key)
        if isinstance(ref, str):
            return ref
    return None


async def check_context(
    context: Any, context_loader: Optional[DocumentLoader] = None
) -> None:
    """Ensure a single remote @context resolves to a JSON-LD context document.

    Well-known contexts, inline contexts and context arrays are accepted as-is.

    Raises:
        MalformedDocumentError: If the context is not a URL or not a context document
    """
    if not isinstance(context, str) or context in PRELOADED_CONTEXTS:
        return
    if not context.startswith(("http://", "https://")):
        raise MalformedDocumentError(f"Unsupported @context: {context!r}")

    loader = context_loader or fetch_document_loader
    remote = await loader(context)
    if not isinstance(remote.document, dict) or "@context" not in remote.document:
        raise MalformedDocumentError(f"Not a JSON-LD context document: {context}")


async def from_json_ld(
    document: Any,
    document_loader: Optional[DocumentLoader] = None,
    context_loader: Optional[DocumentLoader] = None,
    context_url: Optional[str] = None,
) -> Object:
    """Materialize a compacted JSON-LD document into an ActivityStreams model.

    Args:
        document: Parsed JSON document
        document_loader: Loader used when the object's references are followed
        context_loader: Loader used for remote @context documents
        context_url: Context advertised in the response Link header, used when
            the document has no @context of its own

    Returns:
        The model matching the document's type, Object for unknown types

    Raises:
        MalformedDocumentError: If the document is not a valid ActivityStreams object
    """
    if not isinstance(document, dict):
        raise MalformedDocumentError(
            f"Expected a JSON object, got {type(document).__name__}"
        )

    await check_context(document.get("@context", context_url), context_loader)

    if is_link_type(document.get("type")):
        raise MalformedDocumentError("Expected an object, got a link")

    model = model_for(document.get("type"))
    try:
        return model.model_validate(document)
    except ValidationError as e:
        raise MalformedDocumentError(str(e)) from e


async def materialize_item(
    entry: Any,
    document_loader: Optional[DocumentLoader] = None,
    context_loader: Optional[DocumentLoader] = None,
) -> Union[Object, Link]:
    if isinstance(entry, str):
        return Link(href=entry)
    if isinstance(entry, dict) and is_link_type(entry.get("type")):
        try:
            return Link.model_validate(entry)
        except ValidationError as e:
            raise MalformedDocumentError(str(e)) from e
    return await from_json_ld(
        entry, document_loader=document_loader, context_loader=context_loader
    )


async def load_page(
    reference: Optional[Reference],
    document_loader: Optional[DocumentLoader] = None,
    context_loader: Optional[DocumentLoader] = None,
) -> Optional[CollectionPage]:
    """Materialize a collection page from an embedded page or fetch it by URI.

    Raises:
        MalformedDocumentError: If the referenced document is not a collection page
    """
    if reference is None:
        return None

    document: Any = reference
    context_url: Optional[str] = None
    if isinstance(reference, str) or is_link_type(reference.get("type")):
        url = reference_id(reference)
        if url is None:
            raise MalformedDocumentError("Page link has no href")
        loader = document_loader or fetch_document_loader
        logger.debug("Fetching collection page %s", url)
        remote = await loader(url)
        document = remote.document
        context_url = remote.context_url

    page = await from_json_ld(
        document,
        document_loader=document_loader,
        context_loader=context_loader,
        context_url=context_url,
    )
    if not isinstance(page, CollectionPage):
        raise MalformedDocumentError(f"Expected a collection page, got {page.type}")
    return page

"""ActivityStreams object lookup.

Resolves a URI, an acct: URI or a fediverse handle to an ActivityStreams object.
HTTP(S) identifiers are fetched directly first; when that is not possible or fails,
the identifier is looked up with WebFinger and the first usable ``self`` link is
fetched instead.
"""

import logging
import re
from typing import Awaitable, Callable, List, Optional, Union

from aiohttp import ClientSession
import sentry_sdk
from yarl import URL

from social.graze.fedi.activitypub.docloader import (
    DocumentLoader,
    RemoteDocument,
    fetch_document_loader,
)
from social.graze.fedi.activitypub.vocab import (
    MalformedDocumentError,
    Object,
    from_json_ld,
)
from social.graze.fedi.activitypub.webfinger import JrdLink, lookup_webfinger
from social.graze.fedi.config import ACTIVITY_JSON
from social.graze.fedi.lookup.identifier import normalize_identifier

logger = logging.getLogger(__name__)

# Matched anywhere in the link type, without parsing media type parameters.
ACTIVITYSTREAMS_PROFILE_PATTERN = re.compile(
    r'application/ld\+json;\s*profile="https://www.w3.org/ns/activitystreams"'
)

DocumentCandidate = Callable[[], Awaitable[Optional[RemoteDocument]]]


def is_object_link(link: JrdLink) -> bool:
    """Check if a WebFinger link points to an ActivityStreams object document.

    Args:
        link: Link entry from a JRD

    Returns:
        True if the link is a self link with an ActivityStreams media type
    """
    if link.rel != "self" or link.type is None:
        return False
    return (
        link.type == ACTIVITY_JSON
        or ACTIVITYSTREAMS_PROFILE_PATTERN.search(link.type) is not None
    )


async def try_fetch(
    document_loader: DocumentLoader, url: str
) -> Optional[RemoteDocument]:
    """Fetch a document, returning None instead of raising on failure."""
    try:
        return await document_loader(url)
    except Exception as e:
        logger.debug("Failed to fetch remote document %s: %s", url, e)
        sentry_sdk.capture_exception(e)
        return None


async def fetch_direct(
    url: URL, document_loader: DocumentLoader
) -> Optional[RemoteDocument]:
    """Fetch an HTTP(S) identifier as a document.

    Args:
        url: Normalized identifier
        document_loader: Loader for remote documents

    Returns:
        RemoteDocument if fetched, None for other schemes or on failure
    """
    if url.scheme not in ("http", "https"):
        return None
    return await try_fetch(document_loader, str(url))


async def fetch_via_webfinger(
    url: URL,
    document_loader: DocumentLoader,
    session: Optional[ClientSession] = None,
) -> Optional[RemoteDocument]:
    """Discover an identifier's object document with WebFinger and fetch it.

    Links are tried in the order the JRD lists them; the first one that passes
    is_object_link and can be fetched wins.

    Args:
        url: Normalized identifier
        document_loader: Loader for remote documents
        session: HTTP client session for the WebFinger query

    Returns:
        RemoteDocument if a candidate link was fetched, None otherwise
    """
    jrd = await lookup_webfinger(url, session=session)
    if jrd is None or not jrd.links:
        logger.debug("No WebFinger links for %s", url)
        return None

    for link in jrd.links:
        if not is_object_link(link) or link.href is None:
            continue
        remote_document = await try_fetch(document_loader, link.href)
        if remote_document is not None:
            return remote_document
    return None


async def lookup_object(
    identifier: Union[str, URL],
    document_loader: Optional[DocumentLoader] = None,
    context_loader: Optional[DocumentLoader] = None,
    session: Optional[ClientSession] = None,
) -> Optional[Object]:
    """Look up an ActivityStreams object by URI or fediverse handle.

    Accepts ``https://`` URIs, ``acct:`` URIs and handles with or without the
    leading ``@`` (``@user@example.com``, ``user@example.com``).

    Args:
        identifier: URI or handle to look up
        document_loader: Loader for remote documents, fetch_document_loader by default
        context_loader: Loader for remote JSON-LD contexts
        session: HTTP client session for WebFinger queries, a temporary one if omitted

    Returns:
        The object, None if it could not be found, fetched or parsed

    Raises:
        MalformedIdentifierError: If the identifier is not a valid URI or handle
    """
    if document_loader is None:
        document_loader = fetch_document_loader

    url = normalize_identifier(identifier)

    candidates: List[DocumentCandidate] = [
        lambda: fetch_direct(url, document_loader),
        lambda: fetch_via_webfinger(url, document_loader, session=session),
    ]

    remote_document: Optional[RemoteDocument] = None
    for candidate in candidates:
        remote_document = await candidate()
        if remote_document is not None:
            break

    if remote_document is None:
        return None

    try:
        return await from_json_ld(
            remote_document.document,
            document_loader=document_loader,
            context_loader=context_loader,
            context_url=remote_document.context_url,
        )
    except MalformedDocumentError as e:
        logger.debug(
            "Failed to parse document %s: %s", remote_document.document_url, e
        )
        return None

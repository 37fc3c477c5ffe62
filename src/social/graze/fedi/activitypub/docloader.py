"""Remote JSON-LD document loading.

Fetches ActivityStreams documents over HTTP(S) and returns them together with the
URL they were retrieved from. Loaders are plain async callables so that callers can
substitute their own transport (caching, signed fetches, test doubles).
"""

from dataclasses import dataclass
import functools
import logging
from typing import Any, Awaitable, Callable, Optional

import aiohttp
from aiohttp import ClientSession, hdrs

from social.graze.fedi.config import ACCEPT_HEADER, Settings

logger = logging.getLogger(__name__)

JSON_LD_CONTEXT_REL = "http://www.w3.org/ns/json-ld#context"


@dataclass
class RemoteDocument:
    """A parsed remote document and the URL it was retrieved from.

    context_url is the JSON-LD context advertised in the response Link header;
    from_json_ld checks it for documents that carry no @context of their own.
    """

    document_url: str
    document: Any
    context_url: Optional[str] = None


DocumentLoader = Callable[[str], Awaitable[RemoteDocument]]


class FetchError(Exception):
    """Raised when a remote document cannot be retrieved or parsed."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url
        self.status = status


def context_url_from_links(response: aiohttp.ClientResponse) -> Optional[str]:
    """Return the JSON-LD context URL advertised in the response Link header.

    Args:
        response: HTTP response to inspect

    Returns:
        Context URL if a json-ld#context link is present, None otherwise
    """
    try:
        links = response.links
    except Exception:
        logger.debug("Ignoring malformed Link header from %s", response.url)
        return None
    for link in links.values():
        if link.get("rel") == JSON_LD_CONTEXT_REL:
            return str(link.get("url"))
    return None


async def fetch_document(
    session: ClientSession, url: str, settings: Optional[Settings] = None
) -> RemoteDocument:
    """Fetch a remote ActivityStreams document.

    Args:
        session: HTTP client session
        url: Document URL
        settings: Settings providing the User-Agent and timeout

    Returns:
        RemoteDocument with the parsed JSON body

    Raises:
        FetchError: If the response is not successful or the body is not JSON
        aiohttp.ClientError: On connection level failures
    """
    if settings is None:
        settings = Settings()

    headers = {
        hdrs.ACCEPT: ACCEPT_HEADER,
        hdrs.USER_AGENT: settings.user_agent,
    }
    timeout = aiohttp.ClientTimeout(total=settings.http_timeout)

    async with session.get(url, headers=headers, timeout=timeout) as resp:
        if resp.status < 200 or resp.status >= 300:
            raise FetchError(url, "Unexpected response status", status=resp.status)
        try:
            body = await resp.json(content_type=None)
        except ValueError as e:
            raise FetchError(url, "Response is not JSON", status=resp.status) from e
        if body is None:
            raise FetchError(url, "Response body is empty", status=resp.status)
        return RemoteDocument(
            document_url=str(resp.url),
            document=body,
            context_url=context_url_from_links(resp),
        )


def get_document_loader(
    session: ClientSession, settings: Optional[Settings] = None
) -> DocumentLoader:
    """Bind a document loader to an existing HTTP client session."""
    return functools.partial(fetch_document, session, settings=settings)


async def fetch_document_loader(url: str) -> RemoteDocument:
    """Default document loader, using a short-lived HTTP client session."""
    async with aiohttp.ClientSession() as session:
        return await fetch_document(session, url)

"""WebFinger (RFC 7033) discovery.

Queries {scheme}://{host}/.well-known/webfinger for a resource (an acct: URI or an
http(s) URI) and returns the JSON Resource Descriptor describing it.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

import aiohttp
from aiohttp import ClientSession, hdrs
from pydantic import BaseModel, ConfigDict, ValidationError
import sentry_sdk
from yarl import URL

from social.graze.fedi.config import Settings

logger = logging.getLogger(__name__)

JRD_ACCEPT = "application/jrd+json, application/json"


class JrdLink(BaseModel):
    """A link entry of a JSON Resource Descriptor."""

    model_config = ConfigDict(extra="allow")

    rel: str
    type: Optional[str] = None
    href: Optional[str] = None
    template: Optional[str] = None
    titles: Optional[Dict[str, str]] = None
    properties: Optional[Dict[str, Optional[str]]] = None


class ResourceDescriptor(BaseModel):
    """A JSON Resource Descriptor (JRD) returned by a WebFinger query."""

    model_config = ConfigDict(extra="allow")

    subject: Optional[str] = None
    aliases: List[str] = []
    properties: Dict[str, Optional[str]] = {}
    links: Optional[List[JrdLink]] = None


def webfinger_url(resource: URL) -> Optional[str]:
    """Build the WebFinger query URL for a resource.

    Args:
        resource: acct: or http(s) URI to look up

    Returns:
        WebFinger endpoint URL, None if the resource has no discoverable host.
        acct: resources are queried over https, http(s) resources over their own scheme.
    """
    scheme = "https"
    if resource.scheme == "acct":
        _, sep, host = resource.path.rpartition("@")
        if not sep or not host:
            return None
    elif resource.scheme in ("http", "https"):
        if resource.host is None:
            return None
        scheme = resource.scheme
        host = resource.host
        if not resource.is_default_port() and resource.port is not None:
            host = f"{host}:{resource.port}"
    else:
        return None

    query = urlencode({"resource": str(resource)})
    return f"{scheme}://{host}/.well-known/webfinger?{query}"


async def query_webfinger(
    session: ClientSession, url: str, settings: Settings
) -> Optional[Any]:
    headers = {hdrs.ACCEPT: JRD_ACCEPT, hdrs.USER_AGENT: settings.user_agent}
    timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
    try:
        async with session.get(url, headers=headers, timeout=timeout) as resp:
            if resp.status != 200:
                logger.debug("WebFinger query %s returned %s", url, resp.status)
                return None
            return await resp.json(content_type=None)
    except Exception as e:
        logger.debug("Failed to query WebFinger endpoint %s: %s", url, e)
        sentry_sdk.capture_exception(e)
        return None


async def lookup_webfinger(
    resource: Union[str, URL],
    session: Optional[ClientSession] = None,
    settings: Optional[Settings] = None,
) -> Optional[ResourceDescriptor]:
    """Look up a resource with WebFinger.

    Args:
        resource: acct: or http(s) URI to look up
        session: HTTP client session, a temporary one is used if omitted
        settings: Settings providing the User-Agent and timeout

    Returns:
        ResourceDescriptor if found, None if the lookup fails for any reason
    """
    if isinstance(resource, str):
        resource = URL(resource, encoded=True)
    if settings is None:
        settings = Settings()

    url = webfinger_url(resource)
    if url is None:
        logger.debug("No WebFinger host for resource %s", resource)
        return None

    if session is None:
        async with aiohttp.ClientSession() as temporary_session:
            body = await query_webfinger(temporary_session, url, settings)
    else:
        body = await query_webfinger(session, url, settings)

    if not isinstance(body, dict):
        return None

    try:
        return ResourceDescriptor.model_validate(body)
    except ValidationError as e:
        logger.debug("Invalid JRD from %s: %s", url, e)
        return None

"""
Configuration Module for Fediverse Lookup

This module defines the settings used by the document loader, the WebFinger client
and the command line entry point. Settings are loaded from environment variables
through Pydantic's BaseSettings, with defaults suitable for interactive use.

Key configuration areas include:
- HTTP client identification and timeouts
- Debug logging
- Error reporting
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Settings for remote object lookup.

    Environment variables are automatically mapped to settings fields. For example,
    the outgoing User-Agent header can be set with the USER_AGENT environment variable.
    """

    debug: bool = False
    """
    Enable request tracing for outgoing HTTP requests.
    Set with DEBUG=true environment variable.
    """

    user_agent: str = "graze-fedi/0.1.0 (+https://www.graze.social)"
    """
    User-Agent header sent with document and WebFinger requests.
    Set with USER_AGENT environment variable.
    """

    http_timeout: float = Field(default=10.0, gt=0)
    """
    Total timeout in seconds for a single outgoing HTTP request.
    Set with HTTP_TIMEOUT environment variable.
    Default: 10.0
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """


# Media types accepted for ActivityStreams documents
ACTIVITY_JSON: str = "application/activity+json"
"""The ActivityPub object media type."""

ACCEPT_HEADER: str = (
    'application/activity+json, application/ld+json; profile="https://www.w3.org/ns/activitystreams"'
)
"""Accept header sent when fetching remote ActivityStreams documents."""

"""
Unit tests for document loading in social.graze.fedi.activitypub.docloader

Tests cover request headers, status and body handling, JSON-LD context links,
and the default and session-bound loaders.
"""

import json

import pytest
from unittest.mock import AsyncMock, patch
from aiohttp import ClientResponse, ClientSession, hdrs
from yarl import URL

from social.graze.fedi.activitypub.docloader import (
    JSON_LD_CONTEXT_REL,
    FetchError,
    RemoteDocument,
    context_url_from_links,
    fetch_document,
    fetch_document_loader,
    get_document_loader,
)
from social.graze.fedi.config import ACCEPT_HEADER

NOTE_URL = "https://example.com/notes/1"


def mock_session_with(status: int = 200, body=None, links=None, url: str = NOTE_URL):
    mock_session = AsyncMock(spec=ClientSession)
    mock_response = AsyncMock(spec=ClientResponse)
    mock_response.status = status
    mock_response.url = URL(url)
    mock_response.links = links or {}
    mock_response.json.return_value = body
    mock_session.get.return_value.__aenter__.return_value = mock_response
    return mock_session, mock_response


class TestFetchDocument:
    """Test suite for fetch_document."""

    @pytest.mark.asyncio
    async def test_success(self, settings):
        body = {"id": NOTE_URL, "type": "Note"}
        mock_session, _ = mock_session_with(body=body)

        result = await fetch_document(mock_session, NOTE_URL, settings)

        assert result == RemoteDocument(document_url=NOTE_URL, document=body)
        mock_session.get.assert_called_once()
        args, kwargs = mock_session.get.call_args
        assert args == (NOTE_URL,)
        assert kwargs["headers"][hdrs.ACCEPT] == ACCEPT_HEADER
        assert kwargs["headers"][hdrs.USER_AGENT] == "graze-fedi-test/1.0"
        assert kwargs["timeout"].total == 5.0

    @pytest.mark.asyncio
    async def test_final_url_after_redirect(self, settings):
        final_url = "https://example.com/objects/abc"
        mock_session, _ = mock_session_with(body={"id": final_url}, url=final_url)

        result = await fetch_document(mock_session, NOTE_URL, settings)

        assert result.document_url == final_url

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 410, 500])
    async def test_unsuccessful_status(self, settings, status):
        mock_session, _ = mock_session_with(status=status)

        with pytest.raises(FetchError) as exc_info:
            await fetch_document(mock_session, NOTE_URL, settings)

        assert exc_info.value.status == status
        assert exc_info.value.url == NOTE_URL

    @pytest.mark.asyncio
    async def test_body_not_json(self, settings):
        mock_session, mock_response = mock_session_with()
        mock_response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(FetchError):
            await fetch_document(mock_session, NOTE_URL, settings)

    @pytest.mark.asyncio
    async def test_empty_body(self, settings):
        mock_session, _ = mock_session_with(body=None)

        with pytest.raises(FetchError):
            await fetch_document(mock_session, NOTE_URL, settings)

    @pytest.mark.asyncio
    async def test_context_link_header(self, settings):
        context_url = "https://example.com/context.jsonld"
        links = {
            JSON_LD_CONTEXT_REL: {"url": URL(context_url), "rel": JSON_LD_CONTEXT_REL}
        }
        mock_session, _ = mock_session_with(body={"id": NOTE_URL}, links=links)

        result = await fetch_document(mock_session, NOTE_URL, settings)

        assert result.context_url == context_url


class TestContextUrlFromLinks:
    """Test suite for context_url_from_links."""

    def test_other_links_are_ignored(self):
        _, mock_response = mock_session_with(
            links={"next": {"url": URL("https://example.com/2"), "rel": "next"}}
        )
        assert context_url_from_links(mock_response) is None


class TestLoaders:
    """Test suite for the document loader factories."""

    @pytest.mark.asyncio
    async def test_get_document_loader_binds_session(self, settings):
        body = {"id": NOTE_URL}
        mock_session, _ = mock_session_with(body=body)
        loader = get_document_loader(mock_session, settings)

        result = await loader(NOTE_URL)

        assert result.document == body
        assert mock_session.get.call_args.args == (NOTE_URL,)

    @pytest.mark.asyncio
    @patch("social.graze.fedi.activitypub.docloader.aiohttp.ClientSession")
    async def test_fetch_document_loader_uses_temporary_session(
        self, mock_session_class, settings
    ):
        body = {"id": NOTE_URL}
        mock_session, _ = mock_session_with(body=body)
        mock_session_class.return_value.__aenter__.return_value = mock_session

        result = await fetch_document_loader(NOTE_URL)

        assert result.document == body
        mock_session_class.assert_called_once_with()

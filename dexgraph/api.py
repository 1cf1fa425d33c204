"""GraphQL transport and small parsing helpers shared by the normalizers."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

import httpx

from . import config

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class QueryError(ValueError):
    """Raised when the query endpoint cannot be reached or answers non-2xx."""


class QueryClient:
    """Send GraphQL documents to the configured endpoint.

    The client only moves bytes: the query layer's own ``errors`` payload is
    returned untouched for callers to inspect. There is no retry or backoff.
    """

    def __init__(
        self,
        endpoint: str = config.GRAPHQL_ENDPOINT,
        timeout: float = config.HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        # Tests inject httpx.MockTransport here; production uses the default transport.
        self._transport = transport

    async def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a query document and return the decoded JSON body.

        Args:
            document: GraphQL query document.
            variables: Variables referenced by the document.

        Returns:
            Parsed JSON response, usually ``{"data": ..., "errors"?: ...}``.

        Raises:
            QueryError: If the transport fails, the status is non-2xx, or the
                body is not JSON.
        """
        context = _operation_name(document)
        payload = {"query": document, "variables": variables or {}}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, json=payload)
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("GraphQL request %s failed: %s", context, exc)
            raise QueryError(f"Failed to fetch {context}: {exc}") from exc


def _operation_name(document: str) -> str:
    # "query getPokemonDetail($name: String!)" -> "getPokemonDetail"
    match = re.search(r"query\s+(\w+)", document)
    return match.group(1) if match else "query"


def parse_sprites(blob: Any) -> Optional[Dict[str, Any]]:
    """Decode a sprite blob that may arrive as an object or a JSON string.

    Args:
        blob: Sprite payload from ``pokemonsprites[].sprites``.

    Returns:
        Sprite mapping, or None when missing or undecodable.
    """
    if not blob:
        return None
    if isinstance(blob, dict):
        return blob
    if not isinstance(blob, str):
        return None
    try:
        parsed = json.loads(blob)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def first_sprites(entries: Any) -> Optional[Dict[str, Any]]:
    """Parse the first ``{"sprites": ...}`` row of a sprite list, if any."""
    if not entries:
        return None
    return parse_sprites((entries[0] or {}).get("sprites"))


def collapse_whitespace(text: Optional[str]) -> str:
    """Turn form feeds and newlines into spaces, collapse runs, and trim."""
    if not text:
        return ""
    cleaned = text.replace("\f", " ").replace("\n", " ")
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def format_flavor_text(text: Optional[str]) -> str:
    """Clean game flavor text for display.

    Soft hyphens (and the line breaks they split words across) are dropped
    before the usual whitespace cleanup.
    """
    if not text:
        return ""
    return collapse_whitespace(text.replace("\u00ad\n", "").replace("\u00ad", ""))

"""
Document loaders for status list credentials and DID documents.

A document loader is any callable taking an identifier and returning the
parsed JSON document, raising on failure. Two implementations are
provided: a mapping-backed loader and an httpx-backed loader that also
resolves did:web identifiers.
https://w3c-ccg.github.io/did-method-web/
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class DocumentLoaderError(Exception):
    """Raised when a document cannot be loaded."""


class DocumentLoader(Protocol):
    """Capability that resolves an identifier to a JSON document."""

    def __call__(self, url: str) -> dict[str, Any]: ...


def did_web_to_url(did: str) -> str:
    """Convert a did:web identifier to its resolution URL.

    did:web:example.com -> https://example.com/.well-known/did.json
    did:web:example.com:path:to:doc -> https://example.com/path/to/doc/did.json
    did:web:example.com%3A8080 -> https://example.com:8080/.well-known/did.json

    Raises:
        DocumentLoaderError: If the DID format is invalid.
    """
    if not did.startswith("did:web:"):
        raise DocumentLoaderError(f"Invalid did:web identifier: {did}")

    domain_path = did[8:].split("#")[0]
    if not domain_path:
        raise DocumentLoaderError(f"Invalid did:web identifier: {did}")

    parts = domain_path.split(":")
    domain = parts[0].replace("%3A", ":")

    if len(parts) > 1:
        path = "/" + "/".join(quote(p, safe="") for p in parts[1:]) + "/did.json"
    else:
        path = "/.well-known/did.json"

    return f"https://{domain}{path}"


class StaticDocumentLoader:
    """Serves documents from an in-memory mapping."""

    def __init__(
        self,
        documents: Mapping[str, dict[str, Any]] | None = None,
        fallback: Callable[[str], dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            documents: Documents keyed by identifier.
            fallback: Loader consulted for identifiers not in documents.
        """
        self.documents: dict[str, dict[str, Any]] = dict(documents or {})
        self.fallback = fallback

    def add(self, url: str, document: dict[str, Any]) -> None:
        self.documents[url] = document

    def __call__(self, url: str) -> dict[str, Any]:
        document = self.documents.get(url)
        if document is None and url.startswith("did:") and "#" in url:
            # DID URL with a fragment dereferences to its DID document
            document = self.documents.get(url.split("#")[0])
        if document is not None:
            return document
        if self.fallback is not None:
            return self.fallback(url)
        raise DocumentLoaderError(f'Document loader unable to load URL "{url}".')


class HttpDocumentLoader:
    """Loads documents over HTTP(S), including did:web DID documents."""

    ACCEPT = "application/vc+ld+json, application/ld+json, application/json"
    DID_ACCEPT = "application/did+ld+json, application/json"

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        use_cache: bool = False,
    ) -> None:
        """Initialize the loader.

        Args:
            timeout: HTTP request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
            use_cache: Whether to keep fetched documents for the lifetime
                of this loader.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.use_cache = use_cache
        self._cache: dict[str, dict[str, Any]] = {}

    def __call__(self, url: str) -> dict[str, Any]:
        """Load the document identified by url.

        did:web identifiers resolve to their DID document; any fragment is
        ignored.

        Raises:
            DocumentLoaderError: If the identifier is unsupported or the
                fetch fails.
        """
        if url.startswith("did:web:"):
            key = url.split("#")[0]
            fetch_url = did_web_to_url(key)
            accept = self.DID_ACCEPT
        elif url.startswith(("https://", "http://")):
            key = fetch_url = url
            accept = self.ACCEPT
        else:
            raise DocumentLoaderError(f'Document loader unable to load URL "{url}".')

        if self.use_cache and key in self._cache:
            return self._cache[key]

        document = self._fetch(fetch_url, accept)

        if url.startswith("did:web:") and document.get("id") != key:
            raise DocumentLoaderError(
                f"DID Document id mismatch: expected {key}, got {document.get('id')}"
            )

        if self.use_cache:
            self._cache[key] = document
        return document

    def _fetch(self, url: str, accept: str) -> dict[str, Any]:
        logger.debug("Fetching %s", url)
        try:
            with httpx.Client(timeout=self.timeout, verify=self.verify_ssl) as client:
                response = client.get(url, headers={"Accept": accept})
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            raise DocumentLoaderError(
                f"HTTP error fetching {url}: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise DocumentLoaderError(f"Network error fetching {url}: {e}") from e
        except ValueError as e:
            raise DocumentLoaderError(f"Invalid JSON in document from {url}") from e

        if not isinstance(data, dict):
            raise DocumentLoaderError(f"Document from {url} is not a JSON object")
        return data

    def clear_cache(self) -> None:
        """Clear the document cache."""
        self._cache.clear()

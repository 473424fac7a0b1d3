"""Data loading layer for the documentation corpus.

This module loads the bundled best-practice documents from a JSON manifest
into an ordered, read-only collection.

Responsibilities:
- Load manifest.json (slug, title, description, order, file, draft)
- Read each document body relative to the manifest directory
- Reject broken manifests at startup (missing files, duplicate slugs)
"""

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from effect_solutions.docs.config import DOCS_MANIFEST_PATH, TOPICS_SLUG
from effect_solutions.docs.models import Document
from effect_solutions.errors import DocumentNotFoundError, ManifestError

logger = logging.getLogger("effect-solutions.docs")

_REQUIRED_FIELDS = ("slug", "title", "file")


class DocumentStore:
    """Ordered, immutable collection of documents keyed by slug.

    Documents are sorted by ``order`` and then slug. The store is built once
    at process start and shared read-only by the search index, renderer and
    tool handlers.

    Usage:
        >>> store = DocumentStore.from_manifest()
        >>> store.get("error-handling").title
        'Error Handling'
        >>> [doc.slug for doc in store.all()][:2]
        ['overview', 'project-setup']
    """

    def __init__(self, documents: Iterable[Document]) -> None:
        by_slug: dict[str, Document] = {}
        for doc in documents:
            if doc.slug == TOPICS_SLUG:
                raise ManifestError(f"Doc slug '{TOPICS_SLUG}' is reserved for the topic index")
            if doc.slug in by_slug:
                raise ManifestError(f"Duplicate doc slug in manifest: {doc.slug}")
            by_slug[doc.slug] = doc

        self._documents = tuple(sorted(by_slug.values(), key=lambda d: d.sort_key))
        self._by_slug = {doc.slug: doc for doc in self._documents}

    @classmethod
    def from_manifest(cls, manifest_path: Path | None = None) -> "DocumentStore":
        """Load every non-draft document listed in the manifest.

        Args:
            manifest_path: Path to manifest.json (default: bundled corpus)

        Returns:
            Populated DocumentStore

        Raises:
            ManifestError: If the manifest or any referenced file cannot be loaded
        """
        path = Path(manifest_path) if manifest_path is not None else DOCS_MANIFEST_PATH
        entries = _read_manifest(path)

        documents = []
        for position, entry in enumerate(entries):
            if entry.get("draft") is True:
                logger.debug("Skipping draft doc: %s", entry.get("slug"))
                continue
            documents.append(_load_entry(path.parent, entry, position))

        store = cls(documents)
        logger.info("Loaded %d docs from %s", len(store), path)
        return store

    def all(self) -> tuple[Document, ...]:
        return self._documents

    def get(self, slug: str) -> Document:
        doc = self._by_slug.get(slug)
        if doc is None:
            raise DocumentNotFoundError(slug)
        return doc

    def titles(self) -> dict[str, str]:
        return {doc.slug: doc.title for doc in self._documents}

    def slugs(self) -> list[str]:
        return [doc.slug for doc in self._documents]

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)


def _read_manifest(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        raise ManifestError(f"Docs manifest not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Docs manifest is not valid JSON: {path}: {exc}") from exc

    docs = data.get("docs") if isinstance(data, dict) else None
    if not isinstance(docs, list):
        raise ManifestError(f"Docs manifest must contain a 'docs' list: {path}")
    return docs


def _load_entry(root: Path, entry: Any, position: int) -> Document:
    if not isinstance(entry, dict):
        raise ManifestError(f"Manifest entry #{position} is not an object")

    missing = [name for name in _REQUIRED_FIELDS if not entry.get(name)]
    if missing:
        raise ManifestError(f"Manifest entry #{position} is missing: {', '.join(missing)}")

    body_path = root / entry["file"]
    try:
        body = body_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Cannot read doc '{entry['slug']}' from {body_path}: {exc}") from exc

    order = entry.get("order", position)
    if not isinstance(order, int) or isinstance(order, bool):
        raise ManifestError(f"Doc '{entry['slug']}' has a non-integer order: {order!r}")

    return Document(
        slug=str(entry["slug"]),
        title=str(entry["title"]),
        description=entry.get("description") or None,
        order=order,
        body=body,
    )

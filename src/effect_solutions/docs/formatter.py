"""Markdown/text rendering for the documentation corpus.

Used by the CLI ``list`` and ``show`` commands and by the MCP resource
handlers. Rendering never touches the filesystem; all content comes from the
DocumentStore.
"""

from collections.abc import Sequence

from effect_solutions.docs.config import doc_uri
from effect_solutions.docs.models import Document
from effect_solutions.docs.store import DocumentStore

LIST_SEPARATOR = " — "
DOC_SEPARATOR = "\n\n---\n\n"
TOPICS_HEADING = "# Effect Solutions Documentation Index"


class DocRenderer:
    """Format documents from a DocumentStore as text.

    Usage:
        >>> renderer = DocRenderer(store)
        >>> print(renderer.render_list().splitlines()[0])
        overview — Overview — What Effect Solutions covers and how to read it
        >>> renderer.render_docs([])
        ''
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def render_list(self) -> str:
        """One line per document in store order: ``slug — title — description``."""
        return "\n".join(format_list_line(doc) for doc in self._store.all())

    def render_docs(self, slugs: Sequence[str]) -> str:
        """Concatenate the requested documents in the given order.

        Each document is preceded by a ``# <title>`` heading and a
        ``(<slug>)`` line; consecutive documents are separated by a
        horizontal rule. Duplicates are rendered as many times as requested.

        Args:
            slugs: Document slugs, in output order

        Returns:
            Rendered text, or an empty string for an empty sequence

        Raises:
            DocumentNotFoundError: For the first unknown slug. Lookup happens
                before any formatting so no partial output is produced.
        """
        docs = [self._store.get(slug) for slug in slugs]
        return DOC_SEPARATOR.join(format_doc(doc) for doc in docs)

    def render_doc(self, slug: str) -> str:
        return self.render_docs([slug])

    def render_topics(self) -> str:
        """Render the topic index served as the ``topics`` resource."""
        parts = [
            TOPICS_HEADING,
            "",
            f"{len(self._store)} guides. Read one with its resource URI, or search with "
            "the `search_effect_solutions` tool.",
            "",
        ]
        for doc in self._store.all():
            line = f"- **{doc.title}** (`{doc.slug}`) — {doc_uri(doc.slug)}"
            if doc.description:
                line += f"\n  {doc.description}"
            parts.append(line)
        return "\n".join(parts)


def format_list_line(doc: Document) -> str:
    fields = [doc.slug, doc.title]
    if doc.description:
        fields.append(doc.description)
    return LIST_SEPARATOR.join(fields)


def format_doc(doc: Document) -> str:
    return f"# {doc.title}\n({doc.slug})\n\n{doc.body.strip()}"

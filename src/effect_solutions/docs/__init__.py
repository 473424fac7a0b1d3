"""Bundled documentation corpus: store, search index, rendering and link checks."""

from effect_solutions.docs.formatter import DocRenderer
from effect_solutions.docs.links import LinkChecker
from effect_solutions.docs.models import Document, SearchResult
from effect_solutions.docs.search import SearchIndex
from effect_solutions.docs.store import DocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "DocRenderer",
    "LinkChecker",
    "SearchIndex",
    "SearchResult",
]

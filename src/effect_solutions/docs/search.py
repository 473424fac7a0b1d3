"""Keyword search over the documentation corpus.

Matching is case-insensitive substring matching against title, description
and body. There is no stemming or relevance model: a document's score only
reflects *where* the query (or its tokens) appeared.
"""

from dataclasses import dataclass

from effect_solutions.docs.models import Document, SearchResult
from effect_solutions.docs.store import DocumentStore
from effect_solutions.errors import InvalidArgumentError

DEFAULT_SEARCH_LIMIT = 10

SEARCH_FIELDS = ("title", "description", "body")

# Whole-phrase hits per field.
PHRASE_WEIGHTS = {"title": 1000, "description": 100, "body": 10}

# Per-token hits per field, for multi-word queries.
TOKEN_WEIGHTS = {"title": 100, "description": 10, "body": 1}

# Results are ranked by the best field that matched before score, so a title
# match always outranks a description-only match regardless of token counts.
FIELD_TIERS = {"title": 0, "description": 1, "body": 2}


@dataclass(frozen=True)
class _IndexedDocument:
    document: Document
    fields: dict[str, str]


def normalize_query(query: str) -> tuple[str, list[str]]:
    """Return the lowered phrase and its distinct tokens (in query order).

    Examples:
        >>> normalize_query("  Error   Handling ")
        ('error handling', ['error', 'handling'])
        >>> normalize_query("   ")
        ('', [])
    """
    tokens = query.lower().split()
    phrase = " ".join(tokens)
    return phrase, list(dict.fromkeys(tokens))


def score_fields(fields: dict[str, str], phrase: str, tokens: list[str]) -> tuple[int, list[str]]:
    """Score one document's lowered fields against a normalized query.

    Args:
        fields: Lowered text per field name (title, description, body)
        phrase: Normalized full query
        tokens: Distinct query tokens

    Returns:
        Tuple of (score, matched_fields). A score of 0 means no match.

    Examples:
        >>> score_fields({"title": "error handling", "description": "", "body": ""},
        ...              "error handling", ["error", "handling"])
        (1200, ['title'])
    """
    score = 0
    matched: list[str] = []
    multi_token = len(tokens) > 1

    for name in SEARCH_FIELDS:
        text = fields.get(name, "")
        if not text:
            continue

        field_score = 0
        if phrase in text:
            field_score += PHRASE_WEIGHTS[name]
        if multi_token:
            field_score += sum(TOKEN_WEIGHTS[name] for token in tokens if token in text)

        if field_score:
            score += field_score
            matched.append(name)

    return score, matched


class SearchIndex:
    """Searchable view over a DocumentStore.

    The lowered text of every document is computed once at construction; the
    store is read-only so the index never needs rebuilding.

    Usage:
        >>> index = SearchIndex(store)
        >>> [r.slug for r in index.search("error handling")][:1]
        ['error-handling']
        >>> index.search("   ")
        []
    """

    def __init__(self, store: DocumentStore) -> None:
        self._entries = [
            _IndexedDocument(
                document=doc,
                fields={
                    "title": doc.title.lower(),
                    "description": (doc.description or "").lower(),
                    "body": doc.body.lower(),
                },
            )
            for doc in store.all()
        ]

    def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[SearchResult]:
        """Search documents by keyword.

        Args:
            query: Free text; the whole phrase and each whitespace-delimited
                token are matched case-insensitively
            limit: Maximum number of results to return

        Returns:
            Results ordered by best matching field (title, description, body),
            then score, document order and slug. Empty for an empty or
            whitespace-only query.

        Raises:
            InvalidArgumentError: If query is not a string or limit is not a
                positive integer
        """
        if not isinstance(query, str):
            raise InvalidArgumentError("query", f"expected a string, got {type(query).__name__}")
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise InvalidArgumentError("limit", "must be a positive integer")

        phrase, tokens = normalize_query(query)
        if not phrase:
            return []

        results: list[SearchResult] = []
        for entry in self._entries:
            score, matched = score_fields(entry.fields, phrase, tokens)
            if score <= 0:
                continue
            doc = entry.document
            results.append(
                SearchResult(
                    slug=doc.slug,
                    title=doc.title,
                    description=doc.description,
                    score=score,
                    matched_in=matched,
                    order=doc.order,
                )
            )

        results.sort(key=_rank_key)
        return results[:limit]


def _rank_key(result: SearchResult) -> tuple[int, int, int, str]:
    tier = FIELD_TIERS.get(result.best_field or "body", len(FIELD_TIERS))
    return (tier, -result.score, result.order, result.slug)

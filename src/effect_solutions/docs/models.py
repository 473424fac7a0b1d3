"""Document and search result models.

Documents are loaded once from the manifest and never mutated; search
results are built per query and refer to exactly one document.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Document:
    """One best-practice article.

    Attributes:
        slug: Unique, URL-safe identifier (e.g. "error-handling")
        title: Display title
        description: Optional one-line summary
        order: Default listing position; ties break by slug
        body: Raw markdown content
    """

    slug: str
    title: str
    body: str
    order: int = 0
    description: str | None = None

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.order, self.slug)


@dataclass
class SearchResult:
    """A single query match.

    Attributes:
        slug: Slug of the matched document
        title: Title of the matched document
        description: Description of the matched document, if any
        score: Relevance score (higher = more relevant). Title hits dominate
            description hits, which dominate body hits.
        matched_in: Fields that matched, in title/description/body order
        order: Document order, used to break ties between equal scores
    """

    slug: str
    title: str
    score: int
    description: str | None = None
    matched_in: list[str] = field(default_factory=list)
    order: int = 0

    @property
    def best_field(self) -> str | None:
        return self.matched_in[0] if self.matched_in else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "score": self.score,
            "matched_in": list(self.matched_in),
        }

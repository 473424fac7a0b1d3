"""Internal link validation for the documentation corpus.

Docs link to each other as ``[text](/slug)`` or ``[text](/slug#anchor)``.
The checker verifies that every internal link points at a known slug and,
when an anchor is given, at a heading that exists in the target document.
External (http/https), mailto and same-page (``#anchor``) links are skipped.
"""

import re
from dataclasses import dataclass
from typing import Any

from effect_solutions.docs.models import Document
from effect_solutions.docs.store import DocumentStore

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_HEADING_RE = re.compile(r"^#{1,6}\s+(.+)$")
_SKIPPED_PREFIXES = ("http://", "https://", "mailto:", "#")


@dataclass(frozen=True)
class Link:
    slug: str
    line: int
    text: str
    href: str


@dataclass(frozen=True)
class LinkIssue:
    link: Link
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.link.slug,
            "line": self.link.line,
            "text": self.link.text,
            "href": self.link.href,
            "error": self.error,
        }


def heading_anchor(text: str) -> str:
    """Convert heading text to its anchor form.

    Examples:
        >>> heading_anchor("Service-Driven Development")
        'service-driven-development'
        >>> heading_anchor("Why `Effect.fn`?")
        'why-effect-fn'
    """
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def extract_links(doc: Document) -> list[Link]:
    links = []
    in_code_block = False
    for number, line in enumerate(doc.body.splitlines(), start=1):
        if line.lstrip().startswith("```"):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        for match in _LINK_RE.finditer(line):
            links.append(Link(slug=doc.slug, line=number, text=match.group(1), href=match.group(2).strip()))
    return links


def extract_anchors(doc: Document) -> set[str]:
    anchors = set()
    in_code_block = False
    for line in doc.body.splitlines():
        if line.lstrip().startswith("```"):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        match = _HEADING_RE.match(line)
        if match:
            anchors.add(heading_anchor(match.group(1)))
    return anchors


class LinkChecker:
    """Validate internal links between documents of one store."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._anchors: dict[str, set[str]] = {}

    def internal_links(self) -> list[Link]:
        links = []
        for doc in self._store.all():
            links.extend(link for link in extract_links(doc) if not link.href.startswith(_SKIPPED_PREFIXES))
        return links

    def validate(self, link: Link) -> LinkIssue | None:
        href = link.href
        if href.startswith(_SKIPPED_PREFIXES):
            return None

        if not href.startswith("/"):
            return LinkIssue(link, f"Link should start with / for internal docs (got: {href})")

        path, _, anchor = href[1:].partition("#")
        slug = path.rstrip("/")
        if slug not in self._store:
            return LinkIssue(link, f"Target doc not found: {slug}")

        if anchor and anchor.lower() not in self._anchors_for(slug):
            return LinkIssue(link, f"Anchor not found in {slug}: #{anchor}")

        return None

    def check(self) -> list[LinkIssue]:
        """Return every broken internal link, in store order."""
        issues = []
        for link in self.internal_links():
            issue = self.validate(link)
            if issue is not None:
                issues.append(issue)
        return issues

    def _anchors_for(self, slug: str) -> set[str]:
        if slug not in self._anchors:
            self._anchors[slug] = extract_anchors(self._store.get(slug))
        return self._anchors[slug]

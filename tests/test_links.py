"""Tests for internal link validation."""

from effect_solutions.docs import Document, DocumentStore, LinkChecker
from effect_solutions.docs.links import extract_anchors, extract_links, heading_anchor


def _checker(*documents: Document) -> LinkChecker:
    return LinkChecker(DocumentStore(documents))


TARGET = Document(
    slug="target",
    title="Target",
    body="# Target\n\n## Typed Errors\n\nText.\n\n```ts\n// ## Not A Heading\n```\n",
)


def test_bundled_corpus_links_are_valid() -> None:
    checker = LinkChecker(DocumentStore.from_manifest())

    assert checker.internal_links()
    assert checker.check() == []


def test_valid_link_with_anchor() -> None:
    source = Document(slug="source", title="Source", body="See [errors](/target#typed-errors).")

    assert _checker(source, TARGET).check() == []


def test_missing_target_doc() -> None:
    source = Document(slug="source", title="Source", body="Intro\nSee [gone](/gone).")

    issues = _checker(source, TARGET).check()

    assert len(issues) == 1
    assert issues[0].error == "Target doc not found: gone"
    assert issues[0].to_dict()["line"] == 2


def test_missing_anchor() -> None:
    source = Document(slug="source", title="Source", body="[x](/target#not-a-heading)")

    issues = _checker(source, TARGET).check()

    assert [issue.error for issue in issues] == ["Anchor not found in target: #not-a-heading"]


def test_relative_link_is_flagged() -> None:
    source = Document(slug="source", title="Source", body="[x](target)")

    issues = _checker(source, TARGET).check()

    assert "should start with /" in issues[0].error


def test_external_and_same_page_links_are_skipped() -> None:
    source = Document(
        slug="source",
        title="Source",
        body="[a](https://effect.website) [b](mailto:x@example.com) [c](#local)",
    )

    checker = _checker(source, TARGET)

    assert checker.internal_links() == []
    assert checker.check() == []


def test_links_in_code_blocks_are_ignored() -> None:
    source = Document(slug="source", title="Source", body="```md\n[x](/gone)\n```\n")

    assert extract_links(source) == []


def test_extract_anchors_skips_code_blocks() -> None:
    assert extract_anchors(TARGET) == {"target", "typed-errors"}


def test_heading_anchor() -> None:
    assert heading_anchor("Recovering with catchTag") == "recovering-with-catchtag"
    assert heading_anchor("Why `Effect.fn`?") == "why-effect-fn"
    assert heading_anchor("Services & Layers") == "services-layers"

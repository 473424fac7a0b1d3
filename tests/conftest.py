"""Shared fixtures: contexts over the bundled corpus or small in-memory ones."""

import json
from pathlib import Path

import pytest

from effect_solutions.config import DEFAULT_ISSUE_REPO, Settings
from effect_solutions.context import build_context
from effect_solutions.docs import Document, DocumentStore
from effect_solutions.issues import CollectStrategy


def make_settings(**overrides) -> Settings:
    values = {
        "open_strategy": "collect",
        "open_strategy_recognized": True,
        "issue_repo": DEFAULT_ISSUE_REPO,
        "manifest_path": None,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def write_manifest(root: Path, entries: list[dict], bodies: dict[str, str]) -> Path:
    """Write a manifest plus one body file per entry under ``root``."""
    docs_dir = root / "docs"
    docs_dir.mkdir(parents=True, exist_ok=True)
    for name, body in bodies.items():
        (docs_dir / name).write_text(body, encoding="utf-8")
    manifest = root / "manifest.json"
    manifest.write_text(json.dumps({"docs": entries}), encoding="utf-8")
    return manifest


@pytest.fixture()
def collector() -> CollectStrategy:
    return CollectStrategy()


@pytest.fixture()
def context(collector):
    """Context over the bundled corpus that records issue URLs."""
    return build_context(make_settings(), strategy=collector)


@pytest.fixture()
def small_store() -> DocumentStore:
    return DocumentStore(
        [
            Document(slug="errors", title="Error Handling", description="Typed failures", body="Use catchTag.", order=2),
            Document(
                slug="layers",
                title="Layers",
                description="How error handling works with layers",
                body="Provide services.",
                order=1,
            ),
            Document(slug="testing", title="Testing", body="Test error handling paths.", order=0),
        ]
    )

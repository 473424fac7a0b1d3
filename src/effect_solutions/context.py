"""Application context: the explicitly wired set of shared components.

Built once at process entry and passed to the CLI, the dispatcher and the
protocol front end. Tests build independent contexts over their own corpora.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from effect_solutions.config import Settings, get_settings
from effect_solutions.docs import DocRenderer, DocumentStore, LinkChecker, SearchIndex
from effect_solutions.issues import IssueService, OpenStrategy, create_open_strategy

logger = logging.getLogger("effect-solutions.context")


@dataclass
class AppContext:
    """Dependencies shared by tool handlers, resources and CLI commands.

    Attributes:
        settings: Process configuration read at startup
        store: Loaded document corpus (read-only)
        index: Search index over ``store``
        renderer: Text renderer over ``store``
        issues: Issue service bound to the configured OpenStrategy
    """

    settings: Settings
    store: DocumentStore
    index: SearchIndex
    renderer: DocRenderer
    issues: IssueService

    def link_checker(self) -> LinkChecker:
        return LinkChecker(self.store)


def build_context(
    settings: Settings | None = None,
    *,
    store: DocumentStore | None = None,
    strategy: OpenStrategy | None = None,
) -> AppContext:
    """Load the corpus and wire every component.

    Raises:
        ManifestError: If the document manifest cannot be loaded. This is
            fatal; callers should abort startup.
    """
    settings = settings or get_settings()
    if store is None:
        store = DocumentStore.from_manifest(settings.manifest_path)
    if strategy is None:
        if not settings.open_strategy_recognized:
            logger.warning("Unrecognized EFFECT_SOLUTIONS_OPEN_STRATEGY, using %s", settings.open_strategy)
        strategy = create_open_strategy(settings.open_strategy)

    return AppContext(
        settings=settings,
        store=store,
        index=SearchIndex(store),
        renderer=DocRenderer(store),
        issues=IssueService(strategy, repo=settings.issue_repo),
    )

"""GitHub issue drafting for documentation feedback.

Builds a prefilled "new issue" URL and surfaces it through an OpenStrategy
chosen once per process from ``EFFECT_SOLUTIONS_OPEN_STRATEGY``:

- ``browser``: open the URL with the system browser (default)
- ``collect``: append the URL to an in-memory log (tests)
- ``stub``: do nothing and report success
"""

from __future__ import annotations

import logging
import threading
import webbrowser
from enum import Enum
from typing import Callable, Protocol
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from effect_solutions.config import DEFAULT_ISSUE_REPO
from effect_solutions.utils import NonEmptyText

logger = logging.getLogger("effect-solutions.issues")


class IssueCategory(str, Enum):
    QUESTION = "Question"
    FIX = "Fix"
    IMPROVEMENT = "Improvement"
    REQUEST = "Request"


class IssueRequest(BaseModel):
    """Structured fields for a documentation issue."""

    model_config = ConfigDict(extra="forbid")

    category: IssueCategory = Field(description="Kind of feedback: Question, Fix, Improvement or Request")
    title: NonEmptyText = Field(description="Short issue title")
    description: NonEmptyText = Field(description="Issue body; what is wrong or missing")


class IssueResult(BaseModel):
    """Outcome of filing an issue, serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    issue_url: str = Field(alias="issueUrl")
    message: str
    opened: bool
    opened_with: str = Field(alias="openedWith")

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class OpenStrategy(Protocol):
    """Capability to surface an issue URL to the user."""

    name: str

    def open(self, url: str) -> bool:
        """Return False only when the URL could definitely not be surfaced."""
        ...


class BrowserStrategy:
    """Open the URL with the platform's default browser.

    The browser is launched on a daemon thread so the caller never waits on
    it. Failure is only reported when no browser is available at all.
    """

    name = "browser"

    def open(self, url: str) -> bool:
        try:
            browser = webbrowser.get()
        except webbrowser.Error as exc:
            logger.warning("No browser available to open issue URL: %s", exc)
            return False

        thread = threading.Thread(target=_open_quietly, args=(browser, url), daemon=True)
        thread.start()
        return True


def _open_quietly(browser: webbrowser.BaseBrowser, url: str) -> None:
    try:
        browser.open(url)
    except Exception as exc:
        logger.warning("Browser failed to open %s: %s", url, exc)


class CollectStrategy:
    """Record URLs in memory instead of opening them."""

    name = "collect"

    def __init__(self) -> None:
        self._log: list[str] = []
        self._lock = threading.Lock()

    def open(self, url: str) -> bool:
        with self._lock:
            self._log.append(url)
        return True

    @property
    def log(self) -> list[str]:
        with self._lock:
            return list(self._log)

    def reset(self) -> None:
        with self._lock:
            self._log.clear()


class StubStrategy:
    """No-op strategy that always reports success."""

    name = "stub"

    def open(self, url: str) -> bool:
        return True


_STRATEGIES: dict[str, Callable[[], OpenStrategy]] = {
    BrowserStrategy.name: BrowserStrategy,
    CollectStrategy.name: CollectStrategy,
    StubStrategy.name: StubStrategy,
}


def create_open_strategy(name: str) -> OpenStrategy:
    """Build the strategy registered under ``name``.

    Unknown names fall back to the browser strategy.
    """
    factory = _STRATEGIES.get(name)
    if factory is None:
        logger.warning("Unknown open strategy '%s', falling back to browser", name)
        factory = BrowserStrategy
    return factory()


def build_issue_url(request: IssueRequest, repo: str = DEFAULT_ISSUE_REPO) -> str:
    """Build a prefilled GitHub "new issue" URL.

    Pure: the same request always yields the same URL.

    Examples:
        >>> build_issue_url(IssueRequest(category="Fix", title="Broken link", description="Example body"))
        'https://github.com/kitlangton/effect-solutions/issues/new?title=Broken+link&body=%5BFix%5D+Example+body'
    """
    body = f"[{request.category.value}] {request.description}"
    query = urlencode({"title": request.title, "body": body})
    return f"https://github.com/{repo}/issues/new?{query}"


class IssueService:
    """Files documentation issues through one OpenStrategy."""

    def __init__(self, strategy: OpenStrategy, repo: str = DEFAULT_ISSUE_REPO) -> None:
        self.strategy = strategy
        self.repo = repo

    def file_issue(self, request: IssueRequest) -> IssueResult:
        url = build_issue_url(request, self.repo)
        opened = self.strategy.open(url)
        logger.info("Issue URL surfaced via %s (opened=%s)", self.strategy.name, opened)

        if opened:
            message = f"Opened GitHub issue draft with {self.strategy.name}: {url}"
        else:
            message = f"Could not open a browser; open this URL manually: {url}"

        return IssueResult(issue_url=url, message=message, opened=opened, opened_with=self.strategy.name)

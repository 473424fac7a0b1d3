"""Runtime configuration for Effect Solutions."""

from dataclasses import dataclass
import logging
import os
import sys
from pathlib import Path

OPEN_STRATEGIES = ("browser", "collect", "stub")

DEFAULT_ISSUE_REPO = "kitlangton/effect-solutions"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> tuple[str, bool]:
    """Return (value, recognized) for an enumerated variable."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default, True
    lowered = value.strip().lower()
    if lowered not in choices:
        return default, False
    return lowered, True


@dataclass(frozen=True)
class Settings:
    open_strategy: str
    open_strategy_recognized: bool
    issue_repo: str
    manifest_path: Path | None
    log_level: str


def get_settings() -> Settings:
    """Load settings from environment variables.

    Read once at process entry; the resulting object is passed down to
    everything that needs it.
    """
    strategy, recognized = _env_choice("EFFECT_SOLUTIONS_OPEN_STRATEGY", OPEN_STRATEGIES, "browser")
    manifest = os.getenv("EFFECT_SOLUTIONS_MANIFEST")
    return Settings(
        open_strategy=strategy,
        open_strategy_recognized=recognized,
        issue_repo=_env_str("EFFECT_SOLUTIONS_ISSUE_REPO", DEFAULT_ISSUE_REPO),
        manifest_path=Path(manifest) if manifest else None,
        log_level=_env_str("EFFECT_SOLUTIONS_LOG_LEVEL", "WARNING").upper(),
    )


def configure_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout is reserved for the protocol."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.WARNING
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

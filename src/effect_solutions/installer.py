"""Install the bundled guides as an agent skill folder.

Layout written under the target directory::

    <target>/SKILL.md
    <target>/references/<slug>.md

The default target is ``./.claude/skills/effect-solutions`` or, with
``global_install``, ``~/.claude/skills/effect-solutions``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from effect_solutions.docs.config import SKILL_TEMPLATE_PATH
from effect_solutions.docs.formatter import DocRenderer, format_list_line
from effect_solutions.docs.store import DocumentStore

logger = logging.getLogger("effect-solutions.installer")

SKILL_NAME = "effect-solutions"

_REFERENCES_PLACEHOLDER = "{references}"


@dataclass
class InstallResult:
    target: Path
    files: list[Path] = field(default_factory=list)


def default_target(global_install: bool, cwd: Path | None = None, home: Path | None = None) -> Path:
    base = (home or Path.home()) if global_install else (cwd or Path.cwd())
    return base / ".claude" / "skills" / SKILL_NAME


def render_skill(store: DocumentStore, template: str | None = None) -> str:
    """Fill the SKILL.md template with one line per reference file."""
    if template is None:
        template = SKILL_TEMPLATE_PATH.read_text(encoding="utf-8")
    lines = [f"- `references/{doc.slug}.md`: {format_list_line(doc)}" for doc in store.all()]
    return template.replace(_REFERENCES_PLACEHOLDER, "\n".join(lines))


def install_skill(store: DocumentStore, target: Path) -> InstallResult:
    """Write SKILL.md and every guide into ``target``.

    Existing files with the same names are overwritten; other files in the
    target are left alone.
    """
    renderer = DocRenderer(store)
    references_dir = target / "references"
    references_dir.mkdir(parents=True, exist_ok=True)

    result = InstallResult(target=target)

    skill_path = target / "SKILL.md"
    skill_path.write_text(render_skill(store), encoding="utf-8")
    result.files.append(skill_path)

    for doc in store.all():
        path = references_dir / f"{doc.slug}.md"
        path.write_text(renderer.render_doc(doc.slug) + "\n", encoding="utf-8")
        result.files.append(path)

    logger.info("Installed %d files to %s", len(result.files), target)
    return result

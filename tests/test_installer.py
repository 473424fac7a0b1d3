"""Tests for installing the guides as a skill folder."""

from effect_solutions.docs import DocumentStore
from effect_solutions.installer import SKILL_NAME, default_target, install_skill, render_skill


def test_install_writes_skill_and_references(tmp_path) -> None:
    store = DocumentStore.from_manifest()
    target = tmp_path / "skill"

    result = install_skill(store, target)

    assert result.target == target
    assert len(result.files) == len(store) + 1
    skill = (target / "SKILL.md").read_text(encoding="utf-8")
    assert "name: effect-solutions" in skill
    assert "`references/overview.md`" in skill
    assert "{references}" not in skill

    overview = (target / "references" / "overview.md").read_text(encoding="utf-8")
    assert overview.startswith("# Overview\n(overview)\n\n")
    assert sorted(p.stem for p in (target / "references").iterdir()) == sorted(store.slugs())


def test_install_overwrites_existing_files(tmp_path) -> None:
    store = DocumentStore.from_manifest()
    target = tmp_path / "skill"
    (target / "references").mkdir(parents=True)
    (target / "references" / "overview.md").write_text("stale", encoding="utf-8")
    (target / "notes.txt").write_text("keep me", encoding="utf-8")

    install_skill(store, target)

    assert (target / "references" / "overview.md").read_text(encoding="utf-8") != "stale"
    assert (target / "notes.txt").read_text(encoding="utf-8") == "keep me"


def test_render_skill_with_custom_template() -> None:
    store = DocumentStore.from_manifest()

    text = render_skill(store, template="Refs:\n{references}\n")

    lines = text.splitlines()
    assert lines[0] == "Refs:"
    assert lines[1] == "- `references/overview.md`: overview — Overview — What Effect Solutions covers and how to read it"
    assert len(lines) == len(store) + 1


def test_default_target(tmp_path) -> None:
    local = default_target(False, cwd=tmp_path / "project")
    global_target = default_target(True, home=tmp_path / "home")

    assert local == tmp_path / "project" / ".claude" / "skills" / SKILL_NAME
    assert global_target == tmp_path / "home" / ".claude" / "skills" / SKILL_NAME

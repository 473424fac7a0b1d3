"""Documentation path configuration.

All paths are resolved relative to this package's resources/ directory.
"""

from pathlib import Path

# Base path for all documentation resources
_RESOURCES_DIR = Path(__file__).parent / "resources"

# JSON index listing every document with its metadata and body file
DOCS_MANIFEST_PATH = _RESOURCES_DIR / "manifest.json"

# Skill entry point written by the installer next to the references
SKILL_TEMPLATE_PATH = _RESOURCES_DIR / "SKILL.md"

# Resource URIs exposed over MCP
RESOURCE_SCHEME = "effect-docs"
# Slug of the topic index; no document may use it
TOPICS_SLUG = "topics"
TOPICS_URI = f"{RESOURCE_SCHEME}://docs/{TOPICS_SLUG}"
DOC_URI_TEMPLATE = f"{RESOURCE_SCHEME}://docs/{{slug}}"
MARKDOWN_MIME_TYPE = "text/markdown"


def doc_uri(slug: str) -> str:
    return DOC_URI_TEMPLATE.format(slug=slug)

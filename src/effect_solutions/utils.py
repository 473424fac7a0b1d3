"""Validation models and utilities for Effect Solutions tools."""

from typing import Annotated

from pydantic import Field
from pydantic.functional_validators import AfterValidator

from effect_solutions.docs.search import DEFAULT_SEARCH_LIMIT

# Search limits
MAX_SEARCH_LIMIT = 50


def validate_non_empty_string(value: str) -> str:
    """Validate that a string is not empty after stripping whitespace."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Value cannot be empty or whitespace only")
    return stripped


NonEmptyText = Annotated[str, AfterValidator(validate_non_empty_string), Field(min_length=1)]

# Search query for the documentation index
SearchQuery = Annotated[
    str,
    AfterValidator(validate_non_empty_string),
    Field(
        min_length=1,
        description=(
            "Search keywords for Effect best-practice guides. Examples: 'error handling', "
            "'layers', 'schema'. Case-insensitive."
        ),
    ),
]

# Search limit
SearchLimit = Annotated[
    int,
    Field(
        ge=1,
        le=MAX_SEARCH_LIMIT,
        description=f"Maximum number of results (1-{MAX_SEARCH_LIMIT}).",
    ),
]

"""Token reconciliation.

Compares the tags found in a template against the tokens the caller
declared for it.
"""

from collections.abc import Iterable

from template_ingest.strategies.template_engine.models import ExpectedToken


def expected_tag_set(expected_tokens: Iterable[ExpectedToken] | None) -> set[str]:
    """Build the lower-cased set of declared tags, ignoring blank ones."""
    return {
        token.tag.lower()
        for token in expected_tokens or ()
        if token.tag and token.tag.strip()
    }


def find_unknown_tags(
    tags_in_document: Iterable[str],
    expected_tokens: Iterable[ExpectedToken] | None,
) -> list[str]:
    """Return the document tags that no expected token declares.

    Matching is case-insensitive and otherwise exact. When no expected
    tokens are supplied nothing is considered unknown.

    Args:
        tags_in_document: Tags in document order.
        expected_tokens: Tokens declared by the caller, possibly empty or None.

    Returns:
        Unknown tags, in the order they appear in ``tags_in_document``.
    """
    expected_tokens = list(expected_tokens or ())
    if not expected_tokens:
        return []

    declared = expected_tag_set(expected_tokens)
    return [tag for tag in tags_in_document if tag.lower() not in declared]

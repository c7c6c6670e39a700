"""Unit tests for token reconciliation."""

from template_ingest.strategies.template_engine.models import ExpectedToken
from template_ingest.strategies.template_engine.reconciler import (
    expected_tag_set,
    find_unknown_tags,
)


def _tokens(*tags: str | None) -> list[ExpectedToken]:
    return [ExpectedToken(tag=tag, title="Title", type="text") for tag in tags]


class TestFindUnknownTags:
    """Test suite for find_unknown_tags."""

    def test_all_declared(self):
        """No unknown tags when every tag is declared."""
        assert find_unknown_tags(["client_name", "date"], _tokens("client_name", "date")) == []

    def test_undeclared_tag_reported(self):
        """Tags missing from the expected set are unknown."""
        assert find_unknown_tags(["client_name", "ssn"], _tokens("client_name")) == ["ssn"]

    def test_case_insensitive_match(self):
        """Matching ignores case on both sides."""
        assert find_unknown_tags(["Client_Name", "DATE"], _tokens("client_name", "Date")) == []

    def test_no_partial_matching(self):
        """Substrings and prefixes do not match."""
        unknown = find_unknown_tags(["client", "client_name_full"], _tokens("client_name"))

        assert unknown == ["client", "client_name_full"]

    def test_none_tokens_accept_anything(self):
        """An absent expectation list skips reconciliation."""
        assert find_unknown_tags(["anything", "else"], None) == []

    def test_empty_tokens_accept_anything(self):
        """An empty expectation list skips reconciliation."""
        assert find_unknown_tags(["anything"], []) == []

    def test_blank_expected_tags_ignored(self):
        """Blank expected tags never match anything."""
        unknown = find_unknown_tags(["client_name", "date"], _tokens("", "  ", None, "date"))

        assert unknown == ["client_name"]

    def test_only_blank_tokens_still_reconcile(self):
        """A non-empty list of blank tokens declares nothing."""
        assert find_unknown_tags(["client_name"], _tokens("  ")) == ["client_name"]

    def test_order_follows_document(self):
        """Unknown tags keep document order."""
        unknown = find_unknown_tags(["z", "a", "known", "m"], _tokens("known"))

        assert unknown == ["z", "a", "m"]

    def test_empty_document_has_no_unknown_tags(self):
        """Nothing in the document means nothing unknown."""
        assert find_unknown_tags([], _tokens("client_name")) == []

    def test_repeated_calls_agree(self):
        """Reconciliation is a pure function of its inputs."""
        tags = ["client_name", "ssn", "Date"]
        tokens = _tokens("client_name", "date")

        assert find_unknown_tags(tags, tokens) == find_unknown_tags(tags, tokens) == ["ssn"]

    def test_accepts_generators(self):
        """Inputs may be one-shot iterables."""
        unknown = find_unknown_tags(
            (tag for tag in ["a", "b"]),
            (token for token in _tokens("a")),
        )

        assert unknown == ["b"]


class TestExpectedTagSet:
    """Test suite for expected_tag_set."""

    def test_lowercases_and_drops_blanks(self):
        assert expected_tag_set(_tokens("Client_Name", "", None, "DATE")) == {"client_name", "date"}

    def test_none(self):
        assert expected_tag_set(None) == set()

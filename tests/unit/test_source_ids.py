# ABOUTME: Unit tests for SourceId, FieldName, and CandidateValue.
# ABOUTME: Covers string round-trips, validation, and lenient field-name parsing.

import pytest

from shelfsync.metadata.candidate import (
    AUDIOBOOK,
    AUDIOBOOK_COPYRIGHT,
    AUDIOBOOK_SUMMARY,
    COPYRIGHT,
    FIRST_PUBLISHED,
    ORIGINAL,
    CandidateValue,
    FieldName,
    SourceId,
    SourceKind,
)


class TestSourceId:
    """Tests for the closed set of candidate sources."""

    @pytest.mark.parametrize(
        "source",
        [ORIGINAL, AUDIOBOOK, AUDIOBOOK_SUMMARY, FIRST_PUBLISHED, COPYRIGHT, AUDIOBOOK_COPYRIGHT],
    )
    def test_parse_inverts_str(self, source: SourceId) -> None:
        """Every fixed source parses back from its string form."""
        assert SourceId.parse(str(source)) == source

    def test_edition_string_form(self) -> None:
        """Editions render and parse as edition:<index>."""
        assert str(SourceId.edition(2)) == "edition:2"
        assert SourceId.parse("edition:2") == SourceId.edition(2)

    def test_parse_unknown_raises(self) -> None:
        """Unknown source text raises ValueError."""
        with pytest.raises(ValueError, match="Unknown source"):
            SourceId.parse("library")

    def test_parse_bad_edition_index_raises(self) -> None:
        """A non-numeric edition index raises ValueError."""
        with pytest.raises(ValueError):
            SourceId.parse("edition:two")

    def test_negative_edition_index_rejected(self) -> None:
        """Edition indexes must be non-negative."""
        with pytest.raises(ValueError):
            SourceId.edition(-1)

    def test_index_on_non_edition_rejected(self) -> None:
        """Only editions carry an index."""
        with pytest.raises(ValueError):
            SourceId(SourceKind.ORIGINAL, 0)

    def test_date_provenance(self) -> None:
        """Only first-published and copyright sources are date provenance."""
        assert FIRST_PUBLISHED.is_date_provenance
        assert AUDIOBOOK_COPYRIGHT.is_date_provenance
        assert not AUDIOBOOK.is_date_provenance
        assert not SourceId.edition(0).is_date_provenance

    def test_hashable_and_comparable(self) -> None:
        """Equal sources hash the same so they work as dict keys."""
        assert {SourceId.edition(1): "x"}[SourceId.parse("edition:1")] == "x"


class TestFieldName:
    """Tests for field-name parsing."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("releaseDate", FieldName.RELEASE_DATE),
            ("release_date", FieldName.RELEASE_DATE),
            ("PAGE-COUNT", FieldName.PAGE_COUNT),
            ("thumbnail", FieldName.THUMBNAIL),
        ],
    )
    def test_parse_variants(self, text: str, expected: FieldName) -> None:
        """Values and member names parse regardless of case and separators."""
        assert FieldName.parse(text) is expected

    def test_parse_unknown_raises(self) -> None:
        """Unknown fields raise ValueError."""
        with pytest.raises(ValueError, match="Unknown field"):
            FieldName.parse("isbn")


class TestCandidateValue:
    """Tests for the CandidateValue dataclass."""

    def test_defaults_to_not_year_only(self) -> None:
        """is_year_only defaults to False."""
        candidate = CandidateValue(source=ORIGINAL, label="Original Book", content="Tor")
        assert candidate.is_year_only is False

    def test_is_frozen(self) -> None:
        """Candidates cannot be mutated after construction."""
        candidate = CandidateValue(source=ORIGINAL, label="Original Book", content="Tor")
        with pytest.raises(AttributeError):
            candidate.content = "Ace"  # type: ignore[misc]

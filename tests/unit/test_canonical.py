# ABOUTME: Unit tests for category splitting and canonical casing.
# ABOUTME: Covers comma and conjunction splitting, preserved compounds, and acronyms.

import pytest

from shelfsync.categories.canonical import canonicalize, split_categories, split_raw_category


class TestCanonicalize:
    """Tests for canonicalize."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("  science   fiction ", "Science Fiction"),
            ("sci-fi", "Sci-Fi"),
            ("YA fiction", "YA Fiction"),
            ("CHILDREN'S BOOKS", "Children's Books"),
            ("LGBT", "LGBT"),
            ("health & fitness", "Health & Fitness"),
            ("fiction / fantasy", "Fiction / Fantasy"),
        ],
    )
    def test_canonical_form(self, raw: str, expected: str) -> None:
        """Raw strings map to a stable display form."""
        assert canonicalize(raw) == expected

    @pytest.mark.parametrize("raw", ["sci-fi", "YA fiction", "  MYSTERY & detective "])
    def test_idempotent(self, raw: str) -> None:
        """Canonicalizing twice changes nothing."""
        once = canonicalize(raw)
        assert canonicalize(once) == once


class TestSplitRawCategory:
    """Tests for split_raw_category."""

    def test_commas_always_split(self) -> None:
        """Comma-separated strings become separate tags."""
        assert split_raw_category("Fiction, Science Fiction,") == ["Fiction", "Science Fiction"]

    def test_conjunctions_kept_by_default(self) -> None:
        """Without audiobook status, & and 'and' do not split."""
        assert split_raw_category("Science Fiction & Fantasy") == ["Science Fiction & Fantasy"]

    def test_conjunctions_split_when_enabled(self) -> None:
        """With split_conjunctions, & and 'and' separate tags."""
        assert split_raw_category("Science Fiction & Fantasy", split_conjunctions=True) == [
            "Science Fiction",
            "Fantasy",
        ]
        assert split_raw_category("Crime AND Mystery", split_conjunctions=True) == [
            "Crime",
            "Mystery",
        ]

    def test_and_inside_words_not_split(self) -> None:
        """Only a standalone 'and' splits."""
        assert split_raw_category("Brand Management", split_conjunctions=True) == [
            "Brand Management"
        ]

    def test_preserved_compound_genre(self) -> None:
        """Well-known compound genres stay intact."""
        assert split_raw_category("Health & Fitness", split_conjunctions=True) == [
            "Health & Fitness"
        ]

    def test_keep_intact_strings(self) -> None:
        """Strings listed in keep_intact are never split."""
        result = split_raw_category(
            "Science Fiction & Fantasy",
            split_conjunctions=True,
            keep_intact=["science fiction & fantasy"],
        )
        assert result == ["Science Fiction & Fantasy"]


class TestSplitCategories:
    """Tests for split_categories."""

    def test_non_strings_and_blanks_dropped(self) -> None:
        """Non-string and empty entries are silently dropped."""
        values = [None, 42, "", "   ", "Horror"]
        assert split_categories(values) == ["Horror"]  # type: ignore[arg-type]

# ABOUTME: Unit tests for BookSession, the per-book review state.
# ABOUTME: Exercises source selection, data arrival, and every category action.

import pytest

from shelfsync.core.session import BookSession, collect_raw_categories
from shelfsync.metadata.candidate import AUDIOBOOK, FIRST_PUBLISHED, ORIGINAL, FieldName, SourceId
from shelfsync.metadata.types import AudiobookRecord, BookRecord, EditionRecord


@pytest.fixture
def session(
    settings,
    sample_book: BookRecord,
    sample_audiobook: AudiobookRecord,
    sample_editions: list[EditionRecord],
) -> BookSession:
    """A session over the sample book with every source present."""
    return BookSession(sample_book, settings, sample_audiobook, sample_editions)


class TestCollectRawCategories:
    """Tests for collect_raw_categories."""

    def test_provenance_labels(
        self,
        sample_book: BookRecord,
        sample_audiobook: AudiobookRecord,
        sample_editions: list[EditionRecord],
    ) -> None:
        """Each raw category carries the label of its source."""
        raw = collect_raw_categories(sample_book, sample_audiobook, sample_editions)
        assert [item.source for item in raw] == ["original", "original", "audiobook", "edition 1"]

    def test_absent_audiobook_contributes_nothing(self, sample_book: BookRecord) -> None:
        """An audiobook with has_audiobook=False adds no categories."""
        audiobook = AudiobookRecord(has_audiobook=False, categories=["Ignored"])
        raw = collect_raw_categories(sample_book, audiobook)
        assert all(item.source == "original" for item in raw)


class TestFieldSelection:
    """Tests for field resolution inside a session."""

    def test_initial_resolutions(self, session: BookSession) -> None:
        """Smart defaults apply on a fresh session."""
        resolutions = session.resolutions
        assert resolutions[FieldName.DESCRIPTION].source == AUDIOBOOK
        assert resolutions[FieldName.RELEASE_DATE].source == FIRST_PUBLISHED
        assert resolutions[FieldName.PUBLISHER].source == ORIGINAL

    def test_select_and_remember(self, session: BookSession, settings) -> None:
        """Remembering a choice stores it as the field default."""
        resolution = session.select_source(
            FieldName.PUBLISHER, SourceId.edition(0), remember=True
        )
        assert resolution.value == "Chilton Books"
        assert settings.get_field_default("publisher") == "edition:0"
        assert session.resolution(FieldName.PUBLISHER).source == SourceId.edition(0)

    def test_select_without_remember(self, session: BookSession, settings) -> None:
        """A plain choice does not touch the stored defaults."""
        session.select_source(FieldName.PUBLISHER, SourceId.edition(0))
        assert settings.get_field_default("publisher") is None

    def test_select_unknown_source_raises(self, session: BookSession) -> None:
        """Choosing a source with no candidate raises ValueError."""
        with pytest.raises(ValueError, match="No publisher candidate"):
            session.select_source(FieldName.PUBLISHER, SourceId.edition(7))

    def test_late_audiobook_retriggers_defaults(self, settings, sample_book: BookRecord,
                                                sample_audiobook: AudiobookRecord) -> None:
        """Audiobook data arriving later re-runs untouched smart defaults."""
        session = BookSession(sample_book, settings)
        assert session.resolution(FieldName.DESCRIPTION).source == ORIGINAL
        session.set_audiobook(sample_audiobook)
        assert session.resolution(FieldName.DESCRIPTION).source == AUDIOBOOK

    def test_late_audiobook_keeps_user_choice(self, settings, sample_book: BookRecord,
                                              sample_audiobook: AudiobookRecord) -> None:
        """A field the user already chose keeps its source."""
        session = BookSession(sample_book, settings)
        session.select_source(FieldName.DESCRIPTION, ORIGINAL)
        session.set_audiobook(sample_audiobook)
        assert session.resolution(FieldName.DESCRIPTION).source == ORIGINAL

    def test_stale_default_falls_back(self, settings, sample_book: BookRecord) -> None:
        """An edition:2 default with a single edition resolves to the original."""
        settings.set_field_default("pageCount", "edition:2")
        session = BookSession(sample_book, settings, editions=[EditionRecord(page_count=412)])
        resolution = session.resolution(FieldName.PAGE_COUNT)
        assert resolution.source == ORIGINAL
        assert resolution.value == 896

    def test_shrinking_editions_falls_back_to_default(
        self, settings, sample_book: BookRecord, sample_audiobook: AudiobookRecord,
        sample_editions: list[EditionRecord],
    ) -> None:
        """A chosen edition that disappears gives way to the stored default."""
        session = BookSession(sample_book, settings, sample_audiobook, sample_editions)
        session.select_source(FieldName.PAGE_COUNT, SourceId.edition(1))
        settings.set_field_default("pageCount", "edition:0")
        session.set_editions(sample_editions[:1])
        assert session.resolution(FieldName.PAGE_COUNT).value == 412

    def test_set_editions_refreshes(self, settings, sample_book: BookRecord) -> None:
        """New editions add candidates."""
        session = BookSession(sample_book, settings)
        session.set_editions([EditionRecord(page_count=412)])
        assert len(session.candidates[FieldName.PAGE_COUNT]) == 2


class TestCategoryActions:
    """Tests for category curation inside a session."""

    def test_initial_selection(self, session: BookSession) -> None:
        """Every category starts selected."""
        assert session.selected_categories == [
            "Fiction",
            "Sci-Fi",
            "Science Fiction",
            "Science Fiction & Fantasy",
            "Space Opera",
        ]

    def test_sci_fi_suggested(self, session: BookSession) -> None:
        """Sci-Fi and Science Fiction are suggested for each other."""
        assert "Sci-Fi" in session.categories.similar["Science Fiction"]
        assert "Science Fiction" in session.categories.similar["Sci-Fi"]

    def test_ignore_removes_from_selection(self, session: BookSession, settings) -> None:
        """Ignoring a selected tag drops it and persists the ignore."""
        session.ignore_category("fiction")
        assert "Fiction" not in session.selected_categories
        assert settings.ignored_tags() == ["Fiction"]
        assert session.categories.get("Fiction").is_ignored

    def test_unignore_reselects(self, session: BookSession, settings) -> None:
        """Unignoring brings the tag back into the selection."""
        session.ignore_category("Fiction")
        session.unignore_category("Fiction")
        assert "Fiction" in session.selected_categories
        assert settings.ignored_tags() == []

    def test_ignore_unknown_raises(self, session: BookSession) -> None:
        """Acting on a tag that is not in the session raises ValueError."""
        with pytest.raises(ValueError, match="Unknown category"):
            session.ignore_category("Western")

    def test_merge_moves_selection(self, session: BookSession, settings) -> None:
        """Merging maps the tag and keeps the target selected."""
        session.merge_category("Sci-Fi", "Science Fiction")
        assert settings.mappings() == {"Sci-Fi": "Science Fiction"}
        assert session.categories.get("Sci-Fi") is None
        assert session.categories.get("Science Fiction").mapped_to_this == ["Sci-Fi"]
        assert "Science Fiction" in session.selected_categories
        assert "Sci-Fi" not in session.selected_categories

    def test_merge_unselected_stays_unselected(self, session: BookSession) -> None:
        """Merging an unselected tag does not select the target."""
        session.toggle_category("Sci-Fi")
        session.toggle_category("Science Fiction")
        session.merge_category("Sci-Fi", "Science Fiction")
        assert "Science Fiction" not in session.selected_categories

    def test_merge_into_new_tag(self, session: BookSession) -> None:
        """Merging into a tag the book lacks creates a mapped entry."""
        session.merge_category("Space Opera", "space adventure")
        category = session.categories.get("Space Adventure")
        assert category is not None
        assert category.mapped_from == "Space Opera"
        assert category.mapped_to_this == ["Space Opera"]
        assert "Space Adventure" in session.selected_categories

    def test_accept_suggestion(self, session: BookSession, settings) -> None:
        """Accepting a suggestion creates the same mapping as a merge."""
        session.accept_suggestion("Sci-Fi", "Science Fiction")
        assert settings.mappings() == {"Sci-Fi": "Science Fiction"}

    def test_accept_unsuggested_raises(self, session: BookSession) -> None:
        """Only current suggestions can be accepted."""
        with pytest.raises(ValueError, match="not a suggested merge"):
            session.accept_suggestion("Sci-Fi", "Space Opera")

    def test_unmap_source_tag(self, session: BookSession, settings) -> None:
        """Unmapping a mapped tag restores and reselects it."""
        session.merge_category("Sci-Fi", "Science Fiction")
        assert session.unmap_category("Sci-Fi") == ["Sci-Fi"]
        assert settings.mappings() == {}
        assert "Sci-Fi" in session.selected_categories

    def test_unmap_target_tag(self, session: BookSession, settings) -> None:
        """Unmapping a target removes every edge into it."""
        session.merge_category("Sci-Fi", "Science Fiction")
        assert session.unmap_category("Science Fiction") == ["Sci-Fi"]
        assert settings.mappings() == {}

    def test_unmap_unmapped_raises(self, session: BookSession) -> None:
        """Unmapping a tag with no mappings raises ValueError."""
        with pytest.raises(ValueError, match="not mapped"):
            session.unmap_category("Space Opera")

    def test_select_all_and_none(self, session: BookSession) -> None:
        """Bulk selection helpers select everything or nothing."""
        session.deselect_all_categories()
        assert session.selected_categories == []
        session.select_all_categories()
        assert len(session.selected_categories) == 5


class TestFinalize:
    """Tests for BookSession.finalize."""

    def test_payload(self, session: BookSession) -> None:
        """The finalized record carries selections and categories."""
        session.ignore_category("Fiction")
        payload = session.finalize().to_payload()
        assert payload["title"] == "Dune"
        assert payload["releaseDate"] == "1965"
        assert payload["releaseDateDisplay"] == "1965"
        assert "Fiction" not in payload["categories"]
        assert payload["narrators"] == ["Scott Brick", "Orlagh Cassidy"]

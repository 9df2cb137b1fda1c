# ABOUTME: Unit tests for PublishRecord and assemble_record.
# ABOUTME: Verifies camelCase payloads, empty-value omission, and audiobook extras.

from shelfsync.core.assembler import PublishRecord, assemble_record
from shelfsync.metadata.reconciler import FieldReconciler, FieldSelections
from shelfsync.metadata.sources import build_field_candidates
from shelfsync.metadata.types import AudiobookRecord, BookRecord


class TestPublishRecord:
    """Tests for PublishRecord.to_payload."""

    def test_empty_values_omitted(self) -> None:
        """Only populated fields appear in the payload."""
        assert PublishRecord(title="Dune").to_payload() == {"title": "Dune"}

    def test_camel_case_keys(self) -> None:
        """Multi-word fields use camelCase keys."""
        record = PublishRecord(
            title="Dune",
            published_date="2019-11-15",
            page_count=412,
            categories=["Science Fiction"],
            chapter_count=48,
        )
        payload = record.to_payload()
        assert payload["releaseDate"] == "2019-11-15"
        assert payload["releaseDateDisplay"] == "Nov 15, 2019"
        assert payload["pageCount"] == 412
        assert payload["categories"] == ["Science Fiction"]
        assert payload["chapterCount"] == 48


class TestAssembleRecord:
    """Tests for assemble_record."""

    def test_uses_selected_values(
        self, settings, sample_book: BookRecord, sample_audiobook: AudiobookRecord
    ) -> None:
        """Reconciled values and categories flow into the record."""
        resolutions = FieldReconciler(settings).reconcile(
            build_field_candidates(sample_book, sample_audiobook), FieldSelections()
        )
        record = assemble_record(sample_book, sample_audiobook, resolutions, ["Science Fiction"])
        assert record.title == "Dune"
        assert record.description == "A stunning blend of adventure & mysticism."
        assert record.publisher == "Ace"
        assert record.isbn13 == "9780441013593"
        assert record.categories == ["Science Fiction"]

    def test_audiobook_extras(
        self, settings, sample_book: BookRecord, sample_audiobook: AudiobookRecord
    ) -> None:
        """Narrators, duration, chapters, and ASIN come from the audiobook."""
        resolutions = FieldReconciler(settings).reconcile(
            build_field_candidates(sample_book, sample_audiobook), FieldSelections()
        )
        record = assemble_record(sample_book, sample_audiobook, resolutions, [])
        assert record.narrators == ["Scott Brick", "Orlagh Cassidy"]
        assert record.audiobook_duration == "21.0 hrs"
        assert record.chapter_count == 48
        assert record.asin == "B002V1OF70"

    def test_no_audiobook_extras_without_audiobook(
        self, settings, sample_book: BookRecord
    ) -> None:
        """Without an audiobook the extras stay empty."""
        resolutions = FieldReconciler(settings).reconcile(
            build_field_candidates(sample_book), FieldSelections()
        )
        payload = assemble_record(sample_book, None, resolutions, []).to_payload()
        assert "narrators" not in payload
        assert "audiobookDuration" not in payload

    def test_short_duration_in_minutes(self) -> None:
        """Durations under an hour are shown in minutes."""
        assert AudiobookRecord(has_audiobook=True, total_duration_hours=0.5).duration_label == (
            "30 min"
        )

# ABOUTME: Session assembler: composes reconciled fields and selected categories.
# ABOUTME: PublishRecord is the finalized record handed to the publishing collaborator.

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from shelfsync.metadata.candidate import FieldName
from shelfsync.metadata.dates import format_display_date
from shelfsync.metadata.reconciler import FieldResolution
from shelfsync.metadata.types import AudiobookRecord, BookRecord


@dataclass
class PublishRecord:
    """Selected field values plus the curated categories for one book."""

    title: str
    authors: list[str] = field(default_factory=list)
    subtitle: str | None = None
    description: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    page_count: int | None = None
    thumbnail: str | None = None
    isbn10: str | None = None
    isbn13: str | None = None
    language: str | None = None
    categories: list[str] = field(default_factory=list)
    narrators: list[str] = field(default_factory=list)
    audiobook_duration: str | None = None
    chapter_count: int | None = None
    asin: str | None = None

    @property
    def release_date_display(self) -> str:
        return format_display_date(self.published_date)

    def to_payload(self) -> dict[str, Any]:
        """camelCase dict for publishing. Empty values are left out entirely."""
        payload = {
            "title": self.title,
            "authors": list(self.authors),
            "subtitle": self.subtitle,
            "description": self.description,
            "publisher": self.publisher,
            "releaseDate": self.published_date,
            "releaseDateDisplay": self.release_date_display,
            "pageCount": self.page_count,
            "thumbnail": self.thumbnail,
            "isbn10": self.isbn10,
            "isbn13": self.isbn13,
            "language": self.language,
            "categories": list(self.categories),
            "narrators": list(self.narrators),
            "audiobookDuration": self.audiobook_duration,
            "chapterCount": self.chapter_count,
            "asin": self.asin,
        }
        return {key: value for key, value in payload.items() if value not in (None, "", [], 0)}


def _value(resolutions: Mapping[FieldName, FieldResolution], field_name: FieldName) -> Any:
    resolution = resolutions.get(field_name)
    return resolution.value if resolution is not None else None


def assemble_record(
    book: BookRecord,
    audiobook: AudiobookRecord | None,
    resolutions: Mapping[FieldName, FieldResolution],
    categories: Sequence[str],
) -> PublishRecord:
    """Build the PublishRecord from reconciled fields and the selected categories.

    Identity fields (authors, ISBNs, language) come straight from the primary
    record; audiobook extras only when an audiobook was found.
    """
    title = _value(resolutions, FieldName.TITLE) or book.title
    page_count = _value(resolutions, FieldName.PAGE_COUNT)

    record = PublishRecord(
        title=str(title),
        authors=list(book.authors),
        subtitle=book.subtitle,
        description=_value(resolutions, FieldName.DESCRIPTION),
        publisher=_value(resolutions, FieldName.PUBLISHER),
        published_date=_value(resolutions, FieldName.RELEASE_DATE),
        page_count=page_count if isinstance(page_count, int) else None,
        thumbnail=_value(resolutions, FieldName.THUMBNAIL),
        isbn10=book.isbn10,
        isbn13=book.isbn13,
        language=book.language,
        categories=list(categories),
    )

    if audiobook is not None and audiobook.has_audiobook:
        record.narrators = list(audiobook.narrators)
        record.audiobook_duration = audiobook.duration_label
        record.chapter_count = audiobook.chapter_count
        record.asin = audiobook.asin

    return record

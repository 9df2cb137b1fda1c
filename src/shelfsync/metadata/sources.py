# ABOUTME: Source registry: wraps provider records into ordered candidates per field.
# ABOUTME: Original first, then audiobook-derived values, then one entry per distinct edition.

from collections.abc import Sequence

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
)
from shelfsync.metadata.dates import clean_date, extract_year, is_year_only
from shelfsync.metadata.text import extract_plain_text
from shelfsync.metadata.types import AudiobookRecord, BookRecord, EditionRecord

LABEL_ORIGINAL = "Original Book"
LABEL_THIS_EDITION = "This Edition"
LABEL_FIRST_PUBLISHED = "First Published"
LABEL_COPYRIGHT = "Copyright"
LABEL_AUDIOBOOK = "Audiobook"
LABEL_AUDIOBOOK_COPYRIGHT = "Audiobook Copyright"
LABEL_AUDIOBOOK_COVER = "Audiobook Cover"
LABEL_AUDIOBOOK_DESCRIPTION = "About this listen"
LABEL_AUDIOBOOK_SUMMARY = "Audiobook Summary"


class _CandidateList:
    """Accumulates candidates for one field, skipping empty and repeated values."""

    def __init__(self, *, dates: bool = False) -> None:
        self._dates = dates
        self._items: list[CandidateValue] = []

    def add(self, source: SourceId, label: str, content: str | int | None) -> None:
        if content is None or isinstance(content, bool):
            return
        if isinstance(content, str):
            content = clean_date(content) if self._dates else content.strip()
            if not content:
                return
        elif content <= 0:
            return

        # Strict equality: "320" and 320 are different values, "Tor" and "TOR" too.
        if any(item.content == content for item in self._items):
            return

        year_only = self._dates and isinstance(content, str) and is_year_only(content)
        self._items.append(
            CandidateValue(source=source, label=label, content=content, is_year_only=year_only)
        )

    @property
    def items(self) -> list[CandidateValue]:
        return list(self._items)


def edition_label(edition: EditionRecord, index: int, book_title: str | None = None) -> str:
    """Build a human label from an edition's own title, year, and publisher.

    Falls back to "Edition N" (1-based) when nothing distinguishes it.
    """
    parts: list[str] = []
    if edition.title and edition.title != book_title:
        parts.append(edition.title)
    year = extract_year(edition.published_date)
    if year is not None:
        parts.append(str(year))
    if edition.publisher:
        parts.append(edition.publisher)
    if not parts:
        parts.append(f"Edition {index + 1}")
    return " • ".join(parts)


def _edition_value(edition: EditionRecord, field: FieldName) -> str | int | None:
    if field is FieldName.TITLE:
        return edition.title
    if field is FieldName.DESCRIPTION:
        return extract_plain_text(edition.description)
    if field is FieldName.PUBLISHER:
        return edition.publisher
    if field is FieldName.RELEASE_DATE:
        return edition.published_date
    if field is FieldName.PAGE_COUNT:
        return edition.page_count
    if field is FieldName.THUMBNAIL:
        return edition.thumbnail
    return None


def _add_release_dates(
    candidates: _CandidateList, book: BookRecord, audiobook: AudiobookRecord | None
) -> None:
    has_first_published = bool(
        book.original_published_date
        and book.original_published_date != book.published_date
    )
    candidates.add(
        ORIGINAL,
        LABEL_THIS_EDITION if has_first_published else LABEL_ORIGINAL,
        book.published_date,
    )
    candidates.add(FIRST_PUBLISHED, LABEL_FIRST_PUBLISHED, book.original_published_date)
    candidates.add(COPYRIGHT, LABEL_COPYRIGHT, book.copyright)
    if audiobook is not None:
        candidates.add(AUDIOBOOK, LABEL_AUDIOBOOK, audiobook.published_date)
        candidates.add(AUDIOBOOK_COPYRIGHT, LABEL_AUDIOBOOK_COPYRIGHT, audiobook.copyright)


def field_candidates(
    field: FieldName,
    book: BookRecord,
    audiobook: AudiobookRecord | None = None,
    editions: Sequence[EditionRecord] = (),
) -> list[CandidateValue]:
    """Produce the ordered candidate list for a single field."""
    if audiobook is not None and not audiobook.has_audiobook:
        audiobook = None

    candidates = _CandidateList(dates=field is FieldName.RELEASE_DATE)

    if field is FieldName.TITLE:
        candidates.add(ORIGINAL, LABEL_ORIGINAL, book.title)
        if audiobook is not None:
            candidates.add(AUDIOBOOK, LABEL_AUDIOBOOK, audiobook.title)
    elif field is FieldName.DESCRIPTION:
        candidates.add(ORIGINAL, LABEL_ORIGINAL, extract_plain_text(book.description))
        if audiobook is not None:
            candidates.add(
                AUDIOBOOK, LABEL_AUDIOBOOK_DESCRIPTION, extract_plain_text(audiobook.description)
            )
            candidates.add(
                AUDIOBOOK_SUMMARY, LABEL_AUDIOBOOK_SUMMARY, extract_plain_text(audiobook.summary)
            )
    elif field is FieldName.PUBLISHER:
        candidates.add(ORIGINAL, LABEL_ORIGINAL, book.publisher)
        if audiobook is not None:
            candidates.add(AUDIOBOOK, LABEL_AUDIOBOOK, audiobook.publisher)
    elif field is FieldName.RELEASE_DATE:
        _add_release_dates(candidates, book, audiobook)
    elif field is FieldName.PAGE_COUNT:
        candidates.add(ORIGINAL, LABEL_ORIGINAL, book.page_count)
    elif field is FieldName.THUMBNAIL:
        candidates.add(ORIGINAL, LABEL_ORIGINAL, book.thumbnail)
        if audiobook is not None:
            candidates.add(AUDIOBOOK, LABEL_AUDIOBOOK_COVER, audiobook.thumbnail)

    for index, edition in enumerate(editions):
        candidates.add(
            SourceId.edition(index),
            edition_label(edition, index, book.title),
            _edition_value(edition, field),
        )

    return candidates.items


def build_field_candidates(
    book: BookRecord,
    audiobook: AudiobookRecord | None = None,
    editions: Sequence[EditionRecord] = (),
) -> dict[FieldName, list[CandidateValue]]:
    """Produce candidates for every reconcilable field.

    Fields with no candidates at all are left out of the map.
    """
    result: dict[FieldName, list[CandidateValue]] = {}
    for field in FieldName:
        candidates = field_candidates(field, book, audiobook, editions)
        if candidates:
            result[field] = candidates
    return result

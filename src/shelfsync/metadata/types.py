# ABOUTME: Provider record data structures handed to the reconciliation core.
# ABOUTME: BookRecord, AudiobookRecord, and EditionRecord are plain, already-fetched data.

from dataclasses import dataclass, field


@dataclass
class BookRecord:
    """The primary catalog record for one logical work.

    This is the anchor of a review session: every other source is compared
    against it, and its values are the "original" candidates. Only title is
    required, since even a sparse search hit has something we can call a title.
    """

    title: str
    authors: list[str] = field(default_factory=list)
    subtitle: str | None = None
    description: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    original_published_date: str | None = None
    page_count: int | None = None
    isbn10: str | None = None
    isbn13: str | None = None
    thumbnail: str | None = None
    copyright: str | None = None
    language: str | None = None
    categories: list[str] = field(default_factory=list)

    @property
    def author(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(self.authors) if self.authors else ""


@dataclass
class AudiobookRecord:
    """Audiobook metadata for the same work.

    A record with has_audiobook=False means the audiobook service was asked
    and had nothing; callers pass None instead when it has not been asked yet.
    """

    has_audiobook: bool = False
    title: str | None = None
    authors: list[str] = field(default_factory=list)
    narrators: list[str] = field(default_factory=list)
    description: str | None = None
    summary: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    copyright: str | None = None
    thumbnail: str | None = None
    total_duration_hours: float | None = None
    chapter_count: int | None = None
    asin: str | None = None
    categories: list[str] = field(default_factory=list)

    @property
    def narrator(self) -> str:
        return ", ".join(self.narrators) if self.narrators else ""

    @property
    def duration_label(self) -> str | None:
        """Human duration: minutes under an hour, otherwise hours to one decimal."""
        hours = self.total_duration_hours
        if not hours:
            return None
        if hours < 1:
            return f"{round(hours * 60)} min"
        return f"{hours:.1f} hrs"


@dataclass
class EditionRecord:
    """One alternate edition of the work, sourced independently."""

    title: str | None = None
    publisher: str | None = None
    published_date: str | None = None
    page_count: int | None = None
    thumbnail: str | None = None
    description: str | None = None
    isbn10: str | None = None
    isbn13: str | None = None
    language: str | None = None
    categories: list[str] = field(default_factory=list)

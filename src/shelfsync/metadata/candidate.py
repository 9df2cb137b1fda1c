# ABOUTME: Source identifiers and CandidateValue, one provider's offer for one field.
# ABOUTME: SourceId is a closed tagged union so the reconciler can switch over it exhaustively.

from dataclasses import dataclass
from enum import Enum


class FieldName(Enum):
    """Reconcilable output fields. Values double as persisted preference keys."""

    TITLE = "title"
    DESCRIPTION = "description"
    PUBLISHER = "publisher"
    RELEASE_DATE = "releaseDate"
    PAGE_COUNT = "pageCount"
    THUMBNAIL = "thumbnail"

    @classmethod
    def parse(cls, text: str) -> "FieldName":
        """Look up a field by value or member name, case-insensitively."""
        wanted = text.strip().lower().replace("_", "").replace("-", "")
        for member in cls:
            if wanted in (member.value.lower(), member.name.lower().replace("_", "")):
                return member
        raise ValueError(f"Unknown field '{text}'")


class SourceKind(Enum):
    ORIGINAL = "original"
    AUDIOBOOK = "audiobook"
    AUDIOBOOK_SUMMARY = "audiobook_summary"
    EDITION = "edition"
    FIRST_PUBLISHED = "first_published"
    COPYRIGHT = "copyright"
    AUDIOBOOK_COPYRIGHT = "audiobook_copyright"


_DATE_PROVENANCE = frozenset(
    {SourceKind.FIRST_PUBLISHED, SourceKind.COPYRIGHT, SourceKind.AUDIOBOOK_COPYRIGHT}
)


@dataclass(frozen=True)
class SourceId:
    """Identifies where a candidate value came from.

    Only EDITION carries an index (its position in the session's edition list).
    The string form ("original", "edition:2", ...) is what gets persisted.
    """

    kind: SourceKind
    index: int | None = None

    def __post_init__(self) -> None:
        if self.kind is SourceKind.EDITION:
            if self.index is None or self.index < 0:
                msg = f"edition source needs a non-negative index, got {self.index}"
                raise ValueError(msg)
        elif self.index is not None:
            raise ValueError(f"{self.kind.value} source does not take an index")

    @classmethod
    def edition(cls, index: int) -> "SourceId":
        return cls(SourceKind.EDITION, index)

    @classmethod
    def parse(cls, text: str) -> "SourceId":
        """Parse the persisted string form back into a SourceId.

        Raises:
            ValueError: If the text names no known source.
        """
        text = text.strip()
        if text.startswith("edition:"):
            try:
                return cls.edition(int(text.removeprefix("edition:")))
            except ValueError as exc:
                raise ValueError(f"Invalid edition source '{text}'") from exc
        try:
            kind = SourceKind(text)
        except ValueError as exc:
            raise ValueError(f"Unknown source '{text}'") from exc
        return cls(kind)

    @property
    def is_date_provenance(self) -> bool:
        return self.kind in _DATE_PROVENANCE

    def __str__(self) -> str:
        if self.kind is SourceKind.EDITION:
            return f"edition:{self.index}"
        return self.kind.value


ORIGINAL = SourceId(SourceKind.ORIGINAL)
AUDIOBOOK = SourceId(SourceKind.AUDIOBOOK)
AUDIOBOOK_SUMMARY = SourceId(SourceKind.AUDIOBOOK_SUMMARY)
FIRST_PUBLISHED = SourceId(SourceKind.FIRST_PUBLISHED)
COPYRIGHT = SourceId(SourceKind.COPYRIGHT)
AUDIOBOOK_COPYRIGHT = SourceId(SourceKind.AUDIOBOOK_COPYRIGHT)


@dataclass(frozen=True)
class CandidateValue:
    """One source's value for one field, plus a human label for review.

    is_year_only is only meaningful for release dates ("1965" vs "1965-08-01").
    """

    source: SourceId
    label: str
    content: str | int
    is_year_only: bool = False

# ABOUTME: Parsing functions for raw provider dictionaries (camelCase JSON shapes).
# ABOUTME: Converts book, audiobook, and edition payloads into typed records.

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shelfsync.metadata.types import AudiobookRecord, BookRecord, EditionRecord

logger = logging.getLogger(__name__)


class InputFormatError(ValueError):
    """Raised when a review input file cannot be read or has the wrong shape."""


def _text(data: dict[str, Any], *keys: str) -> str | None:
    """Return the first non-empty string value among keys, stripped."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _int(data: dict[str, Any], *keys: str) -> int | None:
    """Return the first positive integer among keys (numeric strings accepted)."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, bool) or value is None:
            continue
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            continue
        if number > 0:
            return number
    return None


def _float(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # JSON allows Infinity and NaN; neither is a usable duration.
    return number if math.isfinite(number) else None


def _strings(data: dict[str, Any], *keys: str) -> list[str]:
    """Collect a list of strings from the first present key.

    Providers are inconsistent here: some send a bare string, some a list of
    strings, and the audiobook service sends genre objects like {"name": ...}.
    """
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            continue
        result: list[str] = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name")
            if isinstance(item, str) and item.strip():
                result.append(item.strip())
        return result
    return []


def parse_book_record(data: dict[str, Any]) -> BookRecord:
    """Parse a primary book API record into a BookRecord."""
    return BookRecord(
        title=_text(data, "title") or "Unknown",
        authors=_strings(data, "authors"),
        subtitle=_text(data, "subtitle"),
        description=_text(data, "description"),
        publisher=_text(data, "publisher"),
        published_date=_text(data, "publishedDate", "published_date"),
        original_published_date=_text(
            data,
            "originalPublishedDate",
            "original_published_date",
            "firstPublishedDate",
        ),
        page_count=_int(data, "pageCount", "page_count"),
        isbn10=_text(data, "isbn10"),
        isbn13=_text(data, "isbn13"),
        thumbnail=_text(data, "thumbnail"),
        copyright=_text(data, "copyright"),
        language=_text(data, "language"),
        categories=_strings(data, "categories"),
    )


def parse_audiobook_record(data: dict[str, Any] | None) -> AudiobookRecord | None:
    """Parse an audiobook service record.

    Returns None when data is None (audiobook lookup not performed yet). A
    payload without a truthy hasAudiobook flag becomes an empty record with
    has_audiobook=False, which still tells the normalizer the lookup happened.
    """
    if data is None:
        return None
    if not data.get("hasAudiobook", data.get("has_audiobook", False)):
        return AudiobookRecord(has_audiobook=False)

    return AudiobookRecord(
        has_audiobook=True,
        title=_text(data, "title"),
        authors=_strings(data, "authors"),
        narrators=_strings(data, "narrators"),
        description=_text(data, "description"),
        summary=_text(data, "summary"),
        publisher=_text(data, "publisher"),
        published_date=_text(data, "publishedDate", "published_date"),
        copyright=_text(data, "copyright"),
        thumbnail=_text(data, "thumbnail", "image"),
        total_duration_hours=_float(data, "totalDurationHours"),
        chapter_count=_int(data, "chapterCount", "chapters"),
        asin=_text(data, "asin"),
        categories=_strings(data, "categories", "genres"),
    )


def parse_edition_record(data: dict[str, Any]) -> EditionRecord:
    """Parse one alternate edition record."""
    return EditionRecord(
        title=_text(data, "title"),
        publisher=_text(data, "publisher"),
        published_date=_text(data, "publishedDate", "published_date"),
        page_count=_int(data, "pageCount", "page_count"),
        thumbnail=_text(data, "thumbnail"),
        description=_text(data, "description"),
        isbn10=_text(data, "isbn10"),
        isbn13=_text(data, "isbn13"),
        language=_text(data, "language"),
        categories=_strings(data, "categories"),
    )


@dataclass
class ReviewInput:
    """Everything the providers returned for one work."""

    book: BookRecord
    audiobook: AudiobookRecord | None = None
    editions: list[EditionRecord] = field(default_factory=list)


def parse_review_input(data: Any) -> ReviewInput:
    """Parse {"book": {...}, "audiobook": {...} | null, "editions": [...]}.

    Raises:
        InputFormatError: If the top-level shape is wrong.
    """
    if not isinstance(data, dict) or not isinstance(data.get("book"), dict):
        raise InputFormatError("Review input needs a 'book' object")
    audiobook = data.get("audiobook")
    if audiobook is not None and not isinstance(audiobook, dict):
        raise InputFormatError("'audiobook' must be an object or null")
    editions = data.get("editions")
    if editions is None:
        editions = []
    if not isinstance(editions, list):
        raise InputFormatError("'editions' must be a list")

    parsed_editions: list[EditionRecord] = []
    for index, edition in enumerate(editions):
        if not isinstance(edition, dict):
            logger.debug("Skipping edition %d: not an object", index)
            continue
        parsed_editions.append(parse_edition_record(edition))

    return ReviewInput(
        book=parse_book_record(data["book"]),
        audiobook=parse_audiobook_record(audiobook),
        editions=parsed_editions,
    )


def load_review_input(path: Path) -> ReviewInput:
    """Read and parse a review input JSON file.

    Raises:
        InputFormatError: If the file is unreadable, not JSON, or misshapen.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFormatError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputFormatError(f"{path} is not valid JSON: {exc}") from exc
    return parse_review_input(data)

# ABOUTME: Shared pytest fixtures for shelfsync tests.
# ABOUTME: Provides an in-memory settings fake, a SQLite-backed repository, and sample records.

import json
from collections.abc import Iterator
from pathlib import Path

import pytest

from shelfsync.db.connection import open_settings
from shelfsync.db.repository import SqliteSettingsRepository, check_mapping
from shelfsync.metadata.text import normalize_whitespace, tag_key
from shelfsync.metadata.types import AudiobookRecord, BookRecord, EditionRecord


class InMemorySettingsRepository:
    """Dict-backed SettingsRepository with the same rules as the SQLite one."""

    def __init__(self) -> None:
        self.defaults: dict[str, str] = {}
        self.prefer_audiobook_covers = False
        self._mappings: dict[str, tuple[str, str]] = {}
        self._ignored: dict[str, str] = {}

    def get_field_default(self, field_name: str) -> str | None:
        return self.defaults.get(field_name)

    def set_field_default(self, field_name: str, source_id: str) -> None:
        self.defaults[field_name] = source_id

    def clear_field_default(self, field_name: str) -> None:
        if field_name not in self.defaults:
            raise ValueError(f"No default stored for field '{field_name}'")
        del self.defaults[field_name]

    def field_defaults(self) -> dict[str, str]:
        return dict(sorted(self.defaults.items()))

    def get_prefer_audiobook_covers(self) -> bool:
        return self.prefer_audiobook_covers

    def set_prefer_audiobook_covers(self, value: bool) -> None:
        self.prefer_audiobook_covers = bool(value)

    def map_tag(self, from_tag: str, to_tag: str) -> None:
        source, target = check_mapping(from_tag, to_tag)
        self._mappings[tag_key(source)] = (source, target)

    def unmap_tag(self, from_tag: str) -> None:
        if self._mappings.pop(tag_key(from_tag), None) is None:
            raise ValueError(f"Category '{from_tag}' is not mapped")

    def unmap_all_to(self, to_tag: str) -> list[str]:
        removed = [
            (key, source)
            for key, (source, target) in sorted(self._mappings.items())
            if tag_key(target) == tag_key(to_tag)
        ]
        for key, _ in removed:
            del self._mappings[key]
        return [source for _, source in removed]

    def ignore_tag(self, tag: str) -> None:
        clean = normalize_whitespace(tag)
        if not clean:
            raise ValueError("Cannot ignore an empty category")
        self._ignored.setdefault(tag_key(clean), clean)

    def unignore_tag(self, tag: str) -> None:
        if self._ignored.pop(tag_key(tag), None) is None:
            raise ValueError(f"Category '{tag}' is not ignored")

    def mappings(self) -> dict[str, str]:
        return {source: target for _, (source, target) in sorted(self._mappings.items())}

    def ignored_tags(self) -> list[str]:
        return [tag for _, tag in sorted(self._ignored.items())]


@pytest.fixture
def settings() -> InMemorySettingsRepository:
    """A fresh in-memory settings repository."""
    return InMemorySettingsRepository()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path for a throwaway settings database."""
    return tmp_path / "settings.db"


@pytest.fixture
def sqlite_settings(db_path: Path) -> Iterator[SqliteSettingsRepository]:
    """A SqliteSettingsRepository on a fresh database, closed after the test."""
    conn = open_settings(db_path)
    yield SqliteSettingsRepository(conn)
    conn.close()


@pytest.fixture
def sample_book() -> BookRecord:
    """Primary record for a well-known novel."""
    return BookRecord(
        title="Dune",
        authors=["Frank Herbert"],
        description="<p>Set on the desert planet Arrakis.</p>",
        publisher="Ace",
        published_date="2005-08-02",
        original_published_date="1965",
        page_count=896,
        isbn10="0441013597",
        isbn13="9780441013593",
        thumbnail="https://covers.example/dune-ace.jpg",
        language="en",
        categories=["Fiction, Science Fiction", "sci-fi"],
    )


@pytest.fixture
def sample_audiobook() -> AudiobookRecord:
    """Audiobook record for the sample novel."""
    return AudiobookRecord(
        has_audiobook=True,
        title="Dune",
        narrators=["Scott Brick", "Orlagh Cassidy"],
        description="<p>A <b>stunning</b> blend of adventure &amp; mysticism.</p>",
        publisher="Macmillan Audio",
        published_date="2006-10-01T00:00:00.000Z",
        thumbnail="https://covers.example/dune-audio.jpg",
        total_duration_hours=21.02,
        chapter_count=48,
        asin="B002V1OF70",
        categories=["Science Fiction & Fantasy"],
    )


@pytest.fixture
def sample_editions() -> list[EditionRecord]:
    """Two alternate editions of the sample novel."""
    return [
        EditionRecord(
            title="Dune",
            publisher="Chilton Books",
            published_date="1965-08-01",
            page_count=412,
            categories=["Space Opera"],
        ),
        EditionRecord(
            title="Dune (Deluxe Edition)",
            publisher="Ace",
            published_date="2019-10-01",
            page_count=704,
        ),
    ]


@pytest.fixture
def review_input(tmp_path: Path) -> Path:
    """A review input JSON file with book, audiobook, and one edition."""
    data = {
        "book": {
            "title": "The Hobbit",
            "authors": ["J.R.R. Tolkien"],
            "description": "A hobbit goes on an adventure.",
            "publisher": "Houghton Mifflin",
            "publishedDate": "2020-06-01",
            "pageCount": 300,
            "isbn13": "9780547928227",
            "categories": ["Fantasy", "Juvenile Fiction"],
        },
        "audiobook": {
            "hasAudiobook": True,
            "title": "The Hobbit",
            "narrators": [{"name": "Andy Serkis"}],
            "description": "<p>Bilbo Baggins is a hobbit.</p>",
            "publisher": "HarperCollins",
            "publishedDate": "2019-11-15",
            "image": "https://covers.example/hobbit-audio.jpg",
            "totalDurationHours": 10.4,
            "genres": ["Fantasy"],
        },
        "editions": [
            {"title": "The Hobbit", "publisher": "Allen & Unwin", "pageCount": 310},
        ],
    }
    path = tmp_path / "hobbit.json"
    path.write_text(json.dumps(data))
    return path

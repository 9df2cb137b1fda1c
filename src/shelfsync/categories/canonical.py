# ABOUTME: Category string splitting and canonical casing.
# ABOUTME: Turns raw provider strings like "FICTION / fantasy, Sci-fi" into display tags.

import re
from collections.abc import Iterable

from shelfsync.metadata.text import normalize_whitespace, tag_key

# Genres joined by "&" that mean one thing and must survive conjunction splitting.
PRESERVED_COMPOUND_GENRES = (
    "health & fitness",
    "health & wellness",
    "home & garden",
)

# All-caps words up to this length are treated as acronyms and left alone (YA, LGBT, USA).
_ACRONYM_MAX_LENGTH = 4

_AMPERSAND_RE = re.compile(r"\s*&\s*")
_AND_RE = re.compile(r"\s+and\s+", re.IGNORECASE)

# Built-in alias mappings offered by `shelfsync category seed-defaults`.
DEFAULT_MAPPINGS: dict[str, str] = {
    "sci-fi": "Science Fiction",
    "scifi": "Science Fiction",
    "sf": "Science Fiction",
    "fantasy fiction": "Fantasy",
    "fiction / fantasy": "Fantasy",
    "young adult fiction": "Young Adult",
    "ya fiction": "Young Adult",
    "ya": "Young Adult",
    "teen fiction": "Young Adult",
    "juvenile fiction": "Children's Fiction",
    "children's books": "Children's Fiction",
    "kids books": "Children's Fiction",
    "mystery & detective": "Mystery",
    "mystery fiction": "Mystery",
    "detective fiction": "Mystery",
    "suspense": "Thriller",
    "romance fiction": "Romance",
    "love stories": "Romance",
    "historical novel": "Historical Fiction",
    "biography & autobiography": "Biography",
    "biographies": "Biography",
    "autobiography": "Biography",
    "self help": "Self-Help",
    "personal development": "Self-Help",
    "business & economics": "Business",
    "economics": "Business",
    "health & fitness": "Health",
    "fitness": "Health",
    "cookbooks": "Cooking",
    "recipes": "Cooking",
    "travel guides": "Travel",
    "guidebooks": "Travel",
    "computers": "Technology",
    "programming": "Technology",
    "software": "Technology",
}


def _capitalize(part: str) -> str:
    if part.isalpha() and part.isupper() and len(part) <= _ACRONYM_MAX_LENGTH:
        return part
    for index, char in enumerate(part):
        if char.isalpha():
            return part[:index] + char.upper() + part[index + 1 :].lower()
        # "1920s", "19th": nothing to capitalize after a leading number.
        if char.isdigit():
            return part.lower()
    return part


def canonicalize(tag: str) -> str:
    """Canonical display form of a tag.

    Whitespace is trimmed and collapsed, every word is capitalized (each
    hyphen-separated part on its own, so "sci-fi" becomes "Sci-Fi"), and short
    all-caps acronyms are kept as they are. Applying it twice changes nothing.
    """
    words = normalize_whitespace(tag).split(" ")
    return " ".join("-".join(_capitalize(part) for part in word.split("-")) for word in words)


def _is_preserved(part: str, keep: frozenset[str]) -> bool:
    key = tag_key(part)
    if key in keep:
        return True
    return any(compound in key for compound in PRESERVED_COMPOUND_GENRES)


def _split_conjunctions(part: str) -> list[str]:
    pieces: list[str] = []
    for chunk in _AMPERSAND_RE.split(part):
        pieces.extend(_AND_RE.split(chunk))
    return pieces


def split_raw_category(
    value: str,
    *,
    split_conjunctions: bool = False,
    keep_intact: Iterable[str] = (),
) -> list[str]:
    """Split one raw provider string into individual tags.

    Commas always separate tags. With split_conjunctions, "&" and " and " do
    too, except inside preserved compound genres and any string listed in
    keep_intact (compared case-insensitively). Empty pieces are dropped.
    """
    keep = frozenset(tag_key(item) for item in keep_intact)
    if tag_key(value) in keep:
        parts = [value]
    else:
        parts = value.split(",")

    tags: list[str] = []
    for part in parts:
        if split_conjunctions and not _is_preserved(part, keep):
            pieces = _split_conjunctions(part)
        else:
            pieces = [part]
        tags.extend(clean for clean in (normalize_whitespace(p) for p in pieces) if clean)
    return tags


def split_categories(
    values: Iterable[str],
    *,
    split_conjunctions: bool = False,
    keep_intact: Iterable[str] = (),
) -> list[str]:
    """Split every raw string in values; non-string entries are skipped."""
    keep = list(keep_intact)
    tags: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        tags.extend(
            split_raw_category(value, split_conjunctions=split_conjunctions, keep_intact=keep)
        )
    return tags

# ABOUTME: Settings repository: field defaults, cover preference, mapping graph, ignore set.
# ABOUTME: SettingsRepository is the injected protocol; SqliteSettingsRepository persists it.

import json
import logging
import sqlite3
from typing import Protocol, runtime_checkable

from shelfsync.metadata.text import normalize_whitespace, tag_key

logger = logging.getLogger(__name__)

PREFER_AUDIOBOOK_COVERS = "prefer_audiobook_covers"


@runtime_checkable
class SettingsRepository(Protocol):
    """Protocol for the long-lived user settings the core reads and edits.

    Every write is a single-key, last-write-wins update. Tag arguments are
    matched case-insensitively after whitespace normalization.
    """

    def get_field_default(self, field_name: str) -> str | None: ...

    def set_field_default(self, field_name: str, source_id: str) -> None: ...

    def clear_field_default(self, field_name: str) -> None: ...

    def field_defaults(self) -> dict[str, str]: ...

    def get_prefer_audiobook_covers(self) -> bool: ...

    def set_prefer_audiobook_covers(self, value: bool) -> None: ...

    def map_tag(self, from_tag: str, to_tag: str) -> None: ...

    def unmap_tag(self, from_tag: str) -> None: ...

    def unmap_all_to(self, to_tag: str) -> list[str]: ...

    def ignore_tag(self, tag: str) -> None: ...

    def unignore_tag(self, tag: str) -> None: ...

    def mappings(self) -> dict[str, str]: ...

    def ignored_tags(self) -> list[str]: ...


def check_mapping(from_tag: str, to_tag: str) -> tuple[str, str]:
    """Validate and clean a mapping edge.

    Returns:
        The whitespace-normalized (from_tag, to_tag) pair.

    Raises:
        ValueError: If either side is empty or the edge maps a tag onto itself.
    """
    source = normalize_whitespace(from_tag)
    target = normalize_whitespace(to_tag)
    if not source or not target:
        raise ValueError("Category mappings need both a source and a target")
    if tag_key(source) == tag_key(target):
        raise ValueError(f"Cannot map '{source}' onto itself")
    return source, target


class SqliteSettingsRepository:
    """Wraps a sqlite3 connection and implements SettingsRepository."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- Field defaults ---

    def get_field_default(self, field_name: str) -> str | None:
        cursor = self._conn.execute(
            "SELECT source_id FROM field_defaults WHERE field_name = ?", (field_name,)
        )
        row = cursor.fetchone()
        return row[0] if row else None

    def set_field_default(self, field_name: str, source_id: str) -> None:
        """Store the preferred source for a field, replacing any previous one."""
        self._conn.execute(
            "INSERT INTO field_defaults (field_name, source_id) VALUES (?, ?) "
            "ON CONFLICT(field_name) DO UPDATE SET source_id = excluded.source_id, "
            "date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now')",
            (field_name, source_id),
        )
        self._conn.commit()
        logger.info("Default source for %s set to %s", field_name, source_id)

    def clear_field_default(self, field_name: str) -> None:
        """Remove the stored default for a field.

        Raises:
            ValueError: If no default is stored for the field.
        """
        cursor = self._conn.execute(
            "DELETE FROM field_defaults WHERE field_name = ?", (field_name,)
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"No default stored for field '{field_name}'")
        logger.info("Default source for %s cleared", field_name)

    def field_defaults(self) -> dict[str, str]:
        """All stored field defaults, ordered by field name."""
        cursor = self._conn.execute(
            "SELECT field_name, source_id FROM field_defaults ORDER BY field_name"
        )
        return {row[0]: row[1] for row in cursor.fetchall()}

    # --- Scalar preferences ---

    def get_prefer_audiobook_covers(self) -> bool:
        cursor = self._conn.execute(
            "SELECT value FROM preferences WHERE key = ?", (PREFER_AUDIOBOOK_COVERS,)
        )
        row = cursor.fetchone()
        if row is None:
            return False
        try:
            return bool(json.loads(row[0]))
        except json.JSONDecodeError:
            logger.warning("Unreadable %s preference %r, using false", PREFER_AUDIOBOOK_COVERS, row[0])
            return False

    def set_prefer_audiobook_covers(self, value: bool) -> None:
        self._conn.execute(
            "INSERT INTO preferences (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
            "date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now')",
            (PREFER_AUDIOBOOK_COVERS, json.dumps(bool(value))),
        )
        self._conn.commit()
        logger.info("Prefer audiobook covers set to %s", bool(value))

    # --- Mapping graph ---

    def map_tag(self, from_tag: str, to_tag: str) -> None:
        """Add or replace the outbound edge from_tag -> to_tag.

        Raises:
            ValueError: If the edge is empty or maps a tag onto itself.
        """
        source, target = check_mapping(from_tag, to_tag)
        self._conn.execute(
            "INSERT INTO category_mappings (from_key, from_tag, to_tag) VALUES (?, ?, ?) "
            "ON CONFLICT(from_key) DO UPDATE SET from_tag = excluded.from_tag, "
            "to_tag = excluded.to_tag",
            (tag_key(source), source, target),
        )
        self._conn.commit()
        logger.info("Category '%s' now maps to '%s'", source, target)

    def unmap_tag(self, from_tag: str) -> None:
        """Remove the outbound edge of a tag.

        Raises:
            ValueError: If the tag has no mapping.
        """
        cursor = self._conn.execute(
            "DELETE FROM category_mappings WHERE from_key = ?", (tag_key(from_tag),)
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"Category '{from_tag}' is not mapped")
        logger.info("Removed mapping for category '%s'", from_tag)

    def unmap_all_to(self, to_tag: str) -> list[str]:
        """Remove every edge pointing at to_tag. Returns the freed source tags."""
        wanted = tag_key(to_tag)
        removed = [
            (key, tag)
            for key, tag, target in self._mapping_rows()
            if tag_key(target) == wanted
        ]
        for key, _ in removed:
            self._conn.execute("DELETE FROM category_mappings WHERE from_key = ?", (key,))
        self._conn.commit()
        if removed:
            logger.info("Removed %d mapping(s) to '%s'", len(removed), to_tag)
        return [tag for _, tag in removed]

    def mappings(self) -> dict[str, str]:
        """All edges as {from_tag: to_tag}, ordered by source tag."""
        return {tag: target for _, tag, target in self._mapping_rows()}

    def _mapping_rows(self) -> list[tuple[str, str, str]]:
        cursor = self._conn.execute(
            "SELECT from_key, from_tag, to_tag FROM category_mappings ORDER BY from_key"
        )
        return [(row[0], row[1], row[2]) for row in cursor.fetchall()]

    # --- Ignore set ---

    def ignore_tag(self, tag: str) -> None:
        """Add a tag to the ignore set. Idempotent.

        Raises:
            ValueError: If the tag is empty.
        """
        clean = normalize_whitespace(tag)
        if not clean:
            raise ValueError("Cannot ignore an empty category")
        self._conn.execute(
            "INSERT OR IGNORE INTO ignored_categories (tag_key, tag) VALUES (?, ?)",
            (tag_key(clean), clean),
        )
        self._conn.commit()
        logger.info("Category '%s' will be ignored", clean)

    def unignore_tag(self, tag: str) -> None:
        """Remove a tag from the ignore set.

        Raises:
            ValueError: If the tag is not ignored.
        """
        cursor = self._conn.execute(
            "DELETE FROM ignored_categories WHERE tag_key = ?", (tag_key(tag),)
        )
        self._conn.commit()
        if cursor.rowcount == 0:
            raise ValueError(f"Category '{tag}' is not ignored")
        logger.info("Category '%s' is no longer ignored", tag)

    def ignored_tags(self) -> list[str]:
        """The ignore set, alphabetically by key."""
        cursor = self._conn.execute("SELECT tag FROM ignored_categories ORDER BY tag_key")
        return [row[0] for row in cursor.fetchall()]

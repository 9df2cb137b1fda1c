# ABOUTME: SQL DDL statements for the shelfsync settings database.
# ABOUTME: Field defaults, scalar preferences, the category mapping graph, and the ignore set.

SCHEMA_V1 = """
-- Preferred source per reconcilable field, one row per field
CREATE TABLE field_defaults (
    field_name    TEXT PRIMARY KEY,
    source_id     TEXT NOT NULL,
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Scalar switches such as prefer_audiobook_covers, stored as JSON text
CREATE TABLE preferences (
    key           TEXT PRIMARY KEY,
    value         TEXT NOT NULL,
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Mapping graph: at most one outbound edge per from_key (the PRIMARY KEY)
CREATE TABLE category_mappings (
    from_key   TEXT PRIMARY KEY,
    from_tag   TEXT NOT NULL,
    to_tag     TEXT NOT NULL,
    date_added TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_category_mappings_to_tag ON category_mappings(to_tag);

-- Ignore set
CREATE TABLE ignored_categories (
    tag_key    TEXT PRIMARY KEY,
    tag        TEXT NOT NULL,
    date_added TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

# Sequential (version, sql) migrations applied on top of SCHEMA_V1.
MIGRATIONS: list[tuple[int, str]] = []

# ABOUTME: Public API for the shelfsync settings database layer.
# ABOUTME: Exports connection management and the settings repository.

from shelfsync.db.connection import DEFAULT_DB_PATH, open_settings
from shelfsync.db.repository import SettingsRepository, SqliteSettingsRepository

__all__ = [
    "DEFAULT_DB_PATH",
    "SettingsRepository",
    "SqliteSettingsRepository",
    "open_settings",
]

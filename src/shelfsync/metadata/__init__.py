# ABOUTME: Metadata package: provider records, candidates, and the source registry.
# ABOUTME: The field reconciler lives in shelfsync.metadata.reconciler.

from shelfsync.metadata.candidate import CandidateValue, FieldName, SourceId, SourceKind
from shelfsync.metadata.parser import (
    parse_audiobook_record,
    parse_book_record,
    parse_edition_record,
)
from shelfsync.metadata.sources import build_field_candidates
from shelfsync.metadata.types import AudiobookRecord, BookRecord, EditionRecord

__all__ = [
    "AudiobookRecord",
    "BookRecord",
    "CandidateValue",
    "EditionRecord",
    "FieldName",
    "SourceId",
    "SourceKind",
    "build_field_candidates",
    "parse_audiobook_record",
    "parse_book_record",
    "parse_edition_record",
]

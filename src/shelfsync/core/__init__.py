# ABOUTME: Review-session orchestration on top of the metadata and category layers.
# ABOUTME: Exports BookSession and the PublishRecord it finalizes into.

from shelfsync.core.assembler import PublishRecord, assemble_record
from shelfsync.core.session import BookSession, collect_raw_categories

__all__ = [
    "BookSession",
    "PublishRecord",
    "assemble_record",
    "collect_raw_categories",
]

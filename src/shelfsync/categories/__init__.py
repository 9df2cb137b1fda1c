# ABOUTME: Category package: canonicalization, classification, similarity, normalization.
# ABOUTME: Exports the normalizer, its result types, and the selection state.

from shelfsync.categories.canonical import canonicalize
from shelfsync.categories.normalizer import (
    CategoryNormalizer,
    CategorySelection,
    NormalizationResult,
    ProcessedCategory,
    RawCategory,
    seed_default_mappings,
)
from shelfsync.categories.similarity import SIMILARITY_THRESHOLD, explain_similarity

__all__ = [
    "SIMILARITY_THRESHOLD",
    "CategoryNormalizer",
    "CategorySelection",
    "NormalizationResult",
    "ProcessedCategory",
    "RawCategory",
    "canonicalize",
    "explain_similarity",
    "seed_default_mappings",
]

# ABOUTME: Per-book review session: reconciled fields plus curated categories.
# ABOUTME: Every user action goes through here so selections and settings stay consistent.

import logging
from collections.abc import Sequence

from shelfsync.categories.canonical import canonicalize
from shelfsync.categories.normalizer import (
    CategoryNormalizer,
    CategorySelection,
    NormalizationResult,
    RawCategory,
)
from shelfsync.core.assembler import PublishRecord, assemble_record
from shelfsync.db.repository import SettingsRepository
from shelfsync.metadata.candidate import CandidateValue, FieldName, SourceId
from shelfsync.metadata.reconciler import FieldReconciler, FieldResolution, FieldSelections
from shelfsync.metadata.sources import build_field_candidates
from shelfsync.metadata.text import tag_key
from shelfsync.metadata.types import AudiobookRecord, BookRecord, EditionRecord

logger = logging.getLogger(__name__)


def collect_raw_categories(
    book: BookRecord,
    audiobook: AudiobookRecord | None = None,
    editions: Sequence[EditionRecord] = (),
) -> list[RawCategory]:
    """Gather every source's category strings with provenance labels."""
    raw = [RawCategory(value, "original") for value in book.categories]
    if audiobook is not None and audiobook.has_audiobook:
        raw.extend(RawCategory(value, "audiobook") for value in audiobook.categories)
    for index, edition in enumerate(editions):
        raw.extend(RawCategory(value, f"edition {index + 1}") for value in edition.categories)
    return raw


class BookSession:
    """State for reviewing one book.

    Audiobook and edition data may arrive after the session starts; setting
    them recomputes candidates and categories, and fields the user has not
    touched are re-initialized for the new candidate set.
    """

    def __init__(
        self,
        book: BookRecord,
        settings: SettingsRepository,
        audiobook: AudiobookRecord | None = None,
        editions: Sequence[EditionRecord] = (),
    ) -> None:
        self.book = book
        self.settings = settings
        self.audiobook = audiobook
        self.editions = list(editions)
        self.selections = FieldSelections()
        self.category_selection = CategorySelection()
        self._reconciler = FieldReconciler(settings)
        self._normalizer = CategoryNormalizer(settings)
        self._candidates: dict[FieldName, list[CandidateValue]] = {}
        self._categories = NormalizationResult()
        self.refresh()

    # --- Data arrival ---

    def set_audiobook(self, audiobook: AudiobookRecord | None) -> None:
        self.audiobook = audiobook
        self.refresh()

    def set_editions(self, editions: Sequence[EditionRecord]) -> None:
        self.editions = list(editions)
        self.refresh()

    def refresh(self) -> None:
        """Recompute candidates, resolutions, and categories from current state."""
        self._candidates = build_field_candidates(self.book, self.audiobook, self.editions)
        self._reconciler.reconcile(self._candidates, self.selections)
        self.refresh_categories()

    def refresh_categories(self) -> None:
        audiobook = self.audiobook
        genres = audiobook.categories if audiobook is not None and audiobook.has_audiobook else []
        self._categories = self._normalizer.normalize(
            collect_raw_categories(self.book, self.audiobook, self.editions),
            audiobook_genres=genres,
            split_conjunctions=self.audiobook is not None,
        )
        self.category_selection.refresh(self._categories)

    # --- Fields ---

    @property
    def candidates(self) -> dict[FieldName, list[CandidateValue]]:
        return {name: list(values) for name, values in self._candidates.items()}

    @property
    def resolutions(self) -> dict[FieldName, FieldResolution]:
        return self._reconciler.reconcile(self._candidates, self.selections)

    def resolution(self, field_name: FieldName) -> FieldResolution:
        return self.resolutions[field_name]

    def select_source(
        self, field_name: FieldName, source: SourceId, *, remember: bool = False
    ) -> FieldResolution:
        """Choose a source for a field, optionally saving it as the field default.

        Raises:
            ValueError: If the source has no candidate for the field.
        """
        options = self._candidates.get(field_name, [])
        if not any(candidate.source == source for candidate in options):
            raise ValueError(f"No {field_name.value} candidate from source '{source}'")
        self.selections.choose(field_name, source)
        if remember:
            self.settings.set_field_default(field_name.value, str(source))
        return self._reconciler.resolve(field_name, options, self.selections)

    # --- Categories ---

    @property
    def categories(self) -> NormalizationResult:
        return self._categories

    @property
    def selected_categories(self) -> list[str]:
        return self.category_selection.selected

    def _require(self, tag: str) -> str:
        category = self._categories.get(tag)
        if category is None:
            raise ValueError(f"Unknown category '{tag}'")
        return category.processed

    def _reselect(self, tag: str) -> None:
        category = self._categories.get(tag)
        if category is not None and not category.is_ignored:
            self.category_selection.add(category.processed)

    def toggle_category(self, tag: str) -> bool:
        return self.category_selection.toggle(tag)

    def select_all_categories(self) -> None:
        self.category_selection.select_all()

    def deselect_all_categories(self) -> None:
        self.category_selection.deselect_all()

    def ignore_category(self, tag: str) -> None:
        """Ignore a tag from now on and drop it from this book's selection."""
        processed = self._require(tag)
        self.settings.ignore_tag(processed)
        self.category_selection.discard(processed)
        self.refresh_categories()

    def unignore_category(self, tag: str) -> None:
        """Stop ignoring a tag and select it again."""
        processed = self._require(tag)
        self.settings.unignore_tag(processed)
        self.refresh_categories()
        self._reselect(processed)

    def merge_category(self, source: str, target: str) -> None:
        """Map source onto target for good; the selection follows the merge.

        Raises:
            ValueError: If source is not a category of this book, or the
                mapping is a self-map.
        """
        source_tag = self._require(source)
        existing = self._categories.get(target)
        target_tag = existing.processed if existing is not None else canonicalize(target)
        was_selected = self.category_selection.is_selected(source_tag)
        self.settings.map_tag(source_tag, target_tag)
        self.category_selection.discard(source_tag)
        self.refresh_categories()
        merged = self._categories.get(target_tag)
        if was_selected and merged is not None and not merged.is_ignored:
            self.category_selection.add(merged.processed)

    def accept_suggestion(self, tag: str, suggestion: str) -> None:
        """Merge tag into one of its similarity suggestions.

        Raises:
            ValueError: If suggestion is not currently suggested for tag.
        """
        tag_name = self._require(tag)
        suggested = self._categories.similar.get(tag_name, [])
        if tag_key(suggestion) not in {tag_key(item) for item in suggested}:
            raise ValueError(f"'{suggestion}' is not a suggested merge for '{tag_name}'")
        self.merge_category(tag_name, suggestion)

    def unmap_category(self, tag: str) -> list[str]:
        """Undo mappings involving a tag.

        A tag with its own outbound edge is unmapped directly. Otherwise every
        edge pointing at it is removed. Freed tags come back selected.

        Returns:
            The source tags whose mappings were removed.

        Raises:
            ValueError: If no mapping involves the tag.
        """
        outbound = {tag_key(source): source for source in self.settings.mappings()}
        if tag_key(tag) in outbound:
            self.settings.unmap_tag(outbound[tag_key(tag)])
            freed = [outbound[tag_key(tag)]]
        else:
            category = self._categories.get(tag)
            target = category.processed if category is not None else tag
            freed = self.settings.unmap_all_to(target)
            if not freed:
                raise ValueError(f"Category '{tag}' is not mapped")
        self.refresh_categories()
        for source in freed:
            self._reselect(source)
        return freed

    # --- Output ---

    def finalize(self) -> PublishRecord:
        """Assemble the publish record from the current state."""
        record = assemble_record(
            self.book, self.audiobook, self.resolutions, self.selected_categories
        )
        logger.debug("Finalized '%s' with %d categories", record.title, len(record.categories))
        return record

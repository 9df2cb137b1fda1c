# ABOUTME: Category normalization pipeline and the per-session category selection.
# ABOUTME: Split, canonicalize, map, ignore, classify, then suggest similar tags.

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from shelfsync.categories.canonical import DEFAULT_MAPPINGS, canonicalize, split_raw_category
from shelfsync.categories.classify import is_geographical, is_temporal
from shelfsync.categories.similarity import SimilarityIndex
from shelfsync.db.repository import SettingsRepository
from shelfsync.metadata.text import tag_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawCategory:
    """A category string exactly as a provider sent it, plus its source label."""

    value: str
    source: str


@dataclass
class ProcessedCategory:
    """One display-ready tag after a normalization pass.

    mapped_to_this lists every tag absorbed into this entry during the pass.
    mapped_from is set only on an entry that exists because a mapping edge
    produced it; it names the first absorbed tag.
    """

    original: str
    processed: str
    is_ignored: bool = False
    is_mapped: bool = False
    mapped_from: str | None = None
    mapped_to_this: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    is_geographical: bool = False
    is_temporal: bool = False

    @property
    def key(self) -> str:
        return tag_key(self.processed)

    @property
    def is_protected(self) -> bool:
        return self.is_geographical or self.is_temporal


@dataclass
class NormalizationResult:
    """Output of one pass: ordered categories plus similarity suggestions."""

    categories: list[ProcessedCategory] = field(default_factory=list)
    similar: dict[str, list[str]] = field(default_factory=dict)

    @property
    def active(self) -> list[str]:
        """Processed tags that are not ignored, in result order."""
        return [category.processed for category in self.categories if not category.is_ignored]

    def get(self, tag: str) -> ProcessedCategory | None:
        """Find a category by tag, case-insensitively."""
        key = tag_key(tag)
        for category in self.categories:
            if category.key == key:
                return category
        return None


@dataclass
class _Folded:
    display: str
    original: str
    sources: list[str]

    def add_source(self, source: str) -> None:
        if source not in self.sources:
            self.sources.append(source)


def _union(target: list[str], sources: Iterable[str]) -> None:
    for source in sources:
        if source not in target:
            target.append(source)


class CategoryNormalizer:
    """Turns raw provider categories into a deduplicated, curated tag list.

    Mapping edges and the ignore set are read from the injected settings on
    every pass; the normalizer never writes them. Passes are pure: the same
    raw input and settings always give the same result.
    """

    def __init__(self, settings: SettingsRepository) -> None:
        self._settings = settings

    def normalize(
        self,
        raw: Sequence[RawCategory],
        *,
        audiobook_genres: Iterable[str] = (),
        split_conjunctions: bool = False,
    ) -> NormalizationResult:
        """Run the full pipeline over raw categories.

        Args:
            raw: Category strings with their source labels.
            audiobook_genres: Genre strings from the audiobook, kept unsplit.
            split_conjunctions: Also split on "&" and " and " (safe once the
                audiobook status is known).
        """
        folded = self._fold(raw, list(audiobook_genres), split_conjunctions)

        mappings = {tag_key(source): target for source, target in self._settings.mappings().items()}
        ignored = {tag_key(tag) for tag in self._settings.ignored_tags()}

        natives: dict[str, ProcessedCategory] = {}
        absorbed: dict[str, list[_Folded]] = {}
        targets: dict[str, str] = {}
        for key, entry in folded.items():
            target = canonicalize(mappings[key]) if key in mappings else ""
            if key in ignored or not target or tag_key(target) == key:
                natives[key] = ProcessedCategory(
                    original=entry.original,
                    processed=entry.display,
                    sources=list(entry.sources),
                )
                continue
            target_key = tag_key(target)
            logger.debug("Mapping category '%s' to '%s'", entry.display, target)
            targets.setdefault(target_key, target)
            absorbed.setdefault(target_key, []).append(entry)

        categories: dict[str, ProcessedCategory] = dict(natives)
        for target_key, entries in absorbed.items():
            names = [entry.display for entry in entries]
            existing = categories.get(target_key)
            if existing is not None:
                existing.mapped_to_this.extend(names)
                for entry in entries:
                    _union(existing.sources, entry.sources)
                continue
            category = ProcessedCategory(
                original=entries[0].original,
                processed=targets[target_key],
                is_mapped=True,
                mapped_from=names[0],
                mapped_to_this=names,
            )
            for entry in entries:
                _union(category.sources, entry.sources)
            categories[target_key] = category

        for key, category in categories.items():
            category.is_ignored = key in ignored
            category.is_geographical = is_geographical(category.processed)
            category.is_temporal = is_temporal(category.processed)

        ordered = sorted(categories.values(), key=lambda c: (c.is_ignored, c.key))
        eligible = [
            c.processed for c in ordered if not c.is_ignored and not c.is_protected and not c.is_mapped
        ]
        return NormalizationResult(
            categories=ordered, similar=SimilarityIndex(eligible).suggestions()
        )

    def _fold(
        self,
        raw: Sequence[RawCategory],
        audiobook_genres: list[str],
        split_conjunctions: bool,
    ) -> dict[str, _Folded]:
        folded: dict[str, _Folded] = {}
        for item in raw:
            if not isinstance(item.value, str):
                logger.debug("Dropping non-text category %r from %s", item.value, item.source)
                continue
            parts = split_raw_category(
                item.value, split_conjunctions=split_conjunctions, keep_intact=audiobook_genres
            )
            for part in parts:
                display = canonicalize(part)
                key = tag_key(display)
                if key not in folded:
                    folded[key] = _Folded(display=display, original=part, sources=[])
                folded[key].add_source(item.source)
        return folded


class CategorySelection:
    """The ordered set of tags the user wants published.

    Until the user touches it, every refresh resets it to all active tags.
    Afterwards it is kept, minus tags that disappeared or became ignored.
    Ignored tags can never be selected.
    """

    def __init__(self) -> None:
        self._selected: list[str] = []
        self._result = NormalizationResult()
        self.interacted = False

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def is_selected(self, tag: str) -> bool:
        key = tag_key(tag)
        return any(tag_key(selected) == key for selected in self._selected)

    def refresh(self, result: NormalizationResult) -> None:
        """Rebase the selection on a new normalization result."""
        self._result = result
        if not self.interacted:
            self._selected = result.active
            return
        active = {tag_key(tag): tag for tag in result.active}
        kept: list[str] = []
        for tag in self._selected:
            current = active.get(tag_key(tag))
            if current is not None and current not in kept:
                kept.append(current)
        self._selected = kept

    def _selectable(self, tag: str) -> str:
        category = self._result.get(tag)
        if category is None:
            raise ValueError(f"Unknown category '{tag}'")
        if category.is_ignored:
            raise ValueError(f"Category '{category.processed}' is ignored")
        return category.processed

    def add(self, tag: str) -> None:
        """Select a tag. Raises ValueError if it is unknown or ignored."""
        processed = self._selectable(tag)
        self.interacted = True
        if not self.is_selected(processed):
            self._selected.append(processed)

    def discard(self, tag: str) -> None:
        """Deselect a tag if it is selected."""
        self.interacted = True
        key = tag_key(tag)
        self._selected = [selected for selected in self._selected if tag_key(selected) != key]

    def toggle(self, tag: str) -> bool:
        """Flip a tag's selection. Returns whether it is now selected."""
        if self.is_selected(tag):
            self.discard(tag)
            return False
        self.add(tag)
        return True

    def select_all(self) -> None:
        self.interacted = True
        self._selected = self._result.active

    def deselect_all(self) -> None:
        self.interacted = True
        self._selected = []


def seed_default_mappings(settings: SettingsRepository) -> list[tuple[str, str]]:
    """Install the built-in alias mappings without touching existing edges.

    Returns:
        The (from_tag, to_tag) edges that were added.
    """
    existing = {tag_key(source) for source in settings.mappings()}
    added: list[tuple[str, str]] = []
    for source, target in DEFAULT_MAPPINGS.items():
        if tag_key(source) in existing or tag_key(source) == tag_key(target):
            continue
        settings.map_tag(source, target)
        added.append((source, target))
    return added

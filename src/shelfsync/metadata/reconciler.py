# ABOUTME: Field reconciler: picks one active candidate per field for a review session.
# ABOUTME: Honors user choices, persisted field defaults, and per-field smart defaults.

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from shelfsync.db.repository import SettingsRepository
from shelfsync.metadata.candidate import (
    AUDIOBOOK,
    ORIGINAL,
    CandidateValue,
    FieldName,
    SourceId,
)
from shelfsync.metadata.dates import extract_year

logger = logging.getLogger(__name__)

# A year-only date survives only if some specific date is more than this many
# years later, i.e. it looks like a real first-publication year.
YEAR_ONLY_MARGIN = 2

# Date spreads at or below this many years are treated as ambiguous.
DATE_RANGE_TIE_YEARS = 1


@dataclass
class FieldSelections:
    """Per-session source choices.

    chosen holds the active source per field. Fields in user_selected were set
    by an explicit user action and are never re-initialized automatically.
    evaluated records the candidate signature the automatic pass last saw, so
    initialization re-runs once per new candidate set, not on every refresh.
    """

    chosen: dict[FieldName, SourceId] = field(default_factory=dict)
    user_selected: set[FieldName] = field(default_factory=set)
    evaluated: dict[FieldName, tuple[SourceId, ...]] = field(default_factory=dict)

    def choose(self, field_name: FieldName, source: SourceId) -> None:
        """Record an explicit user choice for a field."""
        self.chosen[field_name] = source
        self.user_selected.add(field_name)

    def has_interacted(self, field_name: FieldName) -> bool:
        return field_name in self.user_selected


@dataclass
class FieldResolution:
    """The reconciled state of one field: the active candidate plus all options."""

    field: FieldName
    selected: CandidateValue | None
    candidates: list[CandidateValue]

    @property
    def value(self) -> str | int | None:
        return self.selected.content if self.selected is not None else None

    @property
    def source(self) -> SourceId | None:
        return self.selected.source if self.selected is not None else None


def _find(candidates: Sequence[CandidateValue], source: SourceId) -> CandidateValue | None:
    for candidate in candidates:
        if candidate.source == source:
            return candidate
    return None


def _has(candidates: Sequence[CandidateValue], source: SourceId) -> bool:
    return _find(candidates, source) is not None


def pick_release_date(candidates: Sequence[CandidateValue]) -> SourceId | None:
    """Choose the release-date source among date-bearing candidates.

    1. Drop candidates with no 4-digit year.
    2. Drop year-only dates unless no specific dates exist, or some specific
       date is more than YEAR_ONLY_MARGIN years later.
    3. Stable-sort by year. A spread wider than DATE_RANGE_TIE_YEARS selects
       the earliest; otherwise the audiobook date wins if present, else the
       earliest.
    """
    dated: list[tuple[int, CandidateValue]] = []
    for candidate in candidates:
        year = extract_year(candidate.content)
        if year is not None:
            dated.append((year, candidate))
    if not dated:
        return None

    specific_years = [year for year, candidate in dated if not candidate.is_year_only]
    if specific_years:
        dated = [
            (year, candidate)
            for year, candidate in dated
            if not candidate.is_year_only
            or any(later - year > YEAR_ONLY_MARGIN for later in specific_years)
        ]

    dated.sort(key=lambda pair: pair[0])
    earliest_year, earliest = dated[0]
    latest_year = dated[-1][0]

    if latest_year - earliest_year > DATE_RANGE_TIE_YEARS:
        return earliest.source
    for _, candidate in dated:
        if candidate.source == AUDIOBOOK:
            return candidate.source
    return earliest.source


class FieldReconciler:
    """Chooses the active candidate for each field.

    Settings (field defaults and the audiobook-cover switch) are read from the
    injected repository; the reconciler itself never writes them.
    """

    def __init__(self, settings: SettingsRepository) -> None:
        self._settings = settings

    def reconcile(
        self,
        candidates: dict[FieldName, list[CandidateValue]],
        selections: FieldSelections,
    ) -> dict[FieldName, FieldResolution]:
        """Resolve every field in candidates, initializing selections as needed."""
        resolutions: dict[FieldName, FieldResolution] = {}
        for field_name in FieldName:
            options = candidates.get(field_name, [])
            resolutions[field_name] = self.resolve(field_name, options, selections)
        return resolutions

    def resolve(
        self,
        field_name: FieldName,
        candidates: list[CandidateValue],
        selections: FieldSelections,
    ) -> FieldResolution:
        """Resolve a single field. Never raises; no candidates yields selected=None."""
        if not candidates:
            return FieldResolution(field=field_name, selected=None, candidates=[])

        if not selections.has_interacted(field_name):
            signature = tuple(candidate.source for candidate in candidates)
            if selections.evaluated.get(field_name) != signature:
                selections.chosen[field_name] = self._initial_source(field_name, candidates)
                selections.evaluated[field_name] = signature

        chosen = selections.chosen.get(field_name, ORIGINAL)
        selected = _find(candidates, chosen)
        if selected is None:
            logger.debug(
                "Selected source %s for %s is not available, falling back",
                chosen,
                field_name.value,
            )
            selected = (
                _find(candidates, self._initial_source(field_name, candidates))
                or _find(candidates, ORIGINAL)
                or candidates[0]
            )

        return FieldResolution(field=field_name, selected=selected, candidates=list(candidates))

    def _initial_source(
        self, field_name: FieldName, candidates: list[CandidateValue]
    ) -> SourceId:
        saved = self._field_default(field_name)
        if saved is not None:
            if _has(candidates, saved):
                return saved
            logger.debug(
                "Field default %s for %s has no candidate this session, ignoring",
                saved,
                field_name.value,
            )

        smart = self._smart_default(field_name, candidates)
        if smart is not None:
            return smart
        return ORIGINAL

    def _field_default(self, field_name: FieldName) -> SourceId | None:
        raw = self._settings.get_field_default(field_name.value)
        if raw is None:
            return None
        try:
            return SourceId.parse(raw)
        except ValueError:
            logger.debug("Ignoring malformed field default %r for %s", raw, field_name.value)
            return None

    def _smart_default(
        self, field_name: FieldName, candidates: list[CandidateValue]
    ) -> SourceId | None:
        if field_name is FieldName.DESCRIPTION:
            # Audiobook blurbs win even over an existing original description.
            if _has(candidates, AUDIOBOOK):
                return AUDIOBOOK
            return None
        if field_name is FieldName.PUBLISHER:
            if not _has(candidates, ORIGINAL) and _has(candidates, AUDIOBOOK):
                return AUDIOBOOK
            return None
        if field_name is FieldName.THUMBNAIL:
            if _has(candidates, AUDIOBOOK) and self._settings.get_prefer_audiobook_covers():
                return AUDIOBOOK
            return None
        if field_name is FieldName.RELEASE_DATE:
            return pick_release_date(candidates)
        return None

# ABOUTME: Symmetric similarity scoring between category tags and the per-pass suggestion index.
# ABOUTME: Suggestions are advisory only; merging always goes through an explicit mapping.

import re
from collections.abc import Sequence
from difflib import SequenceMatcher

from shelfsync.categories.classify import is_geographical, is_temporal
from shelfsync.metadata.text import tag_key

# Scores strictly above this mark two tags as a suggested merge.
SIMILARITY_THRESHOLD = 0.85

# Containment of one cleaned tag in the other ("fantasy" in "epic fantasy").
CONTAINMENT_SCORE = 0.9

_MIN_CONTAINMENT_LENGTH = 4
_MIN_LENGTH_RATIO = 0.3

_COMMON_WORDS_RE = re.compile(r"\b(?:fiction|books?|literature|novel|story|stories)\b")

# Broad genres and subjects that are only ever merged within their own group.
DISTINCT_GENRES = frozenset(
    {
        "fiction", "non-fiction", "nonfiction", "biography", "autobiography",
        "history", "science", "mathematics", "philosophy", "religion",
        "art", "music", "sports", "politics", "economics",
        "magic", "wizards", "dragons", "vampires", "werewolves", "zombies",
        "pirates", "knights", "princesses", "kings", "queens",
        "school", "college", "university", "education",
        "friendship", "family", "love", "death", "war", "peace",
        "animals", "cats", "dogs", "horses", "birds",
        "space", "aliens", "robots", "time travel",
    }
)

DISTINCT_GROUPS = (
    frozenset({"biography", "autobiography", "biographies"}),
    frozenset({"non-fiction", "nonfiction"}),
    frozenset({"united states", "america", "american"}),
    frozenset({"united kingdom", "british", "england"}),
    frozenset({"world war i", "world war 1", "wwi", "first world war"}),
    frozenset({"world war ii", "world war 2", "wwii", "second world war"}),
)

# Known spellings of the same genre. Matched against the full key or the
# key with common words ("fiction", "books", ...) removed.
ALIAS_GROUPS = (
    frozenset({"science fiction", "sci-fi", "scifi", "sci fi", "sf"}),
    frozenset({"young adult", "ya", "teen fiction", "teenage"}),
    frozenset({"mystery", "detective", "crime"}),
    frozenset({"self-help", "self help", "personal development"}),
    frozenset({"business", "economics", "finance"}),
    frozenset({"health", "fitness", "wellness"}),
    frozenset({"cooking", "recipes", "cookbooks", "culinary"}),
    frozenset({"travel", "guidebooks", "tourism"}),
    frozenset({"technology", "computers", "programming", "tech"}),
    frozenset({"romance", "love stories", "romantic"}),
    frozenset({"horror", "scary", "frightening"}),
    frozenset({"adventure", "action", "thriller"}),
    frozenset({"historical", "history", "period"}),
)


def _strip_common_words(key: str) -> str:
    return " ".join(_COMMON_WORDS_RE.sub(" ", key).split())


def _same_group(groups: Sequence[frozenset[str]], first: set[str], second: set[str]) -> bool:
    return any(group & first and group & second for group in groups)


def _assess(first: str, second: str) -> tuple[float, str]:
    """Score a pair of tags and say why. Symmetric: the pair is ordered first."""
    a, b = sorted((tag_key(first), tag_key(second)))
    shown_a, shown_b = (first, second) if tag_key(first) == a else (second, first)

    if a == b:
        return 0.0, "Categories are identical"

    for check, kind in ((is_geographical, "geographical location"), (is_temporal, "time period")):
        if check(a) != check(b):
            which = shown_a if check(a) else shown_b
            return 0.0, f'"{which}" is a {kind} and won\'t be merged with other categories'

    if a in DISTINCT_GENRES or b in DISTINCT_GENRES:
        if _same_group(DISTINCT_GROUPS, {a}, {b}):
            return 1.0, "Categories are variants of the same broad genre"
        return 0.0, "One or both categories are broad genres that should remain distinct"

    clean_a = _strip_common_words(a)
    clean_b = _strip_common_words(b)

    if _same_group(ALIAS_GROUPS, {a, clean_a}, {b, clean_b}):
        return 1.0, "Categories are known aliases of the same genre"

    if not clean_a or not clean_b:
        return 0.0, "One category becomes empty when common words are removed"

    if min(len(clean_a), len(clean_b)) / max(len(clean_a), len(clean_b)) < _MIN_LENGTH_RATIO:
        return 0.0, "Categories are too different in length to be considered similar"

    if min(len(clean_a), len(clean_b)) >= _MIN_CONTAINMENT_LENGTH and (
        clean_a in clean_b or clean_b in clean_a
    ):
        return CONTAINMENT_SCORE, "One category contains the other"

    ratio = SequenceMatcher(None, clean_a, clean_b).ratio()
    if ratio > SIMILARITY_THRESHOLD:
        return ratio, f"Categories are spelled almost the same ({ratio:.2f})"
    return ratio, "Categories don't match any similarity patterns"


def similarity_score(first: str, second: str) -> float:
    """Similarity in [0, 1]. Symmetric and deterministic; identical tags score 0."""
    return _assess(first, second)[0]


def are_similar(first: str, second: str) -> bool:
    return similarity_score(first, second) > SIMILARITY_THRESHOLD


def explain_similarity(first: str, second: str) -> str:
    """Human explanation of why two tags are or are not suggested as a merge."""
    return _assess(first, second)[1]


class SimilarityIndex:
    """Pairwise similarity over one normalization pass's eligible tags.

    Tags are compared by key, so the index is order-independent apart from
    the order of the suggestion lists, which follows the input order.
    """

    def __init__(self, tags: Sequence[str]) -> None:
        self._tags = list(tags)
        self._pairs: list[tuple[str, str, float]] = []
        for i, first in enumerate(self._tags):
            for second in self._tags[i + 1 :]:
                score = similarity_score(first, second)
                if score > SIMILARITY_THRESHOLD:
                    self._pairs.append((first, second, score))

    def pairs(self) -> list[tuple[str, str, float]]:
        """Suggested merge pairs as (first, second, score), each pair once."""
        return list(self._pairs)

    def suggestions(self) -> dict[str, list[str]]:
        """Map each tag with suggestions to its similar tags, in both directions."""
        similar: dict[str, list[str]] = {}
        for tag in self._tags:
            matches = [
                other
                for first, second, _ in self._pairs
                for other in ((second,) if first == tag else (first,) if second == tag else ())
            ]
            if matches:
                similar[tag] = matches
        return similar

# ABOUTME: Heuristic geographical and temporal tag classifiers.
# ABOUTME: Protected tags (places, eras) are kept out of similarity suggestions.

import re

from shelfsync.metadata.text import tag_key

GEOGRAPHICAL_INDICATORS = (
    # Countries
    "england", "scotland", "wales", "ireland", "france", "germany", "italy", "spain",
    "united states", "america", "canada", "mexico", "brazil", "russia", "china", "japan",
    "india", "australia", "new zealand", "south africa", "egypt", "morocco",
    "united kingdom",
    # Regions and continents
    "europe", "asia", "africa", "north america", "south america", "oceania",
    "middle east", "far east", "western", "eastern", "northern", "southern",
    # Cities
    "london", "paris", "new york", "los angeles", "chicago", "boston", "san francisco",
    "toronto", "vancouver", "sydney", "melbourne", "tokyo", "beijing", "mumbai",
    # Adjectives
    "american", "british", "english", "french", "german", "italian", "spanish",
    "canadian", "australian", "japanese", "chinese", "indian", "european", "asian",
    "african", "latin", "nordic", "scandinavian", "mediterranean",
)

TEMPORAL_INDICATORS = (
    # Historical periods
    "ancient", "medieval", "renaissance", "victorian", "edwardian", "georgian",
    "modern", "contemporary", "postmodern", "classical", "baroque", "romantic",
    # Wars and events
    "world war", "civil war", "revolutionary war", "cold war", "vietnam war",
    "wwi", "wwii", "ww1", "ww2", "great depression", "industrial revolution",
    # Spelled-out decades
    "twenties", "thirties", "forties", "fifties", "sixties", "seventies", "eighties",
    "nineties",
)


def _phrase_pattern(phrases: tuple[str, ...]) -> re.Pattern[str]:
    # Longest first so "north america" wins over "america" in alternation.
    ordered = sorted(phrases, key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(p) for p in ordered) + r")\b")


_GEOGRAPHICAL_RE = _phrase_pattern(GEOGRAPHICAL_INDICATORS)
_TEMPORAL_RE = _phrase_pattern(TEMPORAL_INDICATORS)
# "1920s", "'60s" style decades and "19th century" / "nineteenth century".
_DECADE_RE = re.compile(r"(?:\b1\d|\b20|')\d0s\b")
_CENTURY_RE = re.compile(
    r"\b(?:\d{1,2}(?:st|nd|rd|th)|fifteenth|sixteenth|seventeenth|eighteenth"
    r"|nineteenth|twentieth|twenty-first)\s+century\b"
)


def is_geographical(tag: str) -> bool:
    """Whether a tag names a place or a people ("France", "British Fiction")."""
    return bool(_GEOGRAPHICAL_RE.search(tag_key(tag)))


def is_temporal(tag: str) -> bool:
    """Whether a tag names an era, war, decade, or century."""
    key = tag_key(tag)
    return bool(_TEMPORAL_RE.search(key) or _DECADE_RE.search(key) or _CENTURY_RE.search(key))

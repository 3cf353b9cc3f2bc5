from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import MatchResult, Part

MIN_QUERY_LENGTH = 2
INLINE_LIMIT = 5
SEARCH_LIMIT = 30
IMPORT_LIMIT = 5
SCAN_PREFIX = 8  # partial scans usually keep the leading characters intact


def normalize(text: str) -> str:
    return (text or "").strip().casefold()


def _fields(part: Part) -> Iterable[str]:
    return (part.part_number, part.name, part.name_localized, part.brand)


def _contains(part: Part, needle: str) -> bool:
    return any(needle in (value or "").casefold() for value in _fields(part))


def find_exact(query: str, catalog: Sequence[Part], min_length: int = MIN_QUERY_LENGTH) -> Optional[Part]:
    needle = normalize(query)
    if len(needle) < min_length:
        return None
    # first wins when the catalog carries duplicate part numbers
    for part in catalog:
        if part.part_number.casefold() == needle:
            return part
    return None


def match(
    query: str,
    catalog: Sequence[Part],
    limit: int = INLINE_LIMIT,
    min_length: int = MIN_QUERY_LENGTH,
) -> MatchResult:
    """Live-typing match: exact part number plus substring suggestions.

    Suggestions are always computed so the editor can show them while the
    user is still typing; they keep catalog order and are not de-duplicated.
    """
    needle = normalize(query)
    if len(needle) < min_length:
        return MatchResult()
    exact = find_exact(needle, catalog, min_length)
    suggestions: List[Part] = []
    for part in catalog:
        if len(suggestions) >= limit:
            break
        if _contains(part, needle):
            suggestions.append(part)
    return MatchResult(exact=exact, suggestions=tuple(suggestions))


def search(query: str, catalog: Sequence[Part], limit: int = SEARCH_LIMIT) -> List[Part]:
    return list(match(query, catalog, limit=limit).suggestions)


def match_for_import(
    query: str,
    catalog: Sequence[Part],
    limit: int = IMPORT_LIMIT,
    min_length: int = MIN_QUERY_LENGTH,
) -> MatchResult:
    """Reconciliation match for externally sourced identifiers.

    An exact hit carries no alternatives. Otherwise a part qualifies when any
    searchable field contains the query, or when its part number contains the
    query's leading characters (tolerates truncated or noisy scans).
    """
    needle = normalize(query)
    if len(needle) < min_length:
        return MatchResult()
    exact = find_exact(needle, catalog, min_length)
    if exact is not None:
        return MatchResult(exact=exact)
    prefix = needle[:SCAN_PREFIX]
    alternatives: List[Part] = []
    for part in catalog:
        if len(alternatives) >= limit:
            break
        if _contains(part, needle) or prefix in part.part_number.casefold():
            alternatives.append(part)
    return MatchResult(suggestions=tuple(alternatives))

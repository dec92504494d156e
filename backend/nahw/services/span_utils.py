"""Set algebra over segment positions used by the answer validators."""

from collections.abc import Iterable


def same_members(a: Iterable[int], b: Iterable[int]) -> bool:
    return set(a) == set(b)


def union_ordered(*groups: Iterable[int]) -> list[int]:
    """Union that keeps first-seen order."""
    seen: dict[int, None] = {}
    for group in groups:
        for value in group:
            seen.setdefault(value, None)
    return list(seen)


def difference(a: Iterable[int], b: Iterable[int]) -> list[int]:
    """Members of a (in order, de-duplicated) that are not in b."""
    exclude = set(b)
    return [v for v in union_ordered(a) if v not in exclude]


def jaccard(a: Iterable[int], b: Iterable[int]) -> float:
    """|A ∩ B| / |A ∪ B|, with 0.0 for two empty sets."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))

from __future__ import annotations

from typing import List, Mapping, Optional, Tuple


def rank_counts(counts: Optional[Mapping[str, int]], k: int) -> List[Tuple[str, int]]:
    """Return the ``k`` most used tags as ``(tag, count)``, highest count first.

    Equal counts keep the mapping's iteration order. Counters are plain dicts
    filled as tags arrive, so ties resolve to first-seen order since the last
    reset.
    """

    if not counts or k <= 0:
        return []
    ranked = sorted(
        ((tag, count) for tag, count in counts.items() if count > 0),
        key=lambda pair: pair[1],
        reverse=True,
    )
    return ranked[:k]

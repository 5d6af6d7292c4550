from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Iterable, List, Optional, Tuple

DEFAULT_MARKER = "#"
HASHTAG_ENTITY = "hashtag"


@lru_cache(maxsize=8)
def hashtag_pattern(marker: str = DEFAULT_MARKER) -> "re.Pattern[str]":
    return re.compile(re.escape(marker) + r"\w+")


def extract_hashtags(
    text: Optional[str],
    entities: Optional[Iterable[Any]] = None,
    marker: str = DEFAULT_MARKER,
) -> List[str]:
    """Return lower-cased hashtags in order of appearance, duplicates kept.

    With ``entities`` the tags are sliced from those spans (offsets and
    lengths in UTF-16 code units); otherwise the text is scanned for
    ``marker`` followed by word characters. A scanned tag must sit at the
    start of the text or right after whitespace, so ``foo#bar`` is ignored.
    """

    if not text or not isinstance(text, str):
        return []
    if entities is not None:
        return [tag.lower() for tag in _slice_entities(text, entities)]
    return [tag.lower() for tag in _scan(text, marker)]


def _scan(text: str, marker: str) -> List[str]:
    tags: List[str] = []
    for match in hashtag_pattern(marker).finditer(text):
        start = match.start()
        if start == 0 or text[start - 1].isspace():
            tags.append(match.group())
    return tags


def _slice_entities(text: str, entities: Iterable[Any]) -> List[str]:
    encoded = text.encode("utf-16-le")
    units = len(encoded) // 2
    tags: List[str] = []
    for entity in entities:
        span = entity_span(entity)
        if span is None:
            continue
        offset, length = span
        if offset < 0 or length <= 0 or offset + length > units:
            continue
        try:
            tag = encoded[offset * 2 : (offset + length) * 2].decode("utf-16-le")
        except UnicodeDecodeError:
            # span cuts through a surrogate pair
            continue
        tags.append(tag)
    return tags


def entity_span(entity: Any) -> Optional[Tuple[int, int]]:
    """Normalize an entity to ``(offset, length)`` or ``None`` if not a hashtag.

    Accepts plain pairs, mappings and objects exposing ``offset``/``length``.
    When a ``type`` is present only hashtag entities are kept.
    """

    if isinstance(entity, (tuple, list)):
        if len(entity) != 2:
            return None
        offset, length = entity
        kind = HASHTAG_ENTITY
    elif isinstance(entity, dict):
        offset, length = entity.get("offset"), entity.get("length")
        kind = entity.get("type", HASHTAG_ENTITY)
    else:
        offset, length = getattr(entity, "offset", None), getattr(entity, "length", None)
        kind = getattr(entity, "type", HASHTAG_ENTITY)
    if kind != HASHTAG_ENTITY:
        return None
    if isinstance(offset, bool) or isinstance(length, bool):
        return None
    if not isinstance(offset, int) or not isinstance(length, int):
        return None
    return offset, length


class HashtagExtractor:
    """Extractor bound to one marker character."""

    def __init__(self, marker: str = DEFAULT_MARKER):
        if len(marker) != 1:
            raise ValueError("marker must be a single character")
        self.marker = marker

    def extract(self, text: Optional[str], entities: Optional[Iterable[Any]] = None) -> List[str]:
        return extract_hashtags(text, entities, marker=self.marker)

    __call__ = extract

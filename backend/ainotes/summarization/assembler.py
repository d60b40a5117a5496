from __future__ import annotations
import re
from typing import List, Sequence, Union
from .client import ChunkSummary

FALLBACK_SUMMARY = "AI summary unavailable."
MAX_BULLETS = 8
MIN_BULLET_CHARS = 10

_SENTENCE_BREAK = re.compile(r"\.\s+")

def fallback_summary() -> List[str]:
    return [FALLBACK_SUMMARY]

def _text_of(item: Union[ChunkSummary, str]) -> str:
    if isinstance(item, ChunkSummary):
        return item.text if item.ok else ""
    return item or ""

def _clean(segment: str) -> str:
    return segment.strip().rstrip(".").strip()

def assemble_bullets(
    summaries: Sequence[Union[ChunkSummary, str]],
    max_bullets: int = MAX_BULLETS,
) -> List[str]:
    """
    Turn per-chunk summaries into at most max_bullets sentence bullets
    (never more than MAX_BULLETS).

    Failed or empty chunks are skipped. The remaining text is joined, split on
    ". " boundaries, trimmed, and anything under MIN_BULLET_CHARS is dropped.
    Returns the fallback list whenever nothing usable is left.
    """
    texts = [t for t in (_text_of(s) for s in summaries) if t.strip()]
    if not texts:
        return fallback_summary()

    limit = min(max(1, max_bullets), MAX_BULLETS)
    combined = " ".join(texts)
    bullets = []
    for segment in _SENTENCE_BREAK.split(combined):
        line = _clean(segment)
        if len(line) < MIN_BULLET_CHARS:
            continue
        bullets.append(line)
        if len(bullets) >= limit:
            break
    return bullets or fallback_summary()

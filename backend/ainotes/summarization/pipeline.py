from __future__ import annotations
import asyncio
import logging
from typing import List, Optional
import httpx
from ..observability.metrics import record_summary_fallback
from .assembler import FALLBACK_SUMMARY, assemble_bullets
from .chunker import chunk_content
from .client import ChunkSummary, SummaryConfig, fetch_summary

logger = logging.getLogger(__name__)

async def _fetch_all(chunks: List[str], config: SummaryConfig, client: httpx.AsyncClient) -> List[ChunkSummary]:
    if config.concurrency <= 1 or len(chunks) == 1:
        return [await fetch_summary(c, config, client) for c in chunks]

    sem = asyncio.Semaphore(config.concurrency)

    async def _task(c: str) -> ChunkSummary:
        async with sem:
            return await fetch_summary(c, config, client)

    # gather keeps results in chunk order
    return list(await asyncio.gather(*[_task(c) for c in chunks]))

async def summarize(
    content: str,
    config: Optional[SummaryConfig] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> List[str]:
    """
    Summarize note content into 1-8 bullet points.

    Fetch failures degrade to the fallback summary; this never raises because
    of the summarization API.
    """
    config = config or SummaryConfig.from_settings()
    chunks = chunk_content(content or "", config.chunk_words)

    if client is None:
        async with httpx.AsyncClient(timeout=config.timeout) as own_client:
            results = await _fetch_all(chunks, config, own_client)
    else:
        results = await _fetch_all(chunks, config, client)

    failed = sum(1 for r in results if not r.ok)
    bullets = assemble_bullets(results, max_bullets=config.max_bullets)
    if bullets == [FALLBACK_SUMMARY]:
        record_summary_fallback()
    logger.info(
        "summarized note",
        extra={"chunks": len(chunks), "failed_chunks": failed, "bullets": len(bullets)},
    )
    return bullets

from .assembler import FALLBACK_SUMMARY, assemble_bullets
from .chunker import chunk_content
from .client import ChunkSummary, SummaryConfig, fetch_summary
from .pipeline import summarize

__all__ = [
    "FALLBACK_SUMMARY",
    "ChunkSummary",
    "SummaryConfig",
    "assemble_bullets",
    "chunk_content",
    "fetch_summary",
    "summarize",
]

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
import httpx
from ..config import Settings, settings as default_settings
from ..observability.metrics import record_summary_error, record_summary_request

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class SummaryConfig:
    """Everything the fetcher needs to reach the summarization endpoint."""
    url: str
    api_key: Optional[str] = None
    max_length: int = 150
    min_length: int = 30
    do_sample: bool = False
    chunk_words: int = 500
    max_bullets: int = 8
    concurrency: int = 1
    timeout: Optional[float] = 30.0

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "SummaryConfig":
        s = s or default_settings
        return cls(
            url=s.HF_MODEL_URL,
            api_key=s.HF_API_KEY,
            max_length=s.SUMMARY_MAX_LENGTH,
            min_length=s.SUMMARY_MIN_LENGTH,
            chunk_words=s.SUMMARY_CHUNK_WORDS,
            max_bullets=s.SUMMARY_MAX_BULLETS,
            concurrency=s.SUMMARY_CONCURRENCY,
            timeout=s.SUMMARY_TIMEOUT_S,
        )

    @property
    def model(self) -> str:
        return self.url.rstrip("/").rsplit("/", 1)[-1]

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def payload(self, chunk: str) -> Dict[str, Any]:
        return {
            "inputs": chunk,
            "parameters": {
                "max_length": self.max_length,
                "min_length": self.min_length,
                "do_sample": self.do_sample,
            },
        }


@dataclass(frozen=True)
class ChunkSummary:
    ok: bool
    text: str = ""
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "ChunkSummary":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: str) -> "ChunkSummary":
        return cls(ok=False, error=error)


def _extract_summary(data: Any) -> Optional[str]:
    """
    Returns the summary text of a successful response, "" when the field is
    missing, or None when the body is not the expected array.
    """
    if not isinstance(data, list):
        return None
    if not data or not isinstance(data[0], dict):
        return ""
    text = data[0].get("summary_text") or ""
    return text if isinstance(text, str) else ""

async def fetch_summary(chunk: str, config: SummaryConfig, client: httpx.AsyncClient) -> ChunkSummary:
    """
    Summarize a single chunk. Never raises: every failure comes back as
    ChunkSummary(ok=False).
    """
    model = config.model
    record_summary_request(model)
    try:
        r = await client.post(config.url, json=config.payload(chunk), headers=config.headers())
    except Exception as e:
        record_summary_error(model, "network")
        logger.warning("summarization request failed: %r", e, extra={"model": model})
        return ChunkSummary.failure(repr(e))

    if not (200 <= r.status_code < 300):
        record_summary_error(model, "status")
        body = r.text[:240]
        logger.warning("summarization API returned %s: %s", r.status_code, body, extra={"model": model})
        return ChunkSummary.failure(f"HTTP {r.status_code}: {body}")

    try:
        data = r.json()
    except ValueError as e:
        record_summary_error(model, "malformed")
        logger.warning("summarization API returned non-JSON body", extra={"model": model})
        return ChunkSummary.failure(f"malformed response: {e}")

    text = _extract_summary(data)
    if text is None:
        record_summary_error(model, "malformed")
        logger.warning("unexpected summarization payload: %s", str(data)[:240], extra={"model": model})
        return ChunkSummary.failure("malformed response")
    return ChunkSummary.success(text)

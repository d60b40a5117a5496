from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_client import Counter

# HTTP instrumentation
def init_metrics(app) -> None:
    if getattr(app.state, "metrics_initialized", False):
        return
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")
    app.state.metrics_initialized = True

# Summarization metrics
_summary_requests = Counter("summary_requests_total", "Chunk summarization requests", ["model"])
_summary_errors   = Counter("summary_errors_total", "Chunk summarization failures", ["model", "reason"])
_summary_fallbacks = Counter("summary_fallbacks_total", "Notes that got the fallback summary")

def record_summary_request(model: str) -> None:
    _summary_requests.labels(model=model).inc()

def record_summary_error(model: str, reason: str) -> None:
    _summary_errors.labels(model=model, reason=reason).inc()

def record_summary_fallback() -> None:
    _summary_fallbacks.inc()

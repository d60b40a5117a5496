import logging
from typing import Union
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "ai-notes-backend"

def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO

def setup_json_logging(level: Union[int, str] = logging.INFO) -> None:
    """One JSON line per record on stderr, tagged with the service name."""
    root = logging.getLogger()
    root.setLevel(_resolve_level(level))
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(filename)s %(lineno)d",
        rename_fields={"levelname": "level", "name": "logger"},
        static_fields={"service": SERVICE_NAME},
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # httpx logs each request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

"""Request Context - typed per-request state shared by middleware and handlers.

Invariants:
    - trace_id is never empty (generated when the client sends none)
    - logger is already bound to trace_id; handlers never pass it by hand
    - Lives only for one request; nothing here is persisted
"""

import logging
import uuid
from dataclasses import dataclass

TRACE_ID_HEADER = "X-Trace-Id"


@dataclass(frozen=True)
class RequestContext:
    """Trace identifier plus the request-scoped logger."""
    trace_id: str
    logger: logging.LoggerAdapter


def resolve_trace_id(inbound: str | None) -> str:
    """Use the client's trace id when present, otherwise mint a UUID v4."""
    if inbound:
        return inbound
    return str(uuid.uuid4())

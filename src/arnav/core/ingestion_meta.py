"""
Per-request ingestion metadata capture.

The places client reports how it answered (`live`, `cache`, `stale`, `none`) plus the
cache timestamp; the API attaches the captured sources to `meta.freshness`.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class IngestionMeta:
    sources: dict[str, dict[str, Any]] = field(default_factory=dict)

    def record(self, name: str, payload: dict[str, Any]) -> None:
        if name:
            self.sources[name] = dict(payload)


_ingestion_meta_var: contextvars.ContextVar[IngestionMeta | None] = contextvars.ContextVar(
    "arnav_ingestion_meta", default=None
)


def record_ingestion_source(name: str, payload: dict[str, Any]) -> None:
    meta = _ingestion_meta_var.get()
    if meta is not None:
        meta.record(name, payload)


@contextmanager
def capture_ingestion_meta() -> Iterator[IngestionMeta]:
    meta = IngestionMeta()
    token = _ingestion_meta_var.set(meta)
    try:
        yield meta
    finally:
        _ingestion_meta_var.reset(token)

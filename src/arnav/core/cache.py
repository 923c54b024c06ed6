"""
Simple on-disk JSON cache.

Used by the places client so that repeated lookups around the same position do not hit
the upstream API every time (and so a flaky network can still serve a recent answer):
- values are stored as JSON envelopes under `.cache/arnav/<namespace>/` by default,
- keys are hashed (SHA-256) to avoid filesystem path issues,
- TTL is enforced on read; expired entries remain readable via `get_stale`.
"""

from __future__ import annotations

import contextvars
import json
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from hashlib import sha256
from pathlib import Path
from typing import Any, Iterator


@dataclass
class CacheStats:
    """Per-request cache usage counters."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    sets: int = 0
    stale_reads: int = 0

    def as_dict(self) -> dict[str, int]:
        return {k: int(v) for k, v in asdict(self).items()}


_cache_stats_var: contextvars.ContextVar[CacheStats | None] = contextvars.ContextVar(
    "arnav_cache_stats", default=None
)


def _bump(counter: str) -> None:
    stats = _cache_stats_var.get()
    if stats is not None:
        setattr(stats, counter, getattr(stats, counter) + 1)


@contextmanager
def record_cache_stats() -> Iterator[CacheStats]:
    """Capture cache stats within the current context (thread/task-safe)."""
    stats = CacheStats()
    token = _cache_stats_var.set(stats)
    try:
        yield stats
    finally:
        _cache_stats_var.reset(token)


class FileCache:
    """A filesystem-backed cache keyed by (namespace, key).

    Reads never raise: a missing, disabled or corrupt entry reads as None. Callers
    own the refresh policy (see `FoursquarePlacesClient.search_nearby`).
    """

    def __init__(self, base_dir: Path, enabled: bool = True, default_ttl_seconds: int = 3600):
        self._base_dir = Path(base_dir)
        self._enabled = enabled
        self._default_ttl_seconds = default_ttl_seconds

    def _key_path(self, namespace: str, key: str) -> Path:
        digest = sha256(f"{namespace}:{key}".encode("utf-8")).hexdigest()
        return self._base_dir / namespace / f"{digest}.json"

    def _load(self, namespace: str, key: str) -> dict[str, Any] | None:
        if not self._enabled:
            return None
        path = self._key_path(namespace, key)
        if not path.is_file():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return {
                "created_at_unix": int(raw["created_at_unix"]),
                "ttl_seconds": int(raw["ttl_seconds"]),
                "value": raw.get("value"),
            }
        except (OSError, ValueError, KeyError, TypeError):
            return None

    def get_entry_meta(self, namespace: str, key: str) -> dict[str, int] | None:
        """Return (created_at_unix, ttl_seconds) for an entry if present."""
        entry = self._load(namespace, key)
        if entry is None:
            return None
        return {"created_at_unix": entry["created_at_unix"], "ttl_seconds": entry["ttl_seconds"]}

    def get(self, namespace: str, key: str, ttl_seconds: int | None = None) -> Any | None:
        """Fresh value or None; each call counts exactly one hit or miss."""
        if not self._enabled:
            return None
        entry = self._load(namespace, key)
        if entry is None:
            _bump("misses")
            return None

        ttl = ttl_seconds if ttl_seconds is not None else entry["ttl_seconds"]
        if int(time.time()) - entry["created_at_unix"] > ttl:
            _bump("misses")
            _bump("expired")
            return None

        _bump("hits")
        return entry["value"]

    def get_stale(self, namespace: str, key: str) -> Any | None:
        """Value regardless of age (for serving something when upstream is down)."""
        entry = self._load(namespace, key)
        if entry is None or entry["value"] is None:
            return None
        _bump("stale_reads")
        return entry["value"]

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Write a JSON-serializable value (temp file + atomic replace)."""
        if not self._enabled:
            return

        path = self._key_path(namespace, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        envelope = {
            "created_at_unix": int(time.time()),
            "ttl_seconds": int(ttl_seconds if ttl_seconds is not None else self._default_ttl_seconds),
            "value": value,
        }
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(envelope, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)
        _bump("sets")

"""
On-disk JSON cache for upstream responses.

The web client re-runs a search every time the origin moves, so identical
nearby-space requests arrive in bursts. The spaces client keeps the last payload
per (origin, space type) here and, when the spaces API fails, can fall back to an
expired copy instead of surfacing the error ("stale-if-error").

Layout: `<base_dir>/<namespace>/<sha256(namespace:key)>.json`, each file holding
`{"stored_at": ..., "ttl_seconds": ..., "value": ...}`.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from hashlib import sha256
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredValue:
    stored_at: float
    ttl_seconds: int
    value: Any

    def age_seconds(self) -> float:
        return time.time() - self.stored_at


class FileCache:
    """JSON values on disk, grouped by namespace, expired on read."""

    def __init__(self, base_dir: Path, enabled: bool = True, default_ttl_seconds: int = 300):
        self._base_dir = Path(base_dir)
        self._enabled = enabled
        self._default_ttl_seconds = default_ttl_seconds

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def enabled(self) -> bool:
        return self._enabled

    def path_for(self, namespace: str, key: str) -> Path:
        name = sha256(f"{namespace}:{key}".encode("utf-8")).hexdigest()
        return self._base_dir / namespace / f"{name}.json"

    def _load(self, namespace: str, key: str) -> StoredValue | None:
        if not self._enabled:
            return None
        path = self.path_for(namespace, key)
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
            return StoredValue(
                stored_at=float(doc["stored_at"]),
                ttl_seconds=int(doc["ttl_seconds"]),
                value=doc["value"],
            )
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError):
            # Unreadable entries count as a miss and get overwritten on the next store.
            return None

    def get(self, namespace: str, key: str, ttl_seconds: int | None = None) -> Any | None:
        """Return the stored value while it is younger than its TTL, else None."""
        stored = self._load(namespace, key)
        if stored is None:
            return None
        max_age = stored.ttl_seconds if ttl_seconds is None else ttl_seconds
        if stored.age_seconds() > max_age:
            return None
        return stored.value

    def get_stale(self, namespace: str, key: str) -> Any | None:
        """Return the stored value regardless of age."""
        stored = self._load(namespace, key)
        return None if stored is None else stored.value

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """Store `value`; returns False (after logging) when the cache dir is not writable."""
        if not self._enabled:
            return False
        path = self.path_for(namespace, key)
        doc = {
            "stored_at": time.time(),
            "ttl_seconds": int(self._default_ttl_seconds if ttl_seconds is None else ttl_seconds),
            "value": value,
        }
        scratch: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Unique scratch file per writer, then an atomic rename over the entry.
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, suffix=".part", delete=False
            ) as fh:
                scratch = fh.name
                json.dump(doc, fh, ensure_ascii=False)
            os.replace(scratch, path)
        except OSError as exc:
            logger.warning("Cache write failed for %s/%s: %s", namespace, key, exc)
            if scratch is not None and os.path.exists(scratch):
                os.unlink(scratch)
            return False
        return True

    def get_or_set(
        self,
        namespace: str,
        key: str,
        builder: Callable[[], Any],
        ttl_seconds: int | None = None,
        *,
        stale_if_error: bool = False,
        stale_predicate: Callable[[Exception], bool] | None = None,
    ) -> Any:
        """Return a fresh cached value or build, store and return a new one.

        If `builder` raises and `stale_if_error` is set, an expired value is returned
        instead, provided one exists and `stale_predicate` (when given) accepts the
        exception. Otherwise the exception propagates.
        """
        fresh = self.get(namespace, key, ttl_seconds=ttl_seconds)
        if fresh is not None:
            return fresh
        try:
            value = builder()
        except Exception as exc:
            allowed = stale_if_error and (stale_predicate is None or stale_predicate(exc))
            stale = self.get_stale(namespace, key) if allowed else None
            if stale is None:
                raise
            return stale
        self.set(namespace, key, value, ttl_seconds=ttl_seconds)
        return value

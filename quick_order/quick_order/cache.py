from __future__ import annotations

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import CatalogCacheError
from .loader import part_from_dict, part_to_dict
from .log import get_logger
from .models import Part

logger = get_logger(__name__)

DAY_SECONDS = 24 * 60 * 60


class CachedCatalog:
    """Offline-aware catalog provider backed by a JSON file.

    ``sync`` prefers fresh data while online and falls back to the file when
    the fetch fails or the client is offline. Without a usable cache the
    bundled fallback parts are served and written to the cache.
    """

    def __init__(
        self,
        path: Path,
        fetch: Callable[[], Sequence[Part]],
        fallback: Callable[[], Sequence[Part]] = lambda: [],
        ttl_seconds: int = DAY_SECONDS,
        is_online: Callable[[], bool] = lambda: True,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.fetch = fetch
        self.fallback = fallback
        self.ttl_seconds = ttl_seconds
        self.is_online = is_online
        self.clock = clock
        self._parts: List[Part] = []
        self.is_from_cache = False
        self.last_updated: Optional[datetime] = None

    def parts(self) -> Sequence[Part]:
        return tuple(self._parts)

    def _read(self) -> Optional[dict]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return {
                "parts": [part_from_dict(p) for p in payload["parts"]],
                "timestamp": float(payload["timestamp"]),
            }
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("ignoring unreadable catalog cache %s: %s", self.path, exc)
            return None

    def _write(self, parts: Sequence[Part]) -> None:
        stamp = self.clock()
        payload = {"timestamp": stamp, "parts": [part_to_dict(p) for p in parts]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise CatalogCacheError(f"could not write catalog cache {self.path}: {exc}") from exc
        self.last_updated = datetime.fromtimestamp(stamp)

    def is_expired(self, timestamp: float) -> bool:
        return self.clock() - timestamp > self.ttl_seconds

    def _use_cached(self, cached: dict) -> None:
        self._parts = list(cached["parts"])
        self.last_updated = datetime.fromtimestamp(cached["timestamp"])
        self.is_from_cache = True
        if self.is_expired(cached["timestamp"]):
            logger.warning("serving expired catalog cache from %s", self.last_updated.isoformat())

    def sync(self) -> Sequence[Part]:
        cached = self._read()
        if self.is_online():
            try:
                fresh = list(self.fetch())
            except Exception as exc:
                logger.warning("catalog fetch failed: %s", exc)
                if cached:
                    self._use_cached(cached)
                return self.parts()
            self._parts = fresh
            self.is_from_cache = False
            self._write(fresh)
            logger.info("catalog synced: %d part(s)", len(fresh))
        elif cached:
            self._use_cached(cached)
            logger.info("offline: %d cached part(s)", len(self._parts))
        else:
            self._parts = list(self.fallback())
            self.is_from_cache = False
            self._write(self._parts)
        return self.parts()

    def refresh(self) -> Sequence[Part]:
        if self.is_online():
            return self.sync()
        return self.parts()

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        self.last_updated = None

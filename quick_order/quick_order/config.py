from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    batch_size: int = 10  # rows in a fresh grid and the padding floor
    grow_by: int = 5  # rows appended when keyboard flow runs off the end
    min_query_length: int = 2
    inline_limit: int = 5
    search_limit: int = 30
    import_alternatives: int = 5
    vat_rate: float = 0.15
    cache_path: Path = Path("output") / "cached_parts.json"
    cache_ttl_hours: int = 24
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        batch_size=max(1, _env_int("QUICK_ORDER_BATCH_SIZE", 10)),
        grow_by=max(1, _env_int("QUICK_ORDER_GROW_BY", 5)),
        min_query_length=max(1, _env_int("QUICK_ORDER_MIN_QUERY", 2)),
        inline_limit=_env_int("QUICK_ORDER_INLINE_LIMIT", 5),
        search_limit=_env_int("QUICK_ORDER_SEARCH_LIMIT", 30),
        import_alternatives=_env_int("QUICK_ORDER_IMPORT_ALTERNATIVES", 5),
        vat_rate=_env_float("QUICK_ORDER_VAT_RATE", 0.15),
        cache_path=Path(os.getenv("QUICK_ORDER_CACHE_PATH", "").strip() or Settings.cache_path),
        cache_ttl_hours=_env_int("QUICK_ORDER_CACHE_TTL_HOURS", 24),
        log_level=os.getenv("QUICK_ORDER_LOG_LEVEL", "INFO").strip() or "INFO",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

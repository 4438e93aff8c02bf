# cache.py
# In-memory analysis cache keyed by resume id, with a time-to-live.
#
# Entries are stored as JSON dumps so a cached result can never be
# mutated by a caller; a miss or an expired entry is just None.

import logging
import os
import threading
import time
from typing import Dict, Optional, Tuple

from models import AnalysisResult

logger = logging.getLogger(__name__)

ANALYSIS_CACHE_TTL = int(os.getenv("ANALYSIS_CACHE_TTL", str(24 * 60 * 60)))
KEY_PREFIX = "analysis:"


class AnalysisCache:
    def __init__(self, ttl_seconds: int = ANALYSIS_CACHE_TTL, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(resume_id: str) -> str:
        return f"{KEY_PREFIX}{resume_id}"

    def get(self, resume_id: str) -> Optional[AnalysisResult]:
        key = self._key(resume_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
        try:
            return AnalysisResult.model_validate_json(payload)
        except ValueError:
            logger.warning("Dropping unreadable cache entry %s", key, exc_info=True)
            self.delete(resume_id)
            return None

    def put(self, resume_id: str, result: AnalysisResult) -> None:
        payload = result.model_dump_json()
        with self._lock:
            self._entries[self._key(resume_id)] = (self._clock() + self.ttl_seconds, payload)

    def delete(self, resume_id: str) -> bool:
        with self._lock:
            return self._entries.pop(self._key(resume_id), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

from __future__ import annotations

import threading
from typing import Dict


class MetricsStore:
    """Thread-safe in-memory metrics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = {
            "uploads": 0,
            "upload_errors": 0,
            "bytes_uploaded": 0,
            "downloads": 0,
            "deleted": 0,
            "conversions": 0,
        }
        self._timings: Dict[str, float] = {
            "upload_seconds_total": 0.0,
            "upload_seconds_last": 0.0,
        }

    def record_upload(self, size_bytes: int) -> None:
        with self._lock:
            self._counters["uploads"] += 1
            self._counters["bytes_uploaded"] += size_bytes

    def record_upload_error(self) -> None:
        with self._lock:
            self._counters["upload_errors"] += 1

    def record_upload_duration(self, seconds: float) -> None:
        with self._lock:
            self._timings["upload_seconds_total"] += seconds
            self._timings["upload_seconds_last"] = seconds

    def record_download(self) -> None:
        with self._lock:
            self._counters["downloads"] += 1

    def record_conversion(self) -> None:
        with self._lock:
            self._counters["conversions"] += 1

    def record_deletions(self, count: int) -> None:
        if count <= 0:
            return
        with self._lock:
            self._counters["deleted"] += count

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            return {**self._counters, **self._timings}


metrics = MetricsStore()

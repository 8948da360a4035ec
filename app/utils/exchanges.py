import threading
from collections import deque
from datetime import datetime, timezone

from app.config import get_settings


class ExchangeRecorder:
    """
    Bounded in-memory history of HTTP exchanges.

    Once `capacity` is reached the oldest exchange is dropped.
    """

    def __init__(self, capacity: int = 100):
        self._exchanges = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def record(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        """Append one finished request."""
        exchange = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": method,
            "path": path,
            "status": status_code,
            "duration_ms": round(duration_ms, 2),
        }
        with self._lock:
            self._exchanges.append(exchange)

    def snapshot(self) -> list[dict]:
        """Return recorded exchanges, newest first."""
        with self._lock:
            return list(reversed(self._exchanges))

    def clear(self) -> None:
        with self._lock:
            self._exchanges.clear()


exchange_recorder = ExchangeRecorder(get_settings().EXCHANGE_HISTORY_SIZE)

import logging
import threading
from typing import Callable, Any

log = logging.getLogger(__name__)


class Scheduler:
    """Calls `func` every `interval_seconds` on a daemon thread.
    
    The first call happens one interval after start. Missed ticks are not caught up.
    """
    
    def __init__(self, interval_seconds: float, func: Callable[[], Any], *, name: str = "scheduler") -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        
        self.interval_seconds = interval_seconds
        self.func = func
        self.name = name
        self.tick_count = 0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
    
    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
    
    def start(self) -> None:
        if self.is_running:
            return
        
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        log.info(f"[TIMER] Scheduler '{self.name}' started (interval={self.interval_seconds:.0f}s)")
    
    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
        log.info(f"[TIMER] Scheduler '{self.name}' stopped")
    
    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            self.tick_count += 1
            log.info("[TIMER] Scheduled run triggered")
            
            try:
                self.func()
            except Exception:
                log.exception(f"[TIMER] Scheduled job '{self.name}' failed")

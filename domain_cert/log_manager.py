import time
import logging
from pathlib import Path
from typing import Callable, Any
from domain_cert.models.report import StepResult

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [pid=%(process)d] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def clean_old_log(log_file: Path, max_age_days: int = 30) -> bool:
    """Delete the log file when it was last modified more than `max_age_days` ago."""
    try:
        mtime = log_file.stat().st_mtime
    except FileNotFoundError:
        return False
    
    if time.time() - mtime <= max_age_days * 24 * 60 * 60:
        return False
    
    log_file.unlink(missing_ok=True)
    return True


def setup_logging(log_file: Path, log_level: str = "INFO") -> logging.Handler:
    level_name = (log_level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    log_file = Path(log_file).resolve()
    
    root = logging.getLogger()
    root.setLevel(level)
    
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and getattr(handler, "baseFilename", "") == str(log_file):
            return handler
    
    f_handler = logging.FileHandler(log_file, mode="a", encoding="UTF-8")
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    f_handler.setLevel(level)
    root.addHandler(f_handler)

    log.info("Logging initialized (level=%s, file=%s)", level_name, log_file)
    return f_handler


def run_step(name: str, action: Callable[[], Any], *, domain: str | None = None) -> StepResult:
    """Run a single best-effort step and record its outcome.
    
    Failures are logged and returned, never raised, so the caller can go on
    with the next step.
    """
    log.info(f"[STEP] {name} started")
    start = time.monotonic()
    
    try:
        action()
    except Exception as e:
        elapsed = time.monotonic() - start
        log.error(f"[STEP] {name} failed ({elapsed:.2f}s): {e}")
        return StepResult(name, ok=False, elapsed=elapsed, domain=domain, error=str(e))
    
    elapsed = time.monotonic() - start
    log.info(f"[STEP] {name} succeeded ({elapsed:.2f}s)")
    return StepResult(name, ok=True, elapsed=elapsed, domain=domain)

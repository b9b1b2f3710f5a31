import logging
import threading
from typing import Callable
from domain_cert.conf.store import ConfigStore
from domain_cert.domain.acme_sh import AcmeSh
from domain_cert.log_manager import run_step
from domain_cert.models.report import RunReport

log = logging.getLogger(__name__)


class Issuer:
    def __init__(self, store: ConfigStore, acme_sh: AcmeSh) -> None:
        self.store = store
        self.acme_sh = acme_sh
    
    def issue_all(self, trigger: str = "manual") -> RunReport:
        """Install the tool, set the CA, then request and install every domain in order.
        
        Every step is best effort, a failed step or domain never stops the rest.
        Unexpected faults are logged with a traceback and stored on the report.
        """
        report = RunReport(trigger)
        
        try:
            config = self.store.get()
            log.info(f"[TASK] Certificate run started (trigger={trigger}, domains={len(config.domains)})")
            
            report.add(run_step("Install acme.sh", lambda: self.acme_sh.install(config.email)))
            report.add(run_step("Set default CA", self.acme_sh.set_default_ca))
            
            for entry in config.domains:
                log.info(f"[DOMAIN] {entry.domain} started")
                report.add(run_step(
                    f"Issue certificate {entry.domain}",
                    lambda entry=entry: self.acme_sh.issue(entry, config.renew_days),
                    domain=entry.domain
                ))
                report.add(run_step(
                    f"Install certificate {entry.domain}",
                    lambda entry=entry: self.acme_sh.install_cert(entry),
                    domain=entry.domain
                ))
                log.info(f"[DOMAIN] {entry.domain} finished")
        except Exception as e:
            log.exception(f"[TASK] Certificate run crashed: {e}")
            report.finish(error=f"{type(e).__name__}: {e}")
            return report
        
        report.finish()
        log.info(f"[TASK] Certificate run finished (failed steps={len(report.failed_steps)})")
        return report


class IssueDispatcher:
    """Lets at most one issuance run be active at a time."""
    
    def __init__(self, issue_fn: Callable[[str], RunReport]) -> None:
        self.issue_fn = issue_fn
        self.last_report: RunReport | None = None
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
    
    @property
    def is_running(self) -> bool:
        return self._lock.locked()
    
    def run(self, trigger: str) -> RunReport | None:
        if not self._lock.acquire(blocking=False):
            log.warning(f"[TASK] Certificate run already in progress, '{trigger}' trigger skipped")
            return None
        
        try:
            self.last_report = self.issue_fn(trigger)
            return self.last_report
        finally:
            self._lock.release()
    
    def start(self, trigger: str) -> bool:
        if not self._lock.acquire(blocking=False):
            log.warning(f"[TASK] Certificate run already in progress, '{trigger}' trigger skipped")
            return False
        
        self._thread = threading.Thread(target=self._run_locked, args=(trigger,), name=f"issue-{trigger}", daemon=True)
        self._thread.start()
        return True
    
    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
    
    def _run_locked(self, trigger: str) -> None:
        try:
            self.last_report = self.issue_fn(trigger)
        except Exception:
            log.exception(f"[TASK] Certificate run '{trigger}' failed unexpectedly")
        finally:
            self._lock.release()

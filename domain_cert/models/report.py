from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar


@dataclass(frozen=True)
class StepResult:
    name: str
    ok: bool
    elapsed: float
    domain: str | None = None
    error: str | None = None
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "domain": self.domain,
            "status": "SUCCESS" if self.ok else "FAILURE",
            "elapsed": round(self.elapsed, 2),
            "error": self.error
        }


@dataclass
class RunReport:
    DATE_FORMAT: ClassVar[str] = "%Y-%m-%d %H:%M:%S"
    
    trigger: str
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None
    steps: list[StepResult] = field(default_factory=list)
    error: str | None = None
    
    def add(self, step: StepResult) -> StepResult:
        self.steps.append(step)
        return step
    
    def finish(self, error: str | None = None) -> None:
        self.error = error
        self.finished_at = datetime.now(timezone.utc)
    
    @property
    def failed_steps(self) -> list[StepResult]:
        return [s for s in self.steps if not s.ok]
    
    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed_steps
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "trigger": self.trigger,
            "started_at": datetime.strftime(self.started_at, self.DATE_FORMAT),
            "finished_at": datetime.strftime(self.finished_at, self.DATE_FORMAT) if self.finished_at else None,
            "ok": self.ok,
            "error": self.error,
            "steps": [s.to_dict() for s in self.steps]
        }

import os
import sys
from pathlib import Path
from typing import ClassVar, Dict, Any
from dataclasses import dataclass, fields
from domain_cert.errors.validation_error import ValidationError
from domain_cert.validation.require import Require


def default_base_dir() -> Path:
    return Path(sys.argv[0]).resolve().parent


def default_acme_sh_bin() -> Path:
    return Path(os.getenv("HOME", "~")).expanduser() / ".acme.sh" / "acme.sh"


@dataclass(frozen=True)
class Settings:
    ALLOWED_LOG_LEVELS: ClassVar[set[str]] = { "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL" }
    CONFIG_FILENAME: ClassVar[str] = "config.json"
    INDEX_FILENAME: ClassVar[str] = "web/index.html"
    LOG_FILENAME: ClassVar[str] = "domain-cert.log"
    
    base_dir: Path = None
    log_level: str = "INFO"
    web_host: str = "0.0.0.0"
    web_port: int = 8081
    acme_sh_bin: Path = None
    acme_server: str = "letsencrypt"
    acme_install_url: str = "https://get.acme.sh"
    issue_interval_hours: int = 6
    log_retention_days: int = 30
    public_ip_url: str = "https://api.ipify.org?format=text"
    
    @classmethod
    def load(cls, **overrides: Any) -> "Settings":
        params: Dict[str, Any] = {}
        
        # Load environments
        for f in fields(cls):
            val = overrides.get(f.name)
            if val is None:
                val = os.getenv(f.name.upper())
            if val is None:
                val = f.default
            if val is not None and f.type is Path:
                val = Path(val).expanduser().resolve()
            elif isinstance(val, str) and f.type is int:
                try:
                    val = int(val)
                except ValueError:
                    raise ValidationError(f"Value '{f.name.upper()}={val}' has invalid type, must be a int")
            params[f.name] = val
        
        if params["base_dir"] is None:
            params["base_dir"] = default_base_dir()
        if params["acme_sh_bin"] is None:
            params["acme_sh_bin"] = default_acme_sh_bin()
        params["log_level"] = str(params["log_level"]).upper()

        Require.one_of("LOG_LEVEL", params["log_level"], cls.ALLOWED_LOG_LEVELS)
        Require.port("WEB_PORT", params["web_port"])
        
        Require.type("ISSUE_INTERVAL_HOURS", params["issue_interval_hours"], int)
        Require.min("ISSUE_INTERVAL_HOURS", params["issue_interval_hours"], 1)
        
        Require.type("LOG_RETENTION_DAYS", params["log_retention_days"], int)
        Require.min("LOG_RETENTION_DAYS", params["log_retention_days"], 1)
        
        Require.match("ACME_SERVER", params["acme_server"], r"^\S+$")
        
        return cls(**params)
    
    @property
    def config_file(self) -> Path:
        return self.base_dir / self.CONFIG_FILENAME
    
    @property
    def index_file(self) -> Path:
        return self.base_dir / self.INDEX_FILENAME
    
    @property
    def log_file(self) -> Path:
        return self.base_dir / self.LOG_FILENAME
    
    @property
    def issue_interval_seconds(self) -> float:
        return self.issue_interval_hours * 60 * 60

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar
from domain_cert.errors.config_error import ConfigError
from domain_cert.errors.validation_error import ValidationError
from domain_cert.validation.require import Require


def _get_typed(data: dict[str, Any], prefix: str, name: str, class_type: type, default: Any) -> Any:
    val = data.get(name)
    if val is None:
        return default
    Require.type(f"{prefix}{name}", val, class_type)
    return val


@dataclass(frozen=True)
class DomainEntry:
    domain: str = ""
    webroot: str = ""
    install_path: str = ""
    
    @classmethod
    def from_dict(cls, index: int, data: dict[str, Any]) -> "DomainEntry":
        prefix = f"domains[{index}]."
        return cls(
            domain = _get_typed(data, prefix, "domain", str, ""),
            webroot = _get_typed(data, prefix, "webroot", str, ""),
            install_path = _get_typed(data, prefix, "install_path", str, "")
        )
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "webroot": self.webroot,
            "install_path": self.install_path
        }
    

@dataclass(frozen=True)
class CertConfig:
    """Persisted configuration of the console and the domains to certify.
    
    Parsing is structural only: key types are checked, missing keys and nulls
    fall back to zero values and unknown keys are ignored. Empty domain list,
    negative renewal days or blank credentials are all accepted.
    """
    KEY_FILENAME: ClassVar[str] = "privkey.pem"
    FULLCHAIN_FILENAME: ClassVar[str] = "fullchain.pem"
    
    email: str = ""
    renew_days: int = 0
    web_enable: bool = False
    web_user: str = ""
    web_pass: str = ""
    domains: tuple[DomainEntry, ...] = field(default_factory=tuple)
    
    @classmethod
    def from_json(cls, raw: bytes | str) -> "CertConfig":
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(str(e))
        
        try:
            return cls.from_dict(data)
        except ValidationError as e:
            raise ConfigError(str(e))
    
    @classmethod
    def from_dict(cls, data: Any) -> "CertConfig":
        Require.type("config", data, dict, custom_err="Configuration must be a JSON object")
        
        domains_raw = _get_typed(data, "", "domains", list, [])
        domains: list[DomainEntry] = []
        
        for i, item in enumerate(domains_raw):
            if item is None:
                domains.append(DomainEntry())
                continue
            Require.type(f"domains[{i}]", item, dict)
            domains.append(DomainEntry.from_dict(i, item))
        
        return cls(
            email = _get_typed(data, "", "email", str, ""),
            renew_days = _get_typed(data, "", "renew_days", int, 0),
            web_enable = _get_typed(data, "", "web_enable", bool, False),
            web_user = _get_typed(data, "", "web_user", str, ""),
            web_pass = _get_typed(data, "", "web_pass", str, ""),
            domains = tuple(domains)
        )
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "renew_days": self.renew_days,
            "web_enable": self.web_enable,
            "web_user": self.web_user,
            "web_pass": self.web_pass,
            "domains": [d.to_dict() for d in self.domains]
        }

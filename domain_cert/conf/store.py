import os
import logging
import tempfile
import threading
from pathlib import Path
from domain_cert.errors.config_error import ConfigError
from domain_cert.models.cert_config import CertConfig

log = logging.getLogger(__name__)


class ConfigStore:
    """Single process-wide configuration, persisted as `config.json`.
    
    Readers get an immutable snapshot, writers replace it as a whole. The lock
    only guards the swap, so a run that already took a snapshot keeps using it.
    """
    
    def __init__(self, conf_file: Path) -> None:
        self.conf_file = conf_file
        self._config = CertConfig()
        self._lock = threading.Lock()
    
    def load(self) -> CertConfig:
        if not self.conf_file.exists():
            log.warning(f"Config file '{self.conf_file}' does not exist, using empty configuration")
            return self.get()
        
        try:
            config = CertConfig.from_json(self.conf_file.read_bytes())
        except ConfigError as e:
            raise ConfigError(f"Failed to parse '{self.conf_file}' config file: {e}")
        
        self.replace(config)
        log.info(f"Loaded configuration from '{self.conf_file}' with {len(config.domains)} domain(s)")
        return config
    
    def save(self, raw: bytes) -> CertConfig:
        config = CertConfig.from_json(raw)
        
        with self._lock:
            self._write(raw)
            self._config = config
        
        log.info(f"Saved configuration to '{self.conf_file}' with {len(config.domains)} domain(s)")
        return config
    
    def get(self) -> CertConfig:
        with self._lock:
            return self._config
    
    def replace(self, config: CertConfig) -> None:
        with self._lock:
            self._config = config
    
    def _write(self, raw: bytes) -> None:
        self.conf_file.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=self.conf_file.parent)
        
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(raw)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self.conf_file)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise

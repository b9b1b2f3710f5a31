import shlex
import logging
import subprocess
from pathlib import Path
from dataclasses import dataclass
from typing import Sequence
from domain_cert.conf.settings import Settings
from domain_cert.errors.acme_error import AcmeShError
from domain_cert.models.cert_config import CertConfig, DomainEntry

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcmeSh:
    exe_path: Path
    server: str
    install_url: str
    
    @classmethod
    def from_settings(cls, settings: Settings) -> "AcmeSh":
        return cls(
            exe_path = settings.acme_sh_bin,
            server = settings.acme_server,
            install_url = settings.acme_install_url
        )
    
    
    def install(self, email: str) -> None:
        script = f"curl {shlex.quote(self.install_url)} | sh -s email={shlex.quote(email)}"
        self._run_cmd(["sh", "-c", script])


    def set_default_ca(self) -> None:
        cmd = [
            str(self.exe_path),
            "--set-default-ca",
            "--server", self.server
        ]
        self._run_cmd(cmd)


    def issue(self, entry: DomainEntry, renew_days: int) -> None:
        cmd = [
            str(self.exe_path),
            "--issue",
            "--server", self.server,
            "-d", entry.domain,
            "-w", entry.webroot,
            "--days", str(renew_days)
        ]
        self._run_cmd(cmd)


    def install_cert(self, entry: DomainEntry) -> None:
        install_dir = Path(entry.install_path)
        install_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        
        cmd = [
            str(self.exe_path),
            "--install-cert",
            "-d", entry.domain,
            "--key-file", str(install_dir / CertConfig.KEY_FILENAME),
            "--fullchain-file", str(install_dir / CertConfig.FULLCHAIN_FILENAME)
        ]
        self._run_cmd(cmd)

    
    def _run_cmd(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        # No timeout, a hung acme.sh blocks only the thread running this issuance
        args = [str(a) for a in args]
        log.debug(f"Executing command: {' '.join(args)}")
        
        result = subprocess.run(
            args, 
            stdin=subprocess.DEVNULL, 
            stdout=subprocess.PIPE, 
            stderr=subprocess.STDOUT, 
            text=True, 
            errors="replace"
        )
        
        for line in (result.stdout or "").splitlines():
            if line.strip():
                log.info(f"[{Path(args[0]).name}] {line}")
        
        if result.returncode != 0:
            raise AcmeShError(cmd=args, return_code=result.returncode, output=result.stdout or "")
        
        return result

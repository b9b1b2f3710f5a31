import base64
import json
import subprocess
import pytest
from pathlib import Path
from typing import Any
from domain_cert.app import create_app
from domain_cert.bootstrap import init_files
from domain_cert.conf.settings import Settings
from domain_cert.conf.store import ConfigStore
from domain_cert.domain.acme_sh import AcmeSh
from domain_cert.domain.issuer import Issuer, IssueDispatcher

SAMPLE_CONFIG: dict[str, Any] = {
    "email": "ops@a.test",
    "renew_days": 90,
    "web_enable": True,
    "web_user": "admin",
    "web_pass": "secret",
    "domains": [
        { "domain": "a.test", "webroot": "/var/www/a", "install_path": "" },
        { "domain": "b.test", "webroot": "/var/www/b", "install_path": "" }
    ]
}


def basic_auth(user: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{user}:{password}".encode()).decode()
    return { "Authorization": f"Basic {token}" }


class FakeRun:
    """Stands in for `subprocess.run`, records every command."""
    
    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.kwargs: list[dict] = []
        self.fail_when: str | None = None
    
    def __call__(self, args, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(args))
        self.kwargs.append(kwargs)
        joined = " ".join(args)
        code = 1 if self.fail_when and self.fail_when in joined else 0
        return subprocess.CompletedProcess(args, code, stdout=f"ran {args[0]}\n", stderr=None)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings.load(base_dir=tmp_path, acme_sh_bin=tmp_path / ".acme.sh" / "acme.sh")


@pytest.fixture
def sample_config(tmp_path: Path) -> dict[str, Any]:
    conf = json.loads(json.dumps(SAMPLE_CONFIG))
    for entry in conf["domains"]:
        entry["install_path"] = str(tmp_path / "certs" / entry["domain"])
    return conf


@pytest.fixture
def store(settings: Settings, sample_config: dict[str, Any]) -> ConfigStore:
    settings.config_file.write_text(json.dumps(sample_config, indent=2), encoding="utf-8")
    store = ConfigStore(settings.config_file)
    store.load()
    return store


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr("domain_cert.domain.acme_sh.subprocess.run", fake)
    return fake


@pytest.fixture
def issuer(store: ConfigStore, settings: Settings, fake_run: FakeRun) -> Issuer:
    return Issuer(store, AcmeSh.from_settings(settings))


@pytest.fixture
def dispatcher(issuer: Issuer) -> IssueDispatcher:
    return IssueDispatcher(issuer.issue_all)


@pytest.fixture
def client(settings: Settings, store: ConfigStore, dispatcher: IssueDispatcher):
    init_files(settings)
    app = create_app(settings, store, dispatcher)
    app.config["TESTING"] = True
    return app.test_client()

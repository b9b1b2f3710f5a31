import json
import logging
import threading
from pathlib import Path
from domain_cert.domain.issuer import IssueDispatcher
from domain_cert.models.report import RunReport


def _markers(caplog) -> list[str]:
    return [
        r.getMessage() for r in caplog.records
        if r.getMessage().startswith(("[DOMAIN]", "[STEP]"))
    ]


def test_issue_all_invokes_acme_sh_per_domain_in_order(issuer, fake_run, settings):
    report = issuer.issue_all("manual")
    
    acme_bin = str(settings.acme_sh_bin)
    assert fake_run.calls[0][:2] == ["sh", "-c"]
    assert "curl https://get.acme.sh | sh -s email=ops@a.test" == fake_run.calls[0][2]
    assert fake_run.calls[1] == [acme_bin, "--set-default-ca", "--server", "letsencrypt"]
    
    issue_cmds = [" ".join(c) for c in fake_run.calls if "--issue" in c]
    assert len(issue_cmds) == 2
    assert "-d a.test -w /var/www/a --days 90" in issue_cmds[0]
    assert "-d b.test -w /var/www/b --days 90" in issue_cmds[1]
    assert report.ok
    assert len(report.steps) == 6


def test_install_cert_creates_dir_and_uses_fixed_filenames(issuer, fake_run, sample_config):
    issuer.issue_all()
    
    install_path = sample_config["domains"][0]["install_path"]
    install_cmd = next(c for c in fake_run.calls if "--install-cert" in c)
    
    assert install_cmd[install_cmd.index("-d") + 1] == "a.test"
    assert install_cmd[install_cmd.index("--key-file") + 1] == f"{install_path}/privkey.pem"
    assert install_cmd[install_cmd.index("--fullchain-file") + 1] == f"{install_path}/fullchain.pem"
    assert Path(install_path).is_dir()


def test_domain_markers_wrap_their_steps_even_on_failure(issuer, fake_run, caplog):
    caplog.set_level(logging.INFO)
    fake_run.fail_when = "-d a.test"
    
    report = issuer.issue_all()
    markers = _markers(caplog)
    
    start_a = markers.index("[DOMAIN] a.test started")
    end_a = markers.index("[DOMAIN] a.test finished")
    start_b = markers.index("[DOMAIN] b.test started")
    end_b = markers.index("[DOMAIN] b.test finished")
    
    assert start_a < end_a < start_b < end_b
    between_a = markers[start_a + 1:end_a]
    assert any(m.startswith("[STEP] Issue certificate a.test failed") for m in between_a)
    assert any(m.startswith("[STEP] Install certificate a.test failed") for m in between_a)
    assert any(m.startswith("[STEP] Issue certificate b.test succeeded") for m in markers[start_b:end_b])
    
    assert [s.name for s in report.failed_steps] == ["Issue certificate a.test", "Install certificate a.test"]
    assert "exited with status 1" in report.failed_steps[0].error


def test_no_invocation_beyond_configured_domains(issuer, fake_run, store):
    store.save(json.dumps({ "renew_days": 90, "domains": [{ "domain": "a.test", "webroot": "/var/www/a", "install_path": str(store.conf_file.parent / "a") }] }).encode())
    
    issuer.issue_all()
    
    domains = [c[c.index("-d") + 1] for c in fake_run.calls if "-d" in c]
    assert domains == ["a.test", "a.test"]


def test_subprocess_output_goes_to_log(issuer, fake_run, caplog):
    caplog.set_level(logging.INFO)
    issuer.issue_all()
    
    assert any(r.getMessage() == "[sh] ran sh" for r in caplog.records)


def test_unexpected_fault_is_caught_and_reported(issuer, caplog, monkeypatch):
    def broken_get():
        raise RuntimeError("store exploded")
    monkeypatch.setattr(issuer.store, "get", broken_get)
    
    report = issuer.issue_all()
    
    assert report.error == "RuntimeError: store exploded"
    assert report.finished_at is not None
    assert any(r.exc_info for r in caplog.records if "crashed" in r.getMessage())


def test_dispatcher_runs_at_most_one_issuance():
    release = threading.Event()
    entered = threading.Event()
    calls = []
    
    def slow_issue(trigger):
        calls.append(trigger)
        entered.set()
        release.wait(5)
        return RunReport(trigger)
    
    dispatcher = IssueDispatcher(slow_issue)
    
    assert dispatcher.start("manual") is True
    assert entered.wait(5)
    assert dispatcher.is_running
    assert dispatcher.start("manual") is False
    assert dispatcher.run("timer") is None
    
    release.set()
    dispatcher.join(5)
    
    assert calls == ["manual"]
    assert not dispatcher.is_running
    assert dispatcher.last_report.trigger == "manual"
    assert dispatcher.run("timer").trigger == "timer"


def test_acme_sh_calls_never_time_out(issuer, fake_run):
    issuer.issue_all()
    
    assert fake_run.kwargs
    assert all("timeout" not in kw for kw in fake_run.kwargs)


def test_skipped_trigger_is_logged(caplog):
    release = threading.Event()
    entered = threading.Event()
    
    def slow_issue(trigger):
        entered.set()
        release.wait(5)
        return RunReport(trigger)
    
    dispatcher = IssueDispatcher(slow_issue)
    dispatcher.start("manual")
    assert entered.wait(5)
    
    dispatcher.run("timer")
    release.set()
    dispatcher.join(5)
    
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert "[TASK] Certificate run already in progress, 'timer' trigger skipped" in messages

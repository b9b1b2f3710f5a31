#!/usr/bin/env python3

import threading
import logging
import typer
from pathlib import Path
from typing import Any, NoReturn
from rich.console import Console
from rich.table import Table, box
from werkzeug.serving import make_server
from domain_cert.app import create_app
from domain_cert.bootstrap import init_files
from domain_cert.conf.settings import Settings
from domain_cert.conf.store import ConfigStore
from domain_cert.domain.acme_sh import AcmeSh
from domain_cert.domain.issuer import Issuer, IssueDispatcher
from domain_cert.errors.config_error import ConfigError
from domain_cert.errors.validation_error import ValidationError
from domain_cert.log_manager import clean_old_log, setup_logging
from domain_cert.models.report import RunReport
from domain_cert.scheduler import Scheduler
from domain_cert.utils import get_public_ip, console_url

LOGGER = logging.getLogger("domain-cert")

app = typer.Typer(
    add_completion=False,
    help="Periodic acme.sh certificate issuance with a small web console"
)
console = Console()


class Opt:
    @staticmethod
    def base_dir() -> Any:
        return typer.Option(
            None, "--base-dir", "-b",
            envvar="BASE_DIR",
            help="Directory holding config.json, web/index.html and domain-cert.log, defaults to the script directory"
        )


@app.command(help="Run the scheduler and the web console until interrupted")
def serve(base_dir: Path = Opt.base_dir()) -> None:
    settings = load_settings(base_dir)
    init_files(settings)
    
    removed = clean_old_log(settings.log_file, settings.log_retention_days)
    open_log(settings)
    if removed:
        LOGGER.info(f"Removed log file older than {settings.log_retention_days} days")
    
    store = load_store(settings)
    issuer = Issuer(store, AcmeSh.from_settings(settings))
    dispatcher = IssueDispatcher(issuer.issue_all)
    
    console.print(f"Config file: [bold]{settings.config_file}[/bold]", soft_wrap=True)
    console.print(f"Console address: [bold]{console_url(get_public_ip(settings.public_ip_url), settings.web_port)}[/bold]", soft_wrap=True)
    
    server = None
    if store.get().web_enable:
        flask_app = create_app(settings, store, dispatcher)
        try:
            server = make_server(settings.web_host, settings.web_port, flask_app, threaded=True)
        except OSError as e:
            LOGGER.error(f"Failed to bind web console on {settings.web_host}:{settings.web_port}: {e}")
            exit_with_error(f"Failed to bind web console on {settings.web_host}:{settings.web_port}: {e}")
    else:
        LOGGER.info("Web console is disabled")
        console.print("[yellow]Web console is disabled[/yellow]")
    
    scheduler = Scheduler(settings.issue_interval_seconds, lambda: dispatcher.run("timer"), name="issue-timer")
    scheduler.start()
    
    if server is not None:
        threading.Thread(target=server.serve_forever, name="web-console", daemon=True).start()
        LOGGER.info(f"Web console listening on {settings.web_host}:{settings.web_port}")
    
    try:
        wait_forever()
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")
    finally:
        scheduler.stop()
        if server is not None:
            server.shutdown()


@app.command(help="Run a single certificate issuance in the foreground")
def issue(base_dir: Path = Opt.base_dir()) -> None:
    settings = load_settings(base_dir)
    init_files(settings)
    clean_old_log(settings.log_file, settings.log_retention_days)
    open_log(settings)
    
    store = load_store(settings)
    report = Issuer(store, AcmeSh.from_settings(settings)).issue_all("cli")
    render_report(report)
    
    raise typer.Exit(code=0 if report.ok else 1)


@app.command(help="Create default config.json and web/index.html when missing")
def init(base_dir: Path = Opt.base_dir()) -> None:
    settings = load_settings(base_dir)
    created = init_files(settings)
    
    if not created:
        console.print("Nothing to do, all files already exist")
    for path in created:
        console.print(f"Created [bold]{path}[/bold]")


# Helper functions

def load_settings(base_dir: Path | None) -> Settings:
    try:
        return Settings.load(base_dir=base_dir)
    except ValidationError as e:
        exit_with_error(f"Invalid settings: {e}")


def open_log(settings: Settings) -> None:
    try:
        setup_logging(settings.log_file, settings.log_level)
    except OSError as e:
        exit_with_error(f"Failed to open log file '{settings.log_file}': {e}")


def load_store(settings: Settings) -> ConfigStore:
    store = ConfigStore(settings.config_file)
    try:
        store.load()
    except ConfigError as e:
        LOGGER.error(str(e))
        exit_with_error(str(e))
    return store


def render_report(report: RunReport) -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Step")
    table.add_column("Status")
    table.add_column("Time", justify="right")
    table.add_column("Error")
    
    for step in report.steps:
        status = "[green]SUCCESS[/green]" if step.ok else "[red]FAILURE[/red]"
        table.add_row(step.name, status, f"{step.elapsed:.2f}s", step.error or "")
    
    console.print(table)
    if report.error:
        console.print(f"[red]Run crashed: {report.error}[/red]")


def wait_forever() -> None:
    threading.Event().wait()


def exit_with_error(msg: str) -> NoReturn:
    Console(stderr=True).print(f"[red]Error:[/red] {msg}")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

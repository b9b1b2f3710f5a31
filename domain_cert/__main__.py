from domain_cert.cli import app

app(prog_name="domain-cert")

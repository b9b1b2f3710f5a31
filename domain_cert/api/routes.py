import platform
from flask import Blueprint, Response, jsonify, request, send_file
from domain_cert import __version__
from domain_cert.api.auth import require_auth
from domain_cert.api.helpers import build_response, get_dispatcher, get_settings, get_store, log_request, text_response
from domain_cert.errors.config_error import ConfigError

api = Blueprint("api", __name__)


@api.before_app_request
def authenticate() -> None:
    require_auth()


@api.route("/", methods=["GET"])
def index() -> Response:
    settings = get_settings()
    if not settings.index_file.exists():
        return build_response(404, msg="Console page not found")
    
    return send_file(settings.index_file, mimetype="text/html")


@api.route("/api/version", methods=["GET"])
def version() -> Response:
    payload = {
        "name": "domain-cert",
        "version": __version__,
        "python": platform.python_version()
    }
    return build_response(200, data=payload)


@api.route("/api/config", methods=["GET"])
def get_config() -> Response:
    conf = get_store().get()
    return jsonify(conf.to_dict())


@api.route("/api/config", methods=["POST"])
def save_config() -> Response:
    raw = request.get_data(cache=False)
    
    try:
        conf = get_store().save(raw)
    except ConfigError as e:
        log_request(f"Rejected configuration: {e}", "warning")
        return text_response(f"JSON error: {e}")
    
    log_request(f"Configuration replaced ({len(conf.domains)} domain(s))")
    return text_response("ok")


@api.route("/api/issue", methods=["POST"])
def issue() -> Response:
    dispatcher = get_dispatcher()
    
    if not dispatcher.start("manual"):
        log_request("Certificate run already in progress")
        return text_response("running")
    
    log_request("Certificate run started")
    return text_response("started")


@api.route("/api/issue/last", methods=["GET"])
def last_issue() -> Response:
    dispatcher = get_dispatcher()
    report = dispatcher.last_report
    
    payload = {
        "running": dispatcher.is_running,
        "report": report.to_dict() if report else None
    }
    return build_response(200, data=payload)

import logging
from flask import Flask, Response
from werkzeug.exceptions import MethodNotAllowed, NotFound
from domain_cert.conf.settings import Settings
from domain_cert.conf.store import ConfigStore
from domain_cert.domain.issuer import IssueDispatcher
from domain_cert.errors.auth_error import AuthError
from domain_cert.api.routes import api as api_blueprint
from domain_cert.api.helpers import build_response, log_request, text_response

log = logging.getLogger(__name__)


def create_app(settings: Settings, store: ConfigStore, dispatcher: IssueDispatcher) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.json.sort_keys = False
    app.extensions["settings"] = settings
    app.extensions["store"] = store
    app.extensions["dispatcher"] = dispatcher
    
    setup_error_handlers(app)
    app.register_blueprint(api_blueprint)
    
    return app


def setup_error_handlers(app: Flask) -> None:
    @app.errorhandler(AuthError)
    def handle_auth_error(e: AuthError) -> Response:
        log_request(f"{type(e).__name__}: {e.msg}, details: {e.detail}", "warning")
        return text_response(e.msg, e.code, headers=e.headers)
    
    @app.errorhandler(404)
    def handle_not_found(e: NotFound) -> Response:
        log_request(str(e), "warning")
        return build_response(404, msg="Resource not found")
    
    @app.errorhandler(405)
    def handle_method_not_allowed(e: MethodNotAllowed) -> Response:
        log_request(str(e), "warning")
        return build_response(405, msg=f"Method not allowed, valid methods are: {', '.join(e.valid_methods or [])}")
    
    @app.errorhandler(500)
    def handle_any_exception(e) -> Response:
        log_request(f"Unhandled exception: {getattr(e, 'original_exception', e)}", "error")
        return build_response(500, msg="Internal server error")

import logging
from datetime import datetime, timezone
from typing import Any, cast
from http import HTTPStatus
from flask import Response, jsonify, request, current_app as app
from domain_cert.conf.settings import Settings
from domain_cert.conf.store import ConfigStore
from domain_cert.domain.issuer import IssueDispatcher

log = logging.getLogger(__name__)


def get_settings() -> Settings:
    return cast(Settings, app.extensions["settings"])


def get_store() -> ConfigStore:
    return cast(ConfigStore, app.extensions["store"])


def get_dispatcher() -> IssueDispatcher:
    return cast(IssueDispatcher, app.extensions["dispatcher"])


def log_request(msg: str, level: str = "info") -> None:
    level = level.lower()
    log_fn = getattr(log, level, None)
    
    if not callable(log_fn):
        raise ValueError(f"Invalid log level: {level}")
    log_fn(f"{request.remote_addr} {request.method} {request.path} {msg}")


def text_response(body: str, code: int = 200, headers: dict[str, str] | None = None) -> Response:
    return Response(body, status=code, mimetype="text/plain", headers=headers)


def build_response(
    code: int,
    *,
    msg: str | None = None,
    data: Any = None, 
    detail: Any | None = None
) -> Response:
    payload = {}
    
    if msg is not None:
        payload["message"] = msg
    if detail is not None:
        payload["detail"] = detail
    payload["data"] = data
    
    payload = {
        "http_code": code,
        "http_status": HTTPStatus(code).phrase,
        "method": request.method,
        "path": request.path,
        **payload,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    
    response = jsonify(payload)
    response.status_code = code
    return response

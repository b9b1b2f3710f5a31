import hmac
from flask import request
from domain_cert.api.helpers import get_store
from domain_cert.errors.auth_error import AuthCredentialsMissingError, AuthFailedError, ConsoleDisabledError


def _equals(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def require_auth() -> str:
    """Check HTTP Basic credentials against the current configuration, return the username."""
    conf = get_store().get()
    
    if not conf.web_enable:
        raise ConsoleDisabledError()
    
    auth_header = request.headers.get("Authorization", None)
    if not auth_header:
        raise AuthCredentialsMissingError("Authorization header is missing or empty")
    
    auth = request.authorization
    if auth is None or auth.type != "basic":
        raise AuthFailedError("Authorization header is not valid Basic credentials")
    
    username = auth.username or ""
    password = auth.password or ""
    
    # Both compared so a wrong username takes as long as a wrong password
    user_ok = _equals(username, conf.web_user)
    pass_ok = _equals(password, conf.web_pass)
    
    if not (user_ok and pass_ok):
        raise AuthFailedError(f"Invalid credentials for user '{username}'")
    
    return username

import logging
import requests

log = logging.getLogger(__name__)

UNKNOWN_PUBLIC_IP = "unknown-public-ip"


def get_public_ip(url: str, *, timeout: int = 5) -> str:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        log.warning(f"Failed to resolve public IP address from '{url}': {e}")
        return UNKNOWN_PUBLIC_IP
    
    return response.text.strip() or UNKNOWN_PUBLIC_IP


def console_url(public_ip: str, port: int) -> str:
    return f"http://{public_ip}:{port}"

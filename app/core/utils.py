import ipaddress

from fastapi import Request

from app.core.config import settings

# Longest textual IPv6 address (IPv4-mapped form)
MAX_ADDRESS_LENGTH = 45


def parse_ip_address(value: str) -> str | None:
    """Return ``value`` as a normalized IP address, or None if it is not one."""
    try:
        address = str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None
    return address if len(address) <= MAX_ADDRESS_LENGTH else None


def get_client_address(request: Request) -> str:
    """
    Resolve the address of the client that sent the request.

    When TRUST_PROXY_HEADERS is enabled the first entry of X-Forwarded-For
    wins if it is a valid IP address; otherwise the socket peer address is
    used.

    Args:
        request: The incoming request.

    Returns:
        str: The client address, or "unknown" when none is available.
    """
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            address = parse_ip_address(forwarded.split(",")[0])
            if address:
                return address

    return request.client.host if request.client else "unknown"


def get_user_agent(request: Request) -> str | None:
    return request.headers.get("user-agent")

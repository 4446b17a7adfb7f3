# src/relfetch/utils.py
import importlib.metadata
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from relfetch.constants import (
    ACCESS_TOKEN_PARAM,
    GITHUB_API_VERSION,
    GITHUB_JSON_ACCEPT,
)

# Cache for the User-Agent string to avoid repeated metadata lookups
_USER_AGENT_CACHE = None


def get_version() -> str:
    """
    Retrieve the installed relfetch package version.

    Returns:
        version (str): The installed version string, or "unknown" if it cannot be determined.
    """
    try:
        return importlib.metadata.version("relfetch")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `relfetch/{version}`.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        _USER_AGENT_CACHE = f"relfetch/{get_version()}"

    return _USER_AGENT_CACHE


def build_api_headers() -> Dict[str, str]:
    """Headers sent with every release API request."""
    return {
        "Accept": GITHUB_JSON_ACCEPT,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": get_user_agent(),
    }


def build_token_params(token: Optional[str]) -> Dict[str, str]:
    """
    Build the query parameters carrying the access token.

    Surrounding whitespace is ignored; an empty or missing token yields no parameters
    so the request stays unauthenticated.
    """
    candidate = (token or "").strip()
    if not candidate:
        return {}
    return {ACCESS_TOKEN_PARAM: candidate}


def parse_rate_limit_header(header_value: Any) -> Optional[int]:
    """
    Parse an HTTP rate-limit header value into an integer.

    Accepts numeric strings, integers, or floats. Non-numeric or otherwise
    unparsable values return `None`.
    """
    try:
        if isinstance(header_value, str) and header_value.strip().isdigit():
            return int(header_value.strip())
        elif isinstance(header_value, (int, float)):
            return int(header_value)
    except (ValueError, TypeError):
        pass
    return None


def format_rate_limit_reset(header_value: Any) -> Optional[str]:
    """
    Convert an `X-RateLimit-Reset` epoch header into a UTC timestamp string.

    Returns:
        Optional[str]: e.g. "2024-01-15 12:00:00 UTC", or None when the header is missing or invalid.
    """
    reset_epoch = parse_rate_limit_header(header_value)
    if reset_epoch is None:
        return None
    try:
        return datetime.fromtimestamp(reset_epoch, timezone.utc).strftime(
            "%Y-%m-%d %H:%M:%S UTC"
        )
    except (OverflowError, OSError, ValueError):
        return None

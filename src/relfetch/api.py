"""
GitHub release API access.

Builds the release query for a run and performs the single request that
fetches it. There are no retries and no pagination: whatever the endpoint
returns natively is what the rest of the pipeline sees.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict
from urllib.parse import quote

import requests

from relfetch.constants import GITHUB_API_TIMEOUT
from relfetch.exceptions import APIError, ConnectivityError, RateLimitError
from relfetch.log_utils import logger
from relfetch.options import Options
from relfetch.utils import (
    build_api_headers,
    build_token_params,
    format_rate_limit_reset,
    parse_rate_limit_header,
)


@dataclass(frozen=True)
class ReleaseQuery:
    """A release API GET request: URL plus query parameters."""

    url: str
    params: Dict[str, str] = field(default_factory=dict)


def releases_url(options: Options) -> str:
    """Collection URL of the repository's releases."""
    return (
        f"{options.api_url}/repos/{quote(options.user, safe='')}"
        f"/{quote(options.repo, safe='')}/releases"
    )


def build_release_query(options: Options) -> ReleaseQuery:
    """
    Build the release API request for the given options.

    The whole collection is requested when listing all releases. Otherwise a
    single release is selected, by tag when one was given and the latest
    release by default.
    """
    url = releases_url(options)
    if not options.list_releases:
        if options.tag is not None:
            url = f"{url}/tags/{quote(options.tag, safe='')}"
        else:
            url = f"{url}/latest"
    return ReleaseQuery(url=url, params=build_token_params(options.token))


def _raise_for_rate_limit(
    response: requests.Response, query: ReleaseQuery, payload: Any = None
) -> None:
    """
    Raise RateLimitError when a 403 response reports an exhausted rate limit.

    The API's own `message`, when the body carries one, is kept in the error.
    """
    if response.status_code != 403:
        return
    headers = getattr(response, "headers", None) or {}
    remaining = parse_rate_limit_header(headers.get("X-RateLimit-Remaining"))
    if remaining != 0:
        return
    message = "GitHub API rate limit exceeded"
    if isinstance(payload, dict) and payload.get("message") is not None:
        message = f"{message}: {payload['message']}"
    raise RateLimitError(
        message,
        reset_time=format_rate_limit_reset(headers.get("X-RateLimit-Reset")),
        url=query.url,
    )


def fetch_release_data(query: ReleaseQuery, session: requests.Session) -> Any:
    """
    Perform the release API request and decode its JSON body.

    Parameters:
        query: The request to perform.
        session: HTTP session used for the request.

    Returns:
        Any: The decoded JSON document. Error documents carrying a `message` are
        returned as-is for the response filter to report.

    Raises:
        ConnectivityError: If the API cannot be reached or answers with an empty body.
        RateLimitError: If the rate limit is exhausted.
        APIError: If the body is not JSON, or is an error status without a message.
    """
    logger.debug(f"Making GitHub API request: {query.url}")
    try:
        response = session.get(
            query.url,
            params=query.params,
            headers=build_api_headers(),
            timeout=GITHUB_API_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise ConnectivityError(
            f"Could not connect to {query.url}", details=str(exc)
        ) from exc

    logger.debug(
        f"Received HTTP response status code: {response.status_code} for URL: {query.url}"
    )

    if not response.content or not response.content.strip():
        raise ConnectivityError(f"Empty response from {query.url}")

    try:
        payload = response.json()
    except (ValueError, json.JSONDecodeError) as exc:
        _raise_for_rate_limit(response, query)
        raise APIError(
            "GitHub API returned a response that is not valid JSON",
            status_code=response.status_code,
            url=query.url,
            details=str(exc),
        ) from exc

    _raise_for_rate_limit(response, query, payload)

    if not response.ok and not (
        isinstance(payload, dict) and payload.get("message") is not None
    ):
        raise APIError(
            f"GitHub API request failed with HTTP {response.status_code}",
            status_code=response.status_code,
            url=query.url,
        )

    return payload

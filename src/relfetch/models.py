"""
Release data model and response filtering.

Raw GitHub release payloads are deserialized into Release/Asset values and
their assets narrowed to those whose name matches the asset pattern.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from relfetch.exceptions import APIError
from relfetch.log_utils import logger


@dataclass(frozen=True)
class Asset:
    """Represents a downloadable asset from a release."""

    name: str
    """The filename of the asset"""

    url: str
    """API endpoint of the asset; serves raw content with Accept: application/octet-stream"""

    download: str
    """Public browser download URL"""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "url": self.url, "download": self.download}


@dataclass(frozen=True)
class Release:
    """Represents a release with its (filtered) assets."""

    name: str
    """Display name of the release; falls back to the tag when the API has none"""

    tag: str
    """The release tag (e.g., 'v2.7.8')"""

    assets: Tuple[Asset, ...] = ()
    """Assets matching the asset pattern, in API order"""

    total_assets: int = 0
    """Number of well-formed assets the release had before filtering"""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "tag": self.tag,
            "assets": [asset.to_dict() for asset in self.assets],
        }

    def to_summary(self) -> Dict[str, str]:
        return {"tag": self.tag, "name": self.name}


def check_api_error(payload: Any) -> None:
    """
    Raise APIError when the payload is a GitHub error document.

    GitHub reports failures (unknown repository, unknown tag, bad credentials) as
    a JSON object with a `message` field.
    """
    if isinstance(payload, dict) and payload.get("message") is not None:
        raise APIError(f"GitHub API error: {payload['message']}")


def _compile_pattern(pattern: Union[str, re.Pattern[str]]) -> re.Pattern[str]:
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def asset_from_github_data(asset_data: Dict[str, Any]) -> Asset:
    """
    Create an Asset from a GitHub API asset entry.

    Raises:
        KeyError: If the entry has no `name`.
    """
    return Asset(
        name=str(asset_data["name"]),
        url=str(asset_data.get("url") or ""),
        download=str(asset_data.get("browser_download_url") or ""),
    )


def release_from_github_data(
    release_data: Dict[str, Any], pattern: Union[str, re.Pattern[str]]
) -> Release:
    """
    Create a Release from GitHub API release data, keeping only matching assets.

    Parameters:
        release_data: A single release object from the GitHub API.
        pattern: Regular expression searched (not anchored) in each asset name.

    Returns:
        Release: The normalized release; asset order is preserved.

    Raises:
        APIError: If the release has no tag or its asset list is malformed.
    """
    tag = release_data.get("tag_name")
    if not tag:
        raise APIError("Unexpected release data from GitHub API: missing tag_name")

    assets_data = release_data.get("assets") or []
    if not isinstance(assets_data, list):
        raise APIError(
            f"Unexpected release data from GitHub API: assets of release '{tag}' is not a list"
        )

    regex = _compile_pattern(pattern)
    assets: List[Asset] = []
    total = 0
    for asset_data in assets_data:
        if not isinstance(asset_data, dict) or not asset_data.get("name"):
            logger.warning(f"Skipping malformed asset entry in release {tag}")
            continue
        total += 1
        asset = asset_from_github_data(asset_data)
        if regex.search(asset.name):
            assets.append(asset)
        else:
            logger.debug(f"Asset {asset.name} does not match pattern {regex.pattern}")

    return Release(
        name=str(release_data.get("name") or tag),
        tag=str(tag),
        assets=tuple(assets),
        total_assets=total,
    )


def filter_release_payload(
    payload: Any, pattern: str, all_releases: bool
) -> Union[Release, List[Release]]:
    """
    Turn a raw release API response into Release values.

    Parameters:
        payload: Decoded JSON body; an object for single-release requests, an array
            when all releases were requested.
        pattern: Asset name regular expression.
        all_releases: Whether the collection endpoint was queried.

    Returns:
        Release for a single-release request, otherwise a list of Release in API order.

    Raises:
        APIError: If the payload is an API error document or has an unexpected shape.
    """
    check_api_error(payload)
    regex = re.compile(pattern)

    if all_releases:
        if not isinstance(payload, list):
            raise APIError(
                "Unexpected response from GitHub API: expected a list of releases"
            )
        releases = []
        for release_data in payload:
            if not isinstance(release_data, dict):
                raise APIError(
                    "Unexpected response from GitHub API: malformed release entry"
                )
            releases.append(release_from_github_data(release_data, regex))
        logger.debug(f"Received {len(releases)} release(s)")
        return releases

    if not isinstance(payload, dict):
        raise APIError("Unexpected response from GitHub API: expected a release object")
    release = release_from_github_data(payload, regex)
    logger.debug(
        f"Release {release.tag}: {len(release.assets)} of {release.total_assets} asset(s) match"
    )
    return release

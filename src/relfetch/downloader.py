"""
Release asset downloader.

Assets are fetched one after another, in release order, from their API
endpoint. Existing files are left alone unless a forced download was
requested. Any failure ends the run; there is no retry and no resume.
"""

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests

from relfetch.constants import (
    ASSET_CONTENT_ACCEPT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
)
from relfetch.exceptions import (
    FileSystemError,
    HTTPError,
    NetworkError,
    NoMatchingAssetsError,
    PathValidationError,
)
from relfetch.log_utils import logger
from relfetch.models import Asset, Release
from relfetch.options import Options
from relfetch.utils import build_token_params, get_user_agent


@dataclass
class DownloadResult:
    """Outcome of processing one asset."""

    asset_name: str
    """The filename of the asset"""

    file_path: Path
    """Destination path of the asset"""

    was_skipped: bool = False
    """Whether the destination already existed and was left untouched"""

    size: Optional[int] = None
    """Number of bytes written, when the asset was downloaded"""


def resolve_target_path(output_dir: str, asset_name: str) -> Path:
    """
    Compute the destination of an asset inside the output directory.

    Raises:
        PathValidationError: If the asset name is not a plain file name.
    """
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if (
        not asset_name
        or asset_name in (".", "..")
        or any(sep in asset_name for sep in separators)
    ):
        raise PathValidationError(
            f"Refusing to write asset with unsafe name '{asset_name}'",
            path=asset_name,
        )
    return Path(output_dir) / asset_name


def _remove_temp_file(temp_path: Path) -> None:
    try:
        temp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.error(f"Error removing temporary file {temp_path}: {exc}")


def download_asset(
    asset: Asset,
    target_path: Path,
    session: requests.Session,
    token: Optional[str] = None,
) -> int:
    """
    Fetch an asset's raw content and install it at `target_path`.

    The asset API endpoint answers `Accept: application/octet-stream` with a
    redirect to the binary, which requests follows. The body is streamed to a
    temporary file beside the destination and moved into place once complete,
    replacing any existing file. Missing parent directories are created.

    Returns:
        int: Number of bytes written.

    Raises:
        NetworkError: On connection, timeout, or transfer failures.
        HTTPError: On a non-2xx response.
        FileSystemError: If the destination cannot be written.
    """
    headers = {"Accept": ASSET_CONTENT_ACCEPT, "User-Agent": get_user_agent()}
    temp_path = target_path.with_name(
        f"{target_path.name}.tmp.{os.getpid()}.{int(time.time() * 1000)}"
    )

    logger.debug(f"Attempting to download {asset.name} from {asset.url}")
    try:
        response = session.get(
            asset.url,
            headers=headers,
            params=build_token_params(token),
            stream=True,
            allow_redirects=True,
            timeout=DEFAULT_REQUEST_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise NetworkError(
            f"Failed to download {asset.name}", url=asset.url, details=str(exc)
        ) from exc

    downloaded_bytes = 0
    try:
        logger.debug(
            f"Received HTTP response status code: {response.status_code} for URL: {asset.url}"
        )
        if not 200 <= response.status_code < 300:
            raise HTTPError(
                f"Failed to download {asset.name}: HTTP {response.status_code}",
                status_code=response.status_code,
                url=asset.url,
            )

        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "wb") as file:
                for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                    if chunk:
                        file.write(chunk)
                        downloaded_bytes += len(chunk)
            os.replace(temp_path, target_path)
        except requests.RequestException as exc:
            raise NetworkError(
                f"Transfer of {asset.name} was interrupted",
                url=asset.url,
                details=str(exc),
            ) from exc
        except OSError as exc:
            raise FileSystemError(
                f"Could not write {target_path}", path=str(target_path), details=str(exc)
            ) from exc
    finally:
        response.close()
        if temp_path.exists():
            _remove_temp_file(temp_path)

    logger.info(f"Downloaded: {asset.name} ({downloaded_bytes} bytes)")
    return downloaded_bytes


def download_release_assets(
    release: Release, options: Options, session: requests.Session
) -> List[DownloadResult]:
    """
    Download every (filtered) asset of a release into the output directory.

    Parameters:
        release: The selected release, already narrowed to matching assets.
        options: Run options providing output directory, token and force flag.
        session: HTTP session used for the downloads.

    Returns:
        List[DownloadResult]: One result per asset, in release order.

    Raises:
        NoMatchingAssetsError: If the release has no assets left to download;
            raised before anything is written.
    """
    if not release.assets:
        raise NoMatchingAssetsError(release.tag, options.asset_pattern)

    logger.info(
        f"Downloading {len(release.assets)} asset(s) of release {release.tag} "
        f"to {options.output_dir}"
    )

    # Validate every destination up front so a bad name aborts before any write
    targets = [
        (asset, resolve_target_path(options.output_dir, asset.name))
        for asset in release.assets
    ]

    results: List[DownloadResult] = []
    for asset, target_path in targets:
        if target_path.exists() and not options.force_download:
            logger.debug(f"Skipped: {asset.name} (already exists at {target_path})")
            results.append(
                DownloadResult(
                    asset_name=asset.name, file_path=target_path, was_skipped=True
                )
            )
            continue

        size = download_asset(asset, target_path, session, options.token)
        results.append(
            DownloadResult(asset_name=asset.name, file_path=target_path, size=size)
        )

    return results

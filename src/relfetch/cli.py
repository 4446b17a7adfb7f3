# src/relfetch/cli.py

import sys
from typing import List, Optional, Sequence

import requests

from relfetch import log_utils
from relfetch.api import build_release_query, fetch_release_data
from relfetch.constants import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS
from relfetch.downloader import DownloadResult, download_release_assets
from relfetch.exceptions import RelfetchError
from relfetch.models import Release, filter_release_payload
from relfetch.options import Options, RunMode, parse_options
from relfetch.presenter import present
from relfetch.utils import get_user_agent

logger = log_utils.logger


def _configure_logging(options: Options) -> None:
    """Apply -v and the optional file log requested through the environment."""
    if options.verbose:
        log_utils.set_log_level("DEBUG")
    if log_utils.file_logging_requested():
        log_utils.add_file_logging(
            log_utils.default_log_dir(), "DEBUG" if options.verbose else "INFO"
        )


def _log_download_summary(results: List[DownloadResult], release: Release) -> None:
    downloaded = [result for result in results if not result.was_skipped]
    skipped = [result for result in results if result.was_skipped]
    total_bytes = sum(result.size or 0 for result in downloaded)
    logger.info(
        f"Release {release.tag}: {len(downloaded)} asset(s) downloaded "
        f"({total_bytes} bytes), {len(skipped)} skipped (already present)"
    )


def run(options: Options, session: requests.Session) -> None:
    """
    Execute one run: query the release API, filter, then list or download.

    Raises:
        RelfetchError: On connectivity, API, no-match, or download failures.
    """
    query = build_release_query(options)
    payload = fetch_release_data(query, session)
    result = filter_release_payload(
        payload,
        options.asset_pattern,
        all_releases=options.list_releases,
    )
    releases = result if isinstance(result, list) else [result]

    if options.mode is RunMode.DOWNLOAD:
        release = releases[0]
        results = download_release_assets(release, options, session)
        _log_download_summary(results, release)
        return

    present(releases, options)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point for the relfetch command-line interface.

    Parses arguments (exiting with status 1 on usage errors), runs the release
    query and then either lists or downloads. Application errors are logged to
    standard error and turned into exit status 1.

    Returns:
        int: The process exit status.
    """
    options = parse_options(argv)
    _configure_logging(options)
    logger.debug(
        f"Mode: {options.mode.value}, repository: {options.user}/{options.repo}"
    )

    try:
        with requests.Session() as session:
            session.headers["User-Agent"] = get_user_agent()
            run(options, session)
    except RelfetchError as exc:
        logger.error(str(exc))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return EXIT_INTERRUPTED

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())

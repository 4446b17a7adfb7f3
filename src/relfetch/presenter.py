"""Rendering of release listings as plain text or JSON."""

import json
import sys
from typing import Any, List, Optional, Sequence, TextIO

from relfetch.models import Release
from relfetch.options import Options, RunMode

NO_ASSETS_LINE = "  (no assets)"
NO_MATCHING_ASSETS_LINE = "  (no assets matching pattern '{pattern}')"


def format_release_text(release: Release, show_assets: bool, pattern: str) -> str:
    """
    Format one release as a text block.

    When assets are shown and none survived filtering, a placeholder line tells
    apart a release without assets from one whose assets did not match `pattern`.
    """
    lines = [f"Release: {release.name}", f"Tag: {release.tag}"]
    if show_assets:
        if release.assets:
            lines.append("Assets:")
            lines.extend(f"  {asset.name}" for asset in release.assets)
        elif release.total_assets == 0:
            lines.append(NO_ASSETS_LINE)
        else:
            lines.append(NO_MATCHING_ASSETS_LINE.format(pattern=pattern))
    return "\n".join(lines)


def format_text(releases: Sequence[Release], options: Options) -> str:
    """Format releases as blank-line separated text blocks."""
    return "\n\n".join(
        format_release_text(release, options.shows_assets, options.asset_pattern)
        for release in releases
    )


def build_json_document(releases: Sequence[Release], options: Options) -> Any:
    """
    Build the JSON-serializable listing for the run mode.

    - LIST_RELEASES: a list of {"tag", "name"} summaries
    - LIST_ASSETS: the single release object
    - LIST_RELEASES_WITH_ASSETS: a list of release objects
    """
    if options.mode is RunMode.LIST_RELEASES:
        return [release.to_summary() for release in releases]
    if options.mode is RunMode.LIST_ASSETS:
        return releases[0].to_dict()
    return [release.to_dict() for release in releases]


def format_json(releases: Sequence[Release], options: Options) -> str:
    return json.dumps(build_json_document(releases, options), indent=2)


def present(
    releases: List[Release], options: Options, stream: Optional[TextIO] = None
) -> None:
    """
    Write the listing for `releases` to `stream` (standard output by default).

    Parameters:
        releases: Filtered releases in API order; a single-release run passes a
            one-element list.
        options: Run options selecting JSON or text output and asset display.
    """
    output = stream if stream is not None else sys.stdout
    if options.print_json:
        text = format_json(releases, options)
    else:
        text = format_text(releases, options)
    if text:
        print(text, file=output)

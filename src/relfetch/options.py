"""
Command-line options for relfetch.

The parser turns argv into a single immutable Options value. Flag
combinations that make no sense together are rejected here, so the rest of
the pipeline only has to look at Options.mode.
"""

import argparse
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from relfetch.constants import (
    API_URL_ENV_VAR,
    DEFAULT_ASSET_PATTERN,
    DEFAULT_OUTPUT_DIR,
    EXIT_FAILURE,
    GITHUB_API_BASE,
)
from relfetch.utils import get_version

USAGE = """
  %(prog)s [-r TAG | -a PATTERN | -o DIR | -t TOKEN | -f] [-v] USER REPO
  %(prog)s -l [(-A | -r TAG) | -a PATTERN | -t TOKEN | -J] [-v] USER REPO
  %(prog)s -A [-t TOKEN | -J] [-v] USER REPO
  %(prog)s -h"""

DESCRIPTION = (
    "Download the assets of a GitHub release, or list releases and their assets."
)


class RunMode(Enum):
    """The single kind of work a run performs."""

    DOWNLOAD = "download"
    LIST_ASSETS = "list-assets"
    LIST_RELEASES = "list-releases"
    LIST_RELEASES_WITH_ASSETS = "list-releases-with-assets"


@dataclass(frozen=True)
class Options:
    """Validated configuration for one run."""

    user: str
    repo: str
    list_assets: bool = False
    list_releases: bool = False
    print_json: bool = False
    tag: Optional[str] = None
    asset_pattern: str = DEFAULT_ASSET_PATTERN
    output_dir: str = DEFAULT_OUTPUT_DIR
    token: Optional[str] = None
    force_download: bool = False
    verbose: bool = False
    api_url: str = GITHUB_API_BASE
    mode: RunMode = field(init=False)

    def __post_init__(self) -> None:
        if self.list_releases and self.list_assets:
            mode = RunMode.LIST_RELEASES_WITH_ASSETS
        elif self.list_releases:
            mode = RunMode.LIST_RELEASES
        elif self.list_assets:
            mode = RunMode.LIST_ASSETS
        else:
            mode = RunMode.DOWNLOAD
        object.__setattr__(self, "mode", mode)

    @property
    def shows_assets(self) -> bool:
        return self.mode is not RunMode.LIST_RELEASES


class OptionParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


class _StoreOnce(argparse.Action):
    """Store an option value, rejecting a second occurrence of the option."""

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is not None:
            parser.error(f"option {option_string} may only be given once")
        setattr(namespace, self.dest, values)


class _StoreTrueOnce(argparse.Action):
    """store_true that rejects a second occurrence of the flag."""

    def __init__(self, option_strings, dest, default=False, required=False, help=None):
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=0,
            const=True,
            default=default,
            required=required,
            help=help,
        )

    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, False):
            parser.error(f"option {option_string} may only be given once")
        setattr(namespace, self.dest, True)


def _repo_component(value: str) -> str:
    """argparse type for USER and REPO: a single non-empty path segment."""
    value = value.strip()
    if not value or "/" in value or value in (".", ".."):
        raise argparse.ArgumentTypeError(f"invalid name: '{value}'")
    return value


def build_parser() -> OptionParser:
    """Create the relfetch argument parser."""
    parser = OptionParser(
        prog="relfetch",
        usage=USAGE,
        description=DESCRIPTION,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_version()}",
    )
    parser.add_argument(
        "-l",
        "--list",
        dest="list_assets",
        action=_StoreTrueOnce,
        help="List the assets of the selected release instead of downloading them",
    )
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "-A",
        "--all-releases",
        dest="list_releases",
        action=_StoreTrueOnce,
        help="List all releases instead of a single one",
    )
    selection.add_argument(
        "-r",
        "--release",
        dest="tag",
        metavar="TAG",
        action=_StoreOnce,
        help="Select the release by tag (default: latest release)",
    )
    parser.add_argument(
        "-J",
        "--json",
        dest="print_json",
        action=_StoreTrueOnce,
        help="Print listings as JSON (listing modes only)",
    )
    parser.add_argument(
        "-a",
        "--asset",
        dest="asset_pattern",
        metavar="PATTERN",
        action=_StoreOnce,
        help=f"Regular expression selecting assets by name (default: '{DEFAULT_ASSET_PATTERN}')",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_dir",
        metavar="DIR",
        action=_StoreOnce,
        help=f"Directory to download assets into (default: '{DEFAULT_OUTPUT_DIR}')",
    )
    parser.add_argument(
        "-t",
        "--token",
        dest="token",
        metavar="TOKEN",
        action=_StoreOnce,
        help="API access token sent with every request",
    )
    parser.add_argument(
        "-f",
        "--force",
        dest="force_download",
        action=_StoreTrueOnce,
        help="Overwrite assets that already exist in the output directory",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action=_StoreTrueOnce,
        help="Print diagnostics to standard error",
    )
    parser.add_argument("user", metavar="USER", type=_repo_component)
    parser.add_argument("repo", metavar="REPO", type=_repo_component)
    return parser


def _validate(parser: OptionParser, args: argparse.Namespace) -> None:
    """Reject flag combinations argparse cannot express on its own."""
    if args.tag is not None and not args.tag.strip():
        parser.error("option -r/--release requires a non-empty TAG")

    if args.list_assets or args.list_releases:
        if args.output_dir is not None:
            parser.error("option -o/--output is not applicable when listing")
        if args.force_download:
            parser.error("option -f/--force is not applicable when listing")
    elif args.print_json:
        parser.error("option -J/--json is only applicable when listing")

    if args.list_releases and not args.list_assets and args.asset_pattern is not None:
        parser.error(
            "option -a/--asset is not applicable when listing releases without -l/--list"
        )

    if args.asset_pattern is not None:
        try:
            re.compile(args.asset_pattern)
        except re.error as exc:
            parser.error(f"invalid asset pattern '{args.asset_pattern}': {exc}")


def parse_options(argv: Optional[Sequence[str]] = None) -> Options:
    """
    Parse and validate command-line arguments.

    Parameters:
        argv: Arguments without the program name; defaults to sys.argv[1:].

    Returns:
        Options: The validated, immutable run configuration.

    Exits the process with status 1 on any usage error, and with status 0 after
    printing help or the version.
    """
    parser = build_parser()
    arg_list: Optional[List[str]] = list(argv) if argv is not None else None
    args = parser.parse_args(arg_list)
    _validate(parser, args)

    return Options(
        user=args.user,
        repo=args.repo,
        list_assets=args.list_assets,
        list_releases=args.list_releases,
        print_json=args.print_json,
        tag=args.tag,
        asset_pattern=(
            args.asset_pattern
            if args.asset_pattern is not None
            else DEFAULT_ASSET_PATTERN
        ),
        output_dir=(
            args.output_dir if args.output_dir is not None else DEFAULT_OUTPUT_DIR
        ),
        token=args.token,
        force_download=args.force_download,
        verbose=args.verbose,
        api_url=os.environ.get(API_URL_ENV_VAR, "").strip().rstrip("/")
        or GITHUB_API_BASE,
    )

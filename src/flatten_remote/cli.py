"""
flatten_remote: Fetch a GitHub or GitLab repository into a single text file.

Overview
--------
The tool lists the repository through the platform REST API, walks its
directories depth first and concatenates every file with an allowed extension
into ``<repo>_contents.txt``::

    File: src/app.py
    <contents>

Pass ``--instructions`` to prefix the file with a fixed analysis prompt, which
makes the result ready to paste into an LLM.

Tokens are read from ``GITHUB_TOKEN`` and ``GITLAB_TOKEN``, or from a ``.env``
file found from the current directory.

Usage
-----
Run `python -m flatten_remote.cli --help` for full options. Common examples:
    - Whole GitHub repository:
        uv run flatten-remote https://github.com/acme/widgets

    - One directory, with the prompt, skipping vendored code:
        uv run flatten-remote https://github.com/acme/widgets src -i -s node_modules,dist

    - Self-hosted GitLab:
        uv run flatten-remote https://gitlab.example.com/team/service -p gitlab -b https://gitlab.example.com
"""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

from flatten_remote import __version__
from flatten_remote.logging import logger, setup_logging
from flatten_remote.output_construction import build_output, output_filename, write_output
from flatten_remote.platforms import parse_repo_url
from flatten_remote.settings import DEFAULT_GITLAB_URL, Settings, load_environment, split_names
from flatten_remote.walker import collect_repository_contents

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_list(value: str) -> list[str]:
    """Split a comma separated CLI value into trimmed names."""
    return split_names(value)


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    p = argparse.ArgumentParser(
        prog="flatten-remote",
        description="Concatenate the source files of a GitHub or GitLab repository.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("repo_url", help="Repository URL.")
    p.add_argument(
        "specific_path",
        nargs="?",
        default="",
        help="Directory to start from (default: repository root).",
    )
    p.add_argument(
        "-p",
        "--platform",
        default="github",
        help="Specify the platform (github or gitlab).",
    )
    p.add_argument(
        "-i",
        "--instructions",
        action="store_true",
        help="Include instructions in the output file.",
    )
    p.add_argument(
        "-b",
        "--base-url",
        default=DEFAULT_GITLAB_URL,
        help="Specify the GitLab base URL.",
    )
    p.add_argument(
        "-s",
        "--skip-folders",
        nargs="+",
        type=parse_list,
        default=[],
        help="Folders to skip during traversal (comma separated).",
    )
    p.add_argument(
        "-f",
        "--skip-files",
        nargs="+",
        type=parse_list,
        default=[],
        help="Files to skip during traversal (comma separated).",
    )
    p.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: <repo>_contents.txt).",
    )
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    args = p.parse_args(argv)
    args.skip_folders = [name for names in args.skip_folders for name in names]
    args.skip_files = [name for names in args.skip_files for name in names]
    return Settings(**vars(args))


def main(argv: Sequence[str] | None = None) -> int:
    load_environment()
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    owner, repo = parse_repo_url(settings.repo_url)
    logger.info("repository_resolved", platform=settings.platform, owner=owner, repo=repo)

    contents = collect_repository_contents(
        settings.platform,
        owner,
        repo,
        settings.specific_path,
        settings.base_url,
        settings.skip_folders,
        settings.skip_files,
        github_api_url=settings.github_api_url,
        github_token=settings.github_token,
        gitlab_token=settings.gitlab_token,
    )

    out_path = write_output(
        settings.output or output_filename(repo),
        build_output(contents, include_instructions=settings.instructions),
    )
    logger.info("repository_contents_saved", output=str(out_path))
    print(f"Repository contents saved to '{out_path}'.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Depth-first traversal of a remote repository tree."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from flatten_remote.config import EntryKind, RemoteEntry, TraversalFrame, is_allowed_file
from flatten_remote.exceptions import FileFetchError
from flatten_remote.logging import logger
from flatten_remote.platforms import make_client
from flatten_remote.settings import DEFAULT_GITHUB_API_URL, DEFAULT_GITLAB_URL

if TYPE_CHECKING:
    from collections.abc import Iterable

    import requests

    from flatten_remote.platforms import RepositoryClient


def format_record(path: str, content: str) -> str:
    """Render one collected file."""
    return f"File: {path}\n{content}\n\n"


class RepositoryWalker:
    """Walk a remote tree and collect the contents of allowed files.

    The pending directories live on a stack, so traversal is depth first and
    the last listed sibling directory is descended first. Every full path is
    listed at most once per walker.

    Attributes:
        client: the platform client used for listings and file bodies.
        skip_folders: bare directory names that are never descended into.
        skip_files: bare file names that are never fetched.
        visited: full paths of the directories already listed.
    """

    def __init__(
        self,
        client: RepositoryClient,
        skip_folders: Iterable[str] = (),
        skip_files: Iterable[str] = (),
    ) -> None:
        self.client = client
        self.skip_folders = frozenset(skip_folders)
        self.skip_files = frozenset(skip_files)
        self.visited: set[str] = set()

    def should_descend(self, entry: RemoteEntry) -> bool:
        return entry.path not in self.visited and entry.name not in self.skip_folders

    def should_collect(self, entry: RemoteEntry) -> bool:
        return is_allowed_file(entry.name) and entry.name not in self.skip_files

    def read_file(self, entry: RemoteEntry) -> str | None:
        """Fetch and decode a file, or return None if the platform refused it."""
        try:
            raw = self.client.fetch_file(entry.path)
        except FileFetchError as e:
            logger.warning(
                "file_fetch_failed",
                path=e.path,
                status=e.status,
                reason=e.reason,
            )
            return None
        return raw.decode("utf-8", errors="replace")

    def walk(self, start_path: str = "") -> str:
        """Traverse the tree below `start_path` and return the collected records.

        Args:
            start_path (str): directory to start from, "" for the repository root

        Raises:
            DirectoryListingError: if any directory listing fails

        Returns:
            str: the concatenated "File: <path>" records, in traversal order
        """
        out = io.StringIO()
        stack = [TraversalFrame(path=start_path, full_path=start_path)]
        logger.info("walk_started", start_path=start_path)

        while stack:
            frame = stack.pop()
            # The same directory may be pushed twice before it is first listed.
            if frame.full_path in self.visited:
                continue
            self.visited.add(frame.full_path)

            entries = self.client.list_directory(frame.full_path)
            if entries is None:
                continue
            logger.info("directory_listed", path=frame.full_path, entries=len(entries))

            for entry in entries:
                if entry.kind is EntryKind.DIR:
                    if self.should_descend(entry):
                        stack.append(TraversalFrame(path=entry.name, full_path=entry.path))
                    continue
                if not self.should_collect(entry):
                    continue
                content = self.read_file(entry)
                if content is not None:
                    out.write(format_record(entry.path, content))

        return out.getvalue()


def walk(
    client: RepositoryClient,
    start_path: str = "",
    skip_folders: Iterable[str] = (),
    skip_files: Iterable[str] = (),
) -> str:
    """Collect the contents of a remote repository through an existing client."""
    return RepositoryWalker(client, skip_folders, skip_files).walk(start_path)


def collect_repository_contents(  # noqa: PLR0913
    platform: str,
    owner: str,
    repo: str,
    start_path: str = "",
    base_url: str = DEFAULT_GITLAB_URL,
    skip_folders: Iterable[str] = (),
    skip_files: Iterable[str] = (),
    *,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    github_token: str | None = None,
    gitlab_token: str | None = None,
    session: requests.Session | None = None,
) -> str:
    """Build the platform client and walk the repository.

    Args:
        platform (str): "github" or "gitlab"
        owner (str): repository owner or namespace
        repo (str): repository name
        start_path (str): directory to start from, "" for the repository root
        base_url (str): GitLab instance root, only used for GitLab
        skip_folders (Iterable[str]): bare directory names to skip
        skip_files (Iterable[str]): bare file names to skip
        github_api_url (str): GitHub API root, only used for GitHub
        github_token (str | None): GitHub token
        gitlab_token (str | None): GitLab private token
        session (requests.Session | None): HTTP session to reuse

    Raises:
        InvalidPlatformError: if the platform is not supported
        DirectoryListingError: if any directory listing fails

    Returns:
        str: the concatenated file records
    """
    client = make_client(
        platform,
        owner,
        repo,
        base_url=base_url,
        github_api_url=github_api_url,
        github_token=github_token,
        gitlab_token=gitlab_token,
        session=session,
    )
    return walk(client, start_path, skip_folders, skip_files)

"""Remote repository access for GitHub and GitLab.

Each client exposes the two calls the walker needs:

- ``list_directory(path)`` returns the entries of a directory, or ``None`` when
  the platform answered with something that is not a list of entries;
- ``fetch_file(path)`` returns the raw bytes of a file.

Platform specific type tags are mapped onto ``EntryKind`` here so the walker
never sees GitHub's ``dir``/``file`` or GitLab's ``tree``/``blob`` vocabulary.
"""

from __future__ import annotations

import base64
import re
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import quote

import requests

from flatten_remote.config import EntryKind, Platform, RemoteEntry
from flatten_remote.exceptions import (
    DirectoryListingError,
    FileFetchError,
    InvalidRepositoryUrlError,
)
from flatten_remote.settings import DEFAULT_GITHUB_API_URL, DEFAULT_GITLAB_URL

if TYPE_CHECKING:
    from collections.abc import Mapping

_GITHUB_URL = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/?$")
_GITLAB_URL = re.compile(r"^https?://(?:gitlab\.|)([^/]+)/([^/]+)/([^/]+)/?$")

_GITHUB_KINDS: dict[str, EntryKind] = {"dir": EntryKind.DIR}
_GITLAB_KINDS: dict[str, EntryKind] = {"tree": EntryKind.DIR}


def parse_repo_url(repo_url: str) -> tuple[str, str]:
    """Extract the owner and repository name from a repository URL.

    GitHub URLs are tried first. For GitLab the host is matched but ignored, and
    only ``owner/repo`` paths are accepted, so subgroup URLs are rejected.

    Args:
        repo_url (str): e.g. "https://github.com/acme/widgets"

    Raises:
        InvalidRepositoryUrlError: if the URL matches neither pattern

    Returns:
        tuple[str, str]: the owner and the repository name
    """
    if match := _GITHUB_URL.match(repo_url):
        return match[1], match[2]
    if match := _GITLAB_URL.match(repo_url):
        return match[2], match[3]
    raise InvalidRepositoryUrlError(url=repo_url)


def _entries(payload: Any, kinds: Mapping[str, EntryKind]) -> list[RemoteEntry] | None:  # noqa: ANN401
    if not isinstance(payload, list):
        return None
    return [
        RemoteEntry(
            name=item["name"],
            path=item["path"],
            kind=kinds.get(item.get("type", ""), EntryKind.FILE),
        )
        for item in payload
    ]


class RepositoryClient(Protocol):
    """Read-only access to one remote repository."""

    def list_directory(self, path: str) -> list[RemoteEntry] | None: ...

    def fetch_file(self, path: str) -> bytes: ...


class GitHubClient:
    """GitHub contents API client.

    Directories and files are both read through
    ``GET /repos/{owner}/{repo}/contents/{path}``; file bodies arrive base64 encoded.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        api_url: str = DEFAULT_GITHUB_API_URL,
        session: requests.Session | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _contents_url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/contents/{quote(path, safe='/')}"

    def list_directory(self, path: str) -> list[RemoteEntry] | None:
        response = self.session.get(self._contents_url(path), headers=self.headers)
        if not response.ok:
            raise DirectoryListingError(path=path, status=response.status_code, reason=response.reason)
        return _entries(response.json(), _GITHUB_KINDS)

    def fetch_file(self, path: str) -> bytes:
        response = self.session.get(self._contents_url(path), headers=self.headers)
        if not response.ok:
            raise FileFetchError(path=path, status=response.status_code, reason=response.reason)
        payload = response.json()
        return base64.b64decode(payload.get("content") or "")


class GitLabClient:
    """GitLab v4 API client for gitlab.com or a self-hosted instance.

    Listings come from the repository tree endpoint and files from the raw
    file endpoint, which already returns undecoded bytes.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        base_url: str = DEFAULT_GITLAB_URL,
        session: requests.Session | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.headers = {"PRIVATE-TOKEN": token} if token else {}

    @property
    def project_url(self) -> str:
        project = f"{quote(self.owner, safe='')}%2F{quote(self.repo, safe='')}"
        return f"{self.base_url}/api/v4/projects/{project}/repository"

    def list_directory(self, path: str) -> list[RemoteEntry] | None:
        response = self.session.get(f"{self.project_url}/tree", params={"path": path}, headers=self.headers)
        if not response.ok:
            raise DirectoryListingError(path=path, status=response.status_code, reason=response.reason)
        return _entries(response.json(), _GITLAB_KINDS)

    def fetch_file(self, path: str) -> bytes:
        response = self.session.get(f"{self.project_url}/files/{quote(path, safe='')}/raw", headers=self.headers)
        if not response.ok:
            raise FileFetchError(path=path, status=response.status_code, reason=response.reason)
        return response.content


def make_client(
    platform: str,
    owner: str,
    repo: str,
    *,
    base_url: str = DEFAULT_GITLAB_URL,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    github_token: str | None = None,
    gitlab_token: str | None = None,
    session: requests.Session | None = None,
) -> RepositoryClient:
    """Build the client for a platform.

    Args:
        platform (str): "github" or "gitlab"
        owner (str): repository owner or namespace
        repo (str): repository name
        base_url (str): GitLab instance root, ignored for GitHub
        github_api_url (str): GitHub API root, ignored for GitLab
        github_token (str | None): GitHub token, sent as a bearer token
        gitlab_token (str | None): GitLab private token
        session (requests.Session | None): HTTP session to reuse

    Raises:
        InvalidPlatformError: if the platform is not supported

    Returns:
        RepositoryClient: a client bound to the repository
    """
    match Platform.from_name(platform):
        case Platform.GITHUB:
            return GitHubClient(owner, repo, token=github_token, api_url=github_api_url, session=session)
        case Platform.GITLAB:
            return GitLabClient(owner, repo, token=gitlab_token, base_url=base_url, session=session)

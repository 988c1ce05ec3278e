from dataclasses import dataclass


@dataclass(frozen=True)
class FlattenRemoteError(Exception):
    """Base exception for errors in the flatten_remote module."""


@dataclass(frozen=True)
class InvalidPlatformError(FlattenRemoteError):
    """Raised when the requested hosting platform is not supported."""

    platform: str
    message: str = "Invalid platform specified."

    def __str__(self) -> str:
        return f"{self.message} ({self.platform!r})"


@dataclass(frozen=True)
class InvalidRepositoryUrlError(FlattenRemoteError):
    """Raised when a repository URL matches neither the GitHub nor the GitLab pattern."""

    url: str
    message: str = "Invalid repository URL."

    def __str__(self) -> str:
        return f"{self.message} ({self.url!r})"


@dataclass(frozen=True)
class RemoteRequestError(FlattenRemoteError):
    """Raised when the hosting platform answers with a non-2xx status."""

    path: str
    status: int
    reason: str


@dataclass(frozen=True)
class DirectoryListingError(RemoteRequestError):
    """Raised when a directory listing cannot be fetched. Aborts the run."""

    def __str__(self) -> str:
        return f"Failed to list '{self.path}': {self.status} {self.reason}"


@dataclass(frozen=True)
class FileFetchError(RemoteRequestError):
    """Raised when a file body cannot be fetched. The file is skipped."""

    def __str__(self) -> str:
        return f"Failed to fetch '{self.path}': {self.status} {self.reason}"

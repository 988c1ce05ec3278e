from __future__ import annotations

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field

from flatten_remote.exceptions import InvalidPlatformError


class Platform(StrEnum):
    """Supported repository hosting platforms."""

    GITHUB = auto()
    GITLAB = auto()

    @classmethod
    def from_name(cls, name: str) -> Platform:
        """Convert a user supplied platform name.

        Args:
            name (str): the platform name, e.g. "github"

        Raises:
            InvalidPlatformError: if the name is not a supported platform

        Returns:
            Platform: the matching platform
        """
        try:
            return cls(name)
        except ValueError:
            raise InvalidPlatformError(platform=name) from None


class EntryKind(StrEnum):
    """Platform independent kind of a remote tree entry."""

    DIR = auto()
    FILE = auto()


ALLOWED_EXTENSIONS: tuple[str, ...] = (
    ".js",
    ".jsx",
    ".ts",
    ".tsx",
    ".py",
    ".md",
    ".mdx",
    ".html",
    ".csv",
    ".ini",
    ".cfg",
    ".conf",
    ".log",
    ".sh",
    ".bat",
    ".sql",
    ".php",
    ".java",
    ".rb",
    ".c",
    ".cpp",
    ".h",
    ".hpp",
    ".cs",
    ".swift",
    ".pl",
    ".cgi",
    ".asm",
    ".m",
    ".mm",
    ".r",
    ".go",
    ".lua",
    ".perl",
    ".coffee",
    ".dart",
    ".groovy",
    ".kt",
    ".gradle",
    ".scala",
    ".ejs",
    ".jsp",
    ".pug",
    ".erb",
    ".hbs",
    ".twig",
    ".vue",
    ".clj",
    ".cljs",
    ".cljc",
    ".f",
    ".f90",
    ".f95",
    ".f03",
    ".f08",
)

INSTRUCTIONS = """
Prompt: Analyze the repository to understand its structure, purpose, and functionality. Follow these steps to study the codebase:

1. Read the README file to gain an overview of the project, its goals, and any setup instructions.

2. Examine the repository structure to understand how the files and directories are organized.

3. Identify the main entry point of the application (e.g., main.py, app.py, index.js) and start analyzing the code flow from there.

4. Study the dependencies and libraries used in the project to understand the external tools and frameworks being utilized.

5. Analyze the core functionality of the project by examining the key modules, classes, and functions.

6. Look for any configuration files (e.g., config.py, .env) to understand how the project is configured and what settings are available.

7. Investigate any tests or test directories to see how the project ensures code quality and handles different scenarios.

8. Review any documentation or inline comments to gather insights into the codebase and its intended behavior.

9. Identify any potential areas for improvement, optimization, or further exploration based on your analysis.

10. Provide a summary of your findings, including the project's purpose, key features, and any notable observations or recommendations.

Use the files and contents provided below to complete this analysis:
"""  # noqa: E501


def is_allowed_file(name: str) -> bool:
    """Check whether a file name ends with one of the allowed extensions.

    The check is a plain, case sensitive suffix match on the bare name.

    Args:
        name (str): the bare file name

    Returns:
        bool: True if the file contents should be collected
    """
    return name.endswith(ALLOWED_EXTENSIONS)


class RemoteEntry(BaseModel):
    """One item of a remote directory listing."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Bare entry name")
    path: str = Field(..., description="Path from the repository root")
    kind: EntryKind = Field(..., description="Directory or file")


class TraversalFrame(BaseModel):
    """A directory waiting to be listed."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Bare directory name")
    full_path: str = Field(..., description="Path from the repository root")

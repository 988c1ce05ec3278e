from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import requests
from fakes import FakeClient, dir_entry, file_entry, make_response

from flatten_remote import walker
from flatten_remote.exceptions import DirectoryListingError, InvalidPlatformError
from flatten_remote.platforms import GitHubClient
from flatten_remote.walker import RepositoryWalker, collect_repository_contents, walk

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_walk_collects_allowed_files_as_records() -> None:
    client = FakeClient(
        {"": [file_entry("app.py"), file_entry("logo.png"), file_entry("README.md")]},
        {"app.py": b"print('hi')", "README.md": b"# Widgets"},
    )

    output = walk(client)

    assert output == "File: app.py\nprint('hi')\n\nFile: README.md\n# Widgets\n\n"
    assert client.fetched == ["app.py", "README.md"]


@pytest.mark.unit
def test_walk_is_depth_first_and_descends_last_sibling_first() -> None:
    client = FakeClient(
        {
            "": [dir_entry("a"), dir_entry("b"), file_entry("top.py")],
            "a": [file_entry("a/one.py"), dir_entry("a/deep")],
            "a/deep": [file_entry("a/deep/two.py")],
            "b": [file_entry("b/three.py")],
        },
    )

    output = walk(client)

    assert client.listed == ["", "b", "a", "a/deep"]
    paths = [line.removeprefix("File: ") for line in output.splitlines() if line.startswith("File: ")]
    assert paths == ["top.py", "b/three.py", "a/one.py", "a/deep/two.py"]


@pytest.mark.unit
def test_walk_starts_from_specific_path() -> None:
    client = FakeClient({"src": [file_entry("src/main.go")]})

    output = walk(client, "src")

    assert client.listed == ["src"]
    assert output.startswith("File: src/main.go\n")


@pytest.mark.unit
def test_skip_folders_are_never_listed() -> None:
    client = FakeClient(
        {
            "": [dir_entry("node_modules"), dir_entry("src")],
            "src": [dir_entry("src/node_modules"), file_entry("src/index.js")],
        },
    )

    output = walk(client, skip_folders=["node_modules"])

    assert client.listed == ["", "src"]
    assert "node_modules" not in output
    assert "File: src/index.js" in output


@pytest.mark.unit
def test_skip_files_match_bare_names_only() -> None:
    client = FakeClient(
        {
            "": [file_entry("setup.py"), dir_entry("pkg")],
            "pkg": [file_entry("pkg/setup.py"), file_entry("pkg/core.py")],
        },
    )

    output = walk(client, skip_files=["setup.py", "pkg/core.py"])

    assert client.fetched == ["pkg/core.py"]
    assert "File: pkg/core.py" in output


@pytest.mark.unit
def test_each_directory_is_listed_at_most_once() -> None:
    client = FakeClient(
        {
            "": [dir_entry("a"), dir_entry("a"), dir_entry("b")],
            "a": [dir_entry("b"), dir_entry(""), file_entry("a/x.py")],
            "b": [dir_entry("a")],
        },
    )
    repo_walker = RepositoryWalker(client)

    repo_walker.walk()

    assert sorted(client.listed) == ["", "a", "b"]
    assert repo_walker.visited == {"", "a", "b"}


@pytest.mark.unit
def test_unexpected_listing_shape_is_ignored() -> None:
    client = FakeClient({"": [dir_entry("weird"), file_entry("ok.py")], "weird": None})

    output = walk(client)

    assert output == "File: ok.py\nok.py\n\n"
    assert client.listed == ["", "weird"]


@pytest.mark.unit
def test_file_fetch_failure_logs_warning_and_continues(mocker: MockerFixture) -> None:
    log = mocker.patch.object(walker, "logger")
    client = FakeClient(
        {"": [file_entry("gone.py"), file_entry("kept.py")]},
        missing_files={"gone.py"},
    )

    output = walk(client)

    assert output == "File: kept.py\nkept.py\n\n"
    log.warning.assert_called_once_with(
        "file_fetch_failed",
        path="gone.py",
        status=404,
        reason="Not Found",
    )


@pytest.mark.unit
def test_directory_listing_failure_aborts_the_walk() -> None:
    client = FakeClient({"": [dir_entry("private")]})

    with pytest.raises(DirectoryListingError) as exc_info:
        walk(client)

    assert exc_info.value.path == "private"


@pytest.mark.unit
def test_invalid_utf8_is_replaced_not_raised() -> None:
    client = FakeClient({"": [file_entry("latin.c")]}, {"latin.c": b"caf\xe9"})

    output = walk(client)

    assert output == "File: latin.c\ncaf\ufffd\n\n"


@pytest.mark.unit
def test_collect_repository_contents_rejects_unknown_platform() -> None:
    with pytest.raises(InvalidPlatformError) as exc_info:
        collect_repository_contents("bitbucket", "acme", "widgets")

    assert exc_info.value.platform == "bitbucket"


@pytest.mark.unit
def test_collect_repository_contents_builds_client_and_walks(mocker: MockerFixture) -> None:
    client = FakeClient({"docs": [file_entry("docs/index.md")]})
    make_client = mocker.patch.object(walker, "make_client", return_value=client)

    output = collect_repository_contents(
        "gitlab",
        "team",
        "service",
        "docs",
        "https://gitlab.example.com",
        gitlab_token="glpat-123",
    )

    assert output == "File: docs/index.md\ndocs/index.md\n\n"
    make_client.assert_called_once_with(
        "gitlab",
        "team",
        "service",
        base_url="https://gitlab.example.com",
        github_api_url="https://api.github.com",
        github_token=None,
        gitlab_token="glpat-123",
        session=None,
    )


@pytest.mark.unit
def test_github_file_fetch_failure_is_skipped(mocker: MockerFixture) -> None:
    contents_api = "https://api.github.com/repos/acme/widgets/contents/"
    responses = {
        "": make_response(
            json_body=[
                {"name": "locked.py", "path": "locked.py", "type": "file"},
                {"name": "open.py", "path": "open.py", "type": "file"},
            ],
        ),
        "locked.py": make_response(403, json_body={"message": "Forbidden"}, reason="Forbidden"),
        "open.py": make_response(json_body={"path": "open.py", "content": "cHJpbnQoJ2hpJykK\n"}),
    }
    session = requests.Session()
    mocker.patch.object(session, "get", side_effect=lambda url, **_: responses[url.removeprefix(contents_api)])
    log = mocker.patch.object(walker, "logger")

    output = walk(GitHubClient("acme", "widgets", session=session))

    assert output == "File: open.py\nprint('hi')\n\n\n"
    log.warning.assert_called_once_with(
        "file_fetch_failed",
        path="locked.py",
        status=403,
        reason="Forbidden",
    )

from unittest.mock import Mock

import pytest
import requests

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    """Register the markers used to group the test suite."""
    for marker in ("unit", "core_downloads", "user_interface", "infrastructure"):
        config.addinivalue_line("markers", f"{marker}: {marker} tests")


def pytest_runtest_setup():
    """
    Prevent real network requests during tests by replacing HTTP entry points with blocking callables.
    """
    requests.get = _block_network
    requests.post = _block_network
    requests.head = _block_network
    requests.Session.request = _block_network


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Clear relfetch environment variables and point the platform log directory at a temp dir.
    """
    for name in ("RELFETCH_API_URL", "RELFETCH_LOG_LEVEL", "RELFETCH_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)

    log_dir = tmp_path_factory.mktemp("relfetch") / "log"
    monkeypatch.setattr(
        "relfetch.log_utils.default_log_dir", lambda: log_dir, raising=True
    )


@pytest.fixture
def make_response():
    """
    Provide a factory for mocked requests.Response objects.

    Parameters of the factory:
        status (int): HTTP status code.
        json_data: Value returned by response.json(); also serialized into `content`
            unless `content` is given.
        content (bytes | None): Raw body.
        headers (dict | None): Response headers.
        chunks (list[bytes] | None): Chunks yielded by iter_content().
    """
    import json

    def _create_response(
        status=200, json_data=None, content=None, headers=None, chunks=None
    ):
        response = Mock(spec=requests.Response)
        response.status_code = status
        response.ok = 200 <= status < 400
        response.headers = headers or {}
        if content is None:
            content = json.dumps(json_data).encode() if json_data is not None else b""
        response.content = content
        if json_data is not None:
            response.json.return_value = json_data
        else:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        response.iter_content.return_value = iter(chunks or [])
        return response

    return _create_response


@pytest.fixture
def mock_session(mocker):
    """A mocked requests.Session whose get() is configured per test."""
    return mocker.MagicMock(spec=requests.Session)


@pytest.fixture
def sample_release_data():
    """Fixture providing a GitHub release object as returned by the API."""
    return {
        "name": "App 1.0",
        "tag_name": "v1.0",
        "assets": [
            {
                "name": "app.zip",
                "url": "https://api.github.com/repos/acme/app/releases/assets/1",
                "browser_download_url": "https://github.com/acme/app/releases/download/v1.0/app.zip",
            },
            {
                "name": "app.tar.gz",
                "url": "https://api.github.com/repos/acme/app/releases/assets/2",
                "browser_download_url": "https://github.com/acme/app/releases/download/v1.0/app.tar.gz",
            },
            {
                "name": "README.md",
                "url": "https://api.github.com/repos/acme/app/releases/assets/3",
                "browser_download_url": "https://github.com/acme/app/releases/download/v1.0/README.md",
            },
        ],
    }


@pytest.fixture
def sample_releases_data(sample_release_data):
    """Fixture providing the release collection for a repository with two releases."""
    return [
        {"name": "First", "tag_name": "v1.0", "assets": []},
        dict(sample_release_data, name="Second", tag_name="v2.0"),
    ]

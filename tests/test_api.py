"""Tests for release query construction and the release request."""

import pytest
import requests

from relfetch.api import ReleaseQuery, build_release_query, fetch_release_data
from relfetch.exceptions import APIError, ConnectivityError, RateLimitError
from relfetch.options import Options

pytestmark = [pytest.mark.unit, pytest.mark.core_downloads]

RELEASES = "https://api.github.com/repos/acme/app/releases"


class TestBuildReleaseQuery:
    def test_latest_by_default(self):
        query = build_release_query(Options(user="acme", repo="app"))

        assert query == ReleaseQuery(url=f"{RELEASES}/latest", params={})

    def test_by_tag(self):
        query = build_release_query(Options(user="acme", repo="app", tag="v1.0"))

        assert query.url == f"{RELEASES}/tags/v1.0"

    def test_tag_is_quoted(self):
        query = build_release_query(Options(user="acme", repo="app", tag="release/1 a"))

        assert query.url == f"{RELEASES}/tags/release%2F1%20a"

    def test_all_releases(self):
        query = build_release_query(
            Options(user="acme", repo="app", list_releases=True)
        )

        assert query.url == RELEASES

    def test_token_param(self):
        query = build_release_query(Options(user="acme", repo="app", token=" abc "))

        assert query.params == {"access_token": "abc"}

    def test_blank_token_stays_unauthenticated(self):
        query = build_release_query(Options(user="acme", repo="app", token="  "))

        assert query.params == {}

    def test_custom_api_url(self):
        query = build_release_query(
            Options(user="acme", repo="app", api_url="https://ghe.example.com/api/v3")
        )

        assert query.url == "https://ghe.example.com/api/v3/repos/acme/app/releases/latest"


class TestFetchReleaseData:
    QUERY = ReleaseQuery(url=f"{RELEASES}/latest", params={"access_token": "abc"})

    def test_returns_payload(self, mock_session, make_response):
        mock_session.get.return_value = make_response(json_data={"tag_name": "v1"})

        payload = fetch_release_data(self.QUERY, mock_session)

        assert payload == {"tag_name": "v1"}
        args, kwargs = mock_session.get.call_args
        assert args == (self.QUERY.url,)
        assert kwargs["params"] == {"access_token": "abc"}
        assert kwargs["headers"]["Accept"] == "application/vnd.github+json"
        assert kwargs["headers"]["User-Agent"].startswith("relfetch/")
        assert kwargs["timeout"] == 10

    def test_error_document_is_returned_for_filtering(self, mock_session, make_response):
        mock_session.get.return_value = make_response(
            status=404, json_data={"message": "Not Found"}
        )

        assert fetch_release_data(self.QUERY, mock_session) == {"message": "Not Found"}

    def test_connection_failure(self, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(ConnectivityError) as exc_info:
            fetch_release_data(self.QUERY, mock_session)

        assert "Could not connect" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    def test_empty_body(self, mock_session, make_response):
        mock_session.get.return_value = make_response(content=b"  \n")

        with pytest.raises(ConnectivityError, match="Empty response"):
            fetch_release_data(self.QUERY, mock_session)

    def test_invalid_json(self, mock_session, make_response):
        mock_session.get.return_value = make_response(status=502, content=b"<html>")

        with pytest.raises(APIError) as exc_info:
            fetch_release_data(self.QUERY, mock_session)

        assert exc_info.value.status_code == 502

    def test_error_status_without_message(self, mock_session, make_response):
        mock_session.get.return_value = make_response(status=500, json_data={})

        with pytest.raises(APIError, match="HTTP 500"):
            fetch_release_data(self.QUERY, mock_session)

    def test_rate_limited(self, mock_session, make_response):
        mock_session.get.return_value = make_response(
            status=403,
            json_data={"message": "API rate limit exceeded"},
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "0"},
        )

        with pytest.raises(RateLimitError) as exc_info:
            fetch_release_data(self.QUERY, mock_session)

        assert exc_info.value.reset_time == "1970-01-01 00:00:00 UTC"
        assert "Resets at: 1970-01-01 00:00:00 UTC" in str(exc_info.value)

    def test_rate_limited_keeps_api_message(self, mock_session, make_response):
        mock_session.get.return_value = make_response(
            status=403,
            json_data={"message": "API rate limit exceeded for 1.2.3.4."},
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
        )

        with pytest.raises(RateLimitError) as exc_info:
            fetch_release_data(self.QUERY, mock_session)

        assert str(exc_info.value) == (
            "GitHub API rate limit exceeded: API rate limit exceeded for 1.2.3.4."
            " - Resets at: 2023-11-14 22:13:20 UTC"
        )

    def test_rate_limited_with_non_json_body(self, mock_session, make_response):
        mock_session.get.return_value = make_response(
            status=403,
            content=b"<html>rate limited</html>",
            headers={"X-RateLimit-Remaining": "0"},
        )

        with pytest.raises(RateLimitError):
            fetch_release_data(self.QUERY, mock_session)

    def test_forbidden_without_rate_limit(self, mock_session, make_response):
        mock_session.get.return_value = make_response(
            status=403,
            json_data={"message": "Resource not accessible"},
            headers={"X-RateLimit-Remaining": "42"},
        )

        assert fetch_release_data(self.QUERY, mock_session) == {
            "message": "Resource not accessible"
        }

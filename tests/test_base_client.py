"""Tests for BaseClient: retries, backoff, timeouts, telemetry."""

from unittest.mock import patch, call

import pytest
import requests

from conftest import make_response
from glance.exceptions import SourceFetchError
from glance.extractors.base_client import BaseClient


class StubClient(BaseClient):
    """Minimal concrete client for testing base functionality."""

    source_name = "stub"
    base_url = "https://stub.example.com"

    def extract(self, metric, **kwargs):
        started = self._begin()
        try:
            data = self._get_json("/data", params={"q": metric})
            return self._build_result(metric, data, started)
        except Exception as exc:
            return self._build_error(metric, exc, started)


@pytest.fixture
def client():
    return StubClient(timeout=30, max_attempts=3, backoff=0.5)


class TestRetries:
    """HTTP retry logic tests."""

    def test_success_first_try(self, client):
        ok = make_response(json_data={"ok": True})
        with patch.object(client._session, "get", return_value=ok) as mock_get:
            assert client._get_json("/test") == {"ok": True}
        mock_get.assert_called_once_with(
            "https://stub.example.com/test", params=None, timeout=30
        )
        assert client.api_calls == 1
        assert client.retries == 0

    def test_retry_on_5xx(self, client):
        """Should retry server errors and return the eventual success."""
        responses = [make_response(500), make_response(json_data={"ok": True})]
        with patch.object(client._session, "get", side_effect=responses):
            with patch("glance.extractors.base_client.time.sleep") as mock_sleep:
                result = client._get_json("/test")
        assert result == {"ok": True}
        assert client.api_calls == 2
        mock_sleep.assert_called_once_with(0.5)

    def test_retry_on_4xx(self, client):
        """Client errors are retried like any other failure."""
        responses = [make_response(404), make_response(json_data=[])]
        with patch.object(client._session, "get", side_effect=responses):
            with patch("glance.extractors.base_client.time.sleep"):
                assert client._get_json("/test") == []
        assert client.errors == 1

    def test_linear_backoff_then_raise(self, client):
        """Three attempts, sleeping 0.5s then 1.0s, then the error propagates."""
        failures = [requests.ConnectionError("refused")] * 3
        with patch.object(client._session, "get", side_effect=failures):
            with patch("glance.extractors.base_client.time.sleep") as mock_sleep:
                with pytest.raises(SourceFetchError) as excinfo:
                    client._get_json("/down")

        assert mock_sleep.call_args_list == [call(0.5), call(1.0)]
        assert client.api_calls == 3
        assert client.retries == 2
        assert client.errors == 3
        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
        assert excinfo.value.url == "https://stub.example.com/down"

    def test_timeout_is_retried(self, client):
        responses = [requests.Timeout("slow"), make_response(json_data={"ok": 1})]
        with patch.object(client._session, "get", side_effect=responses):
            with patch("glance.extractors.base_client.time.sleep"):
                assert client._get_json("/slow") == {"ok": 1}

    def test_bad_json_is_retried(self, client):
        bad = make_response()
        bad.json.side_effect = requests.exceptions.JSONDecodeError("bad", "doc", 0)
        responses = [bad, make_response(json_data={"ok": 1})]
        with patch.object(client._session, "get", side_effect=responses):
            with patch("glance.extractors.base_client.time.sleep"):
                assert client._get_json("/json") == {"ok": 1}

    def test_single_attempt_override(self, client):
        with patch.object(client._session, "get", return_value=make_response(503)):
            with patch("glance.extractors.base_client.time.sleep") as mock_sleep:
                with pytest.raises(SourceFetchError):
                    client._get_text("/once", max_attempts=1)
        mock_sleep.assert_not_called()
        assert client.api_calls == 1

    def test_absolute_url_passthrough(self, client):
        ok = make_response(text="a,b\n1,2\n")
        with patch.object(client._session, "get", return_value=ok) as mock_get:
            assert client._get_text("https://other.example.com/file.csv") == "a,b\n1,2\n"
        assert mock_get.call_args[0][0] == "https://other.example.com/file.csv"


class TestResults:
    """ExtractionResult construction from extract()."""

    def test_failed_result_keeps_exception(self, client):
        with patch.object(client._session, "get", side_effect=requests.ConnectionError("x")):
            with patch("glance.extractors.base_client.time.sleep"):
                result = client.extract("m")
        assert not result.success
        assert isinstance(result.exception, SourceFetchError)
        assert "failed after 3 attempt(s)" in result.error
        assert result.api_calls == 3
        assert result.retries == 2

    def test_result_counts_only_its_own_requests(self, client):
        """Client counters accumulate while each result reports its delta."""
        responses = [
            make_response(json_data={"a": 1}),
            make_response(500),
            make_response(json_data={"b": 2}),
        ]
        with patch.object(client._session, "get", side_effect=responses):
            with patch("glance.extractors.base_client.time.sleep"):
                first = client.extract("m1")
                second = client.extract("m2")

        assert (first.api_calls, first.retries) == (1, 0)
        assert (second.api_calls, second.retries) == (2, 1)
        assert client.api_calls == 3
        assert client.retries == 1


class TestTelemetry:
    """Telemetry tracking tests."""

    def test_telemetry_tracks_calls(self, client):
        client.api_calls = 5
        t = client.get_telemetry()
        assert t["api_calls"] == 5
        assert t["source"] == "stub"

    def test_telemetry_errors_and_latency(self, client):
        responses = [make_response(502), make_response(json_data={})]
        with patch.object(client._session, "get", side_effect=responses):
            with patch("glance.extractors.base_client.time.sleep"):
                client._get_json("/flaky")
        t = client.get_telemetry()
        assert t["api_calls"] == 2
        assert t["retries"] == 1
        assert t["errors"] == 1
        assert t["avg_latency"] >= 0.0

    def test_telemetry_empty(self, client):
        assert client.get_telemetry()["avg_latency"] == 0.0


class TestSession:
    """Session and header tests."""

    def test_custom_user_agent(self, client):
        assert "stub" in client._session.headers["User-Agent"]
        assert client._session.headers["Accept"] == "application/json"

    def test_defaults_from_config(self):
        c = StubClient()
        assert c.timeout == 30
        assert c.max_attempts == 3
        assert c.backoff == 0.5

    def test_close_closes_session(self, client):
        with patch.object(client._session, "close") as mock_close:
            client.close()
        mock_close.assert_called_once_with()

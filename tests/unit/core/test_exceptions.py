"""
Tests for the classified exception hierarchy.
"""

import pytest

from api_client.core.exceptions import (
    CANCELLED,
    ECONNREFUSED,
    ENETWORK,
    TIMEOUT,
    APIClientError,
    ApiError,
    ConfigurationError,
    HTTPError,
    NetworkError,
    RequestCancelledError,
    RequestSummary,
    TimeoutError,
    describe,
)

REQUEST = RequestSummary("GET", "https://api.example.com/items")


class TestHierarchy:

    def test_classified_errors_share_base(self):
        for cls in (NetworkError, TimeoutError, HTTPError, ApiError, RequestCancelledError):
            assert issubclass(cls, APIClientError)

    def test_timeout_is_network_error(self):
        assert issubclass(TimeoutError, NetworkError)

    def test_configuration_error_is_not_classified(self):
        assert not issubclass(ConfigurationError, APIClientError)


class TestNetworkError:

    def test_message_and_code(self):
        err = NetworkError("connect ECONNREFUSED 127.0.0.1:80", code=ECONNREFUSED, request=REQUEST)
        assert str(err) == "Network error: connect ECONNREFUSED 127.0.0.1:80"
        assert err.code == ECONNREFUSED
        assert err.status_code is None
        assert err.method == "GET"

    def test_default_code(self):
        assert NetworkError("x").code == ENETWORK

    def test_timeout(self):
        err = TimeoutError(2.5, request=REQUEST)
        assert str(err) == "Request timeout after 2.5s"
        assert err.code == TIMEOUT
        assert err.timeout == 2.5


class TestHTTPError:

    def test_attributes(self):
        err = HTTPError("HTTP 404: Not Found", status_code=404, status_message="Not Found",
                        response_body="{}", headers={"content-type": "application/json"}, request=REQUEST)
        assert err.status_code == 404
        assert err.code is None
        assert err.headers == {"content-type": "application/json"}
        assert err.url == "https://api.example.com/items"
        assert repr(err) == "HTTPError(message='HTTP 404: Not Found', code=None, status_code=404)"


class TestApiError:

    def test_wraps_http_error(self):
        original = HTTPError("HTTP 503: Service Unavailable", status_code=503, response_body="busy")
        err = ApiError(original, request=REQUEST, attempts=4)

        assert err.message == "HTTP 503: Service Unavailable"
        assert err.status_code == 503
        assert err.response_body == "busy"
        assert err.original_error is original
        assert err.attempts == 4
        assert err.request == REQUEST

    def test_wraps_network_error(self):
        original = NetworkError("refused", code=ECONNREFUSED, request=REQUEST)
        err = ApiError(original, attempts=1)

        assert err.code == ECONNREFUSED
        assert err.status_code is None
        assert err.request == REQUEST

    def test_cancelled(self):
        err = RequestCancelledError(None, request=REQUEST, attempts=2)
        assert isinstance(err, ApiError)
        assert err.code == CANCELLED
        assert str(err) == "Request cancelled after 2 attempt(s)"
        assert err.original_error is None

    def test_cancelled_keeps_last_status(self):
        original = HTTPError("HTTP 503: x", status_code=503)
        err = RequestCancelledError(original, attempts=1)
        assert err.code == CANCELLED
        assert err.status_code == 503


class TestDescribe:

    def test_classified(self):
        assert describe(HTTPError("HTTP 500: x", status_code=500)) == {
            "error": "HTTP 500: x",
            "error_type": "HTTPError",
            "code": None,
            "status_code": 500,
        }

    def test_other(self):
        assert describe(ValueError("bad")) == {"error": "bad", "error_type": "ValueError"}


def test_request_summary_str():
    assert str(REQUEST) == "GET https://api.example.com/items"


@pytest.mark.parametrize("error", [NetworkError("x"), TimeoutError(1), HTTPError("y", status_code=500)])
def test_message_always_populated(error):
    assert error.message
    assert str(error) == error.message

"""Tests for HTTP helpers and retry policy."""

from __future__ import annotations

import pytest

from wxpaint.core.api.http.config import HttpClientConfig
from wxpaint.core.api.http.errors import (
    AuthError,
    ClientError,
    RateLimitError,
    ServerError,
    UnexpectedStatusError,
    error_for_status,
)
from wxpaint.core.api.http.retry import RetryPolicy, parse_retry_after_seconds
from wxpaint.core.api.http.utils import extract_error_message, join_url


class TestJoinUrl:
    def test_joins_relative_path(self):
        assert join_url("https://api.example.test", "/v1/images/models") == (
            "https://api.example.test/v1/images/models"
        )

    def test_absolute_url_unchanged(self):
        assert join_url("https://api.example.test", "https://cdn.test/a.png") == (
            "https://cdn.test/a.png"
        )

    def test_empty_base_returns_path(self):
        assert join_url("", "https://cdn.test/a.png") == "https://cdn.test/a.png"


class TestExtractErrorMessage:
    def test_reads_message_field(self):
        assert extract_error_message('{"message": "invalid model"}') == "invalid model"

    def test_non_json_is_none(self):
        assert extract_error_message("<html>502</html>") is None

    def test_missing_or_empty_message_is_none(self):
        assert extract_error_message('{"error": "x"}') is None
        assert extract_error_message('{"message": ""}') is None
        assert extract_error_message(None) is None


class TestRetryPolicy:
    def test_only_idempotent_methods_retry(self):
        policy = RetryPolicy()
        assert policy.should_retry("GET", 1, 503)
        assert not policy.should_retry("POST", 1, 503)

    def test_attempt_budget(self):
        policy = RetryPolicy(max_attempts=2)
        assert policy.should_retry("GET", 1)
        assert not policy.should_retry("GET", 2)

    def test_single_attempt_never_retries(self):
        assert not RetryPolicy.single_attempt().should_retry("GET", 1, 500)

    def test_non_retryable_status(self):
        assert not RetryPolicy().should_retry("GET", 1, 404)

    def test_delay_is_capped(self):
        policy = RetryPolicy(base_delay_s=1.0, max_delay_s=2.0, jitter=0.0)
        assert policy.compute_delay(10) == pytest.approx(2.0)

    def test_max_delay_must_exceed_base(self):
        with pytest.raises(ValueError):
            RetryPolicy(base_delay_s=2.0, max_delay_s=1.0)

    def test_parse_retry_after(self):
        assert parse_retry_after_seconds("3") == pytest.approx(3.0)
        assert parse_retry_after_seconds(None) is None


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthError),
        (403, AuthError),
        (429, RateLimitError),
        (404, ClientError),
        (500, ServerError),
        (302, UnexpectedStatusError),
    ],
)
def test_error_for_status(status: int, expected: type) -> None:
    assert error_for_status(status) is expected


def test_config_normalizes_base_url():
    assert HttpClientConfig(base_url="https://api.example.test/").base_url == (
        "https://api.example.test"
    )
    with pytest.raises(ValueError):
        HttpClientConfig(base_url="ftp://nope")

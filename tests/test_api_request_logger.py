"""Tests for API request logger."""

from unittest.mock import MagicMock, patch

import pytest

from delivery_tracking.adapters.api_request_logger import (
    REDACTED,
    log_api_request,
    should_log_requests,
)


class TestShouldLogRequests:
    """Tests for should_log_requests function."""

    def test_when_env_not_set_then_returns_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given DT_LOG_REQUESTS not set, when checking, then returns False."""
        monkeypatch.delenv("DT_LOG_REQUESTS", raising=False)

        assert should_log_requests() is False

    def test_when_env_set_to_true_then_returns_true(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given DT_LOG_REQUESTS=True, when checking, then returns True."""
        monkeypatch.setenv("DT_LOG_REQUESTS", "True")

        assert should_log_requests() is True


class TestLogApiRequest:
    """Tests for log_api_request function."""

    @patch("delivery_tracking.adapters.api_request_logger.should_log_requests")
    @patch("delivery_tracking.adapters.api_request_logger.logger")
    def test_when_logging_disabled_then_does_not_log(
        self, mock_logger: MagicMock, mock_should_log: MagicMock
    ) -> None:
        """Given logging disabled, when calling log_api_request, then does not log."""
        mock_should_log.return_value = False

        log_api_request("GET", "http://backend/orders")

        mock_logger.info.assert_not_called()

    @patch("delivery_tracking.adapters.api_request_logger.should_log_requests")
    @patch("delivery_tracking.adapters.api_request_logger.logger")
    def test_when_logging_enabled_then_logs_url_with_params(
        self, mock_logger: MagicMock, mock_should_log: MagicMock
    ) -> None:
        """Given logging enabled, when calling with params, then the full URL is logged."""
        mock_should_log.return_value = True

        log_api_request("GET", "http://backend/orders", params={"page": 2})

        message = mock_logger.info.call_args[0][0]
        assert "GET http://backend/orders?page=2" in message

    @patch("delivery_tracking.adapters.api_request_logger.should_log_requests")
    @patch("delivery_tracking.adapters.api_request_logger.logger")
    def test_when_logging_enabled_then_credentials_are_redacted(
        self, mock_logger: MagicMock, mock_should_log: MagicMock
    ) -> None:
        """Given credentials in headers and payload, when logging, then they are redacted."""
        mock_should_log.return_value = True

        log_api_request(
            "POST",
            "http://backend/auth/refresh",
            headers={"Authorization": "Bearer secret-access", "Content-Type": "application/json"},
            payload={"refreshToken": "secret-refresh", "nested": {"token": "secret-nested"}},
        )

        message = mock_logger.info.call_args[0][0]
        assert "secret" not in message
        assert REDACTED in message
        assert "application/json" in message

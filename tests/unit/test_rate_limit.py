"""Tests for rate limiting utilities."""

from __future__ import annotations

import time
from unittest.mock import patch

from foo_operator.utils.rate_limit import rate_limit_k8s


class TestRateLimitK8s:
    """Test cases for Kubernetes API rate limiting."""

    def test_rate_limit_k8s_decorator(self):
        """Test that k8s rate limiting decorator works."""
        call_count = 0

        @rate_limit_k8s
        def test_func():
            nonlocal call_count
            call_count += 1
            return "success"

        result = test_func()
        assert result == "success"
        assert call_count == 1

    def test_rate_limit_k8s_with_args(self):
        """Test rate limiting with function arguments."""
        @rate_limit_k8s
        def test_func(a, b, c=None):
            return f"{a}-{b}-{c}"

        result = test_func("x", "y", c="z")
        assert result == "x-y-z"

    @patch("foo_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 100.0)
    def test_rate_limit_k8s_enforces_rate(self):
        """Test that rate limiting enforces minimum interval."""
        call_times = []

        @rate_limit_k8s
        def test_func():
            call_times.append(time.time())
            return "ok"

        for _ in range(3):
            test_func()

        # With 100 calls/sec, minimum interval is 0.01 seconds
        assert len(call_times) == 3
        assert call_times[1] - call_times[0] >= 0.009
        assert call_times[2] - call_times[1] >= 0.009

    @patch("foo_operator.utils.rate_limit.time.sleep")
    def test_rate_limit_k8s_sleeps_when_needed(self, mock_sleep):
        """Test that rate limiter sleeps when calls are too fast."""
        with patch("foo_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 1.0):
            import foo_operator.utils.rate_limit as rl
            rl._k8s_last_call_time = 0.0

            @rate_limit_k8s
            def test_func():
                return "ok"

            with patch("foo_operator.utils.rate_limit.time.time", return_value=10.0):
                test_func()

            with patch("foo_operator.utils.rate_limit.time.time", return_value=10.1):
                test_func()

            assert mock_sleep.call_count >= 1

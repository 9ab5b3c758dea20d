"""
요청 제한 테스트
"""
import pytest
from fastapi import HTTPException

from utils.rate_limiter import RateLimiter


@pytest.mark.unit
class TestRateLimiter:
    """RateLimiter 테스트"""

    def test_limit_exceeded(self):
        """제한 초과 시 429"""
        limiter = RateLimiter(limit_per_hour=2)
        assert limiter.check_rate_limit("10.0.0.1")
        assert limiter.check_rate_limit("10.0.0.1")

        with pytest.raises(HTTPException) as exc_info:
            limiter.check_rate_limit("10.0.0.1")
        assert exc_info.value.status_code == 429

    def test_clients_counted_separately(self):
        """클라이언트별 제한"""
        limiter = RateLimiter(limit_per_hour=1)
        limiter.check_rate_limit("10.0.0.1")
        limiter.check_rate_limit("10.0.0.2")

        status = limiter.get_status()
        assert status["active_clients"] == 2
        assert limiter.get_total_requests() == 2

    def test_window_expiry(self):
        """윈도우가 지나면 다시 허용"""
        limiter = RateLimiter(limit_per_hour=1, window_seconds=0)
        limiter.check_rate_limit(None)
        assert limiter.check_rate_limit(None)

"""
요청 제한 서비스
"""

import time
from typing import Dict, List, Optional
from fastapi import HTTPException


class RateLimiter:
    def __init__(self, limit_per_hour: int = 100, window_seconds: int = 3600):
        self.limit_per_hour = limit_per_hour
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = {}
        self._total_requests = 0

    def check_rate_limit(self, client_ip: Optional[str] = "default") -> bool:
        """요청 제한 체크"""
        client_ip = client_ip or "default"
        current_time = time.time()
        window_start = current_time - self.window_seconds

        self._requests[client_ip] = [
            req_time for req_time in self._requests.get(client_ip, [])
            if req_time > window_start
        ]

        if len(self._requests[client_ip]) >= self.limit_per_hour:
            raise HTTPException(
                status_code=429,
                detail="시간당 요청 제한을 초과했습니다."
            )

        self._requests[client_ip].append(current_time)
        self._total_requests += 1

        return True

    def get_status(self) -> Dict:
        """제한 상태 반환"""
        return {
            "active_clients": len(self._requests),
            "total_requests": self._total_requests,
            "limit_per_hour": self.limit_per_hour
        }

    def get_total_requests(self) -> int:
        return self._total_requests

"""
요청 처리 시간 측정
API 핸들러의 단계별 소요 시간 기록 및 느린 요청 경고
"""
import time
from typing import Dict, Optional
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000.0

@dataclass
class TimeMetrics:
    """측정 결과"""
    total_ms: float = 0.0
    step_times: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, float]:
        return {
            'total_ms': round(self.total_ms, 2),
            **{f"{step}_ms": round(ms, 2) for step, ms in self.step_times.items()}
        }

class TimeTracker:
    """
    단계별 시간 측정기

    Usage:
        tracker = TimeTracker("analysis_api").start()
        tracker.step("catalog")
        metrics = tracker.finish()
    """

    def __init__(self, name: str = "operation", slow_threshold_ms: float = SLOW_REQUEST_MS):
        self.name = name
        self.slow_threshold_ms = slow_threshold_ms
        self._started: Optional[float] = None
        self._last_step: Optional[float] = None
        self.step_times: Dict[str, float] = {}

    def start(self) -> 'TimeTracker':
        self._started = time.perf_counter()
        self._last_step = self._started
        return self

    def step(self, step_name: str) -> float:
        """직전 단계 이후 경과 시간 기록 (ms)"""
        if self._started is None:
            raise ValueError("start()를 먼저 호출해야 합니다")

        now = time.perf_counter()
        duration = (now - self._last_step) * 1000
        self.step_times[step_name] = duration
        self._last_step = now

        logger.debug(f"📊 {self.name}.{step_name}: {duration:.2f}ms")
        return duration

    def finish(self) -> TimeMetrics:
        if self._started is None:
            raise ValueError("start()를 먼저 호출해야 합니다")

        metrics = TimeMetrics(
            total_ms=(time.perf_counter() - self._started) * 1000,
            step_times=dict(self.step_times)
        )

        if metrics.total_ms > self.slow_threshold_ms:
            logger.warning(f"🐌 느린 요청: {self.name} ({metrics.total_ms:.2f}ms)")
        else:
            logger.debug(f"✅ {self.name} 완료: {metrics.total_ms:.2f}ms")
        return metrics

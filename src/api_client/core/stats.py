"""
Счётчики попыток клиента.
"""

import threading
from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class StatsSnapshot:
    """Неизменяемый снимок счётчиков."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    retried_requests: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class RequestStats:
    """
    Четыре счётчика на экземпляр клиента.

    На каждую попытку: total +1, ровно один из successful / failed +1,
    retried +1 для всех попыток кроме первой.

    Example:
        >>> stats = RequestStats()
        >>> stats.record_attempt(success=False, retry=False)
        >>> stats.record_attempt(success=True, retry=True)
        >>> stats.snapshot().as_dict()
        {'total_requests': 2, 'successful_requests': 1, 'failed_requests': 1, 'retried_requests': 1}
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._total = 0
        self._successful = 0
        self._failed = 0
        self._retried = 0

    def record_attempt(self, success: bool, retry: bool) -> None:
        """
        Учесть завершённую попытку.

        Args:
            success: Попытка вернула ответ со статусом < 400
            retry: Попытка не первая в своём вызове
        """
        with self._lock:
            self._total += 1
            if retry:
                self._retried += 1
            if success:
                self._successful += 1
            else:
                self._failed += 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                total_requests=self._total,
                successful_requests=self._successful,
                failed_requests=self._failed,
                retried_requests=self._retried,
            )

    def reset(self) -> None:
        """Обнулить все четыре счётчика разом."""
        with self._lock:
            self._total = 0
            self._successful = 0
            self._failed = 0
            self._retried = 0

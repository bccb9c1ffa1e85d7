"""
Async rate limiter (sliding window).

Каждая попытка (включая retry) занимает слот перед отправкой. Ожидание
делается через asyncio.sleep и не блокирует другие вызовы.
"""

import asyncio
import time
from collections import deque
from typing import Deque, Optional

from .config import RateLimitConfig
from .logging import APIClientLogger


class AsyncRateLimiter:
    """
    Ограничение частоты попыток.

    Example:
        >>> limiter = AsyncRateLimiter(RateLimitConfig(max_requests=18, time_window=60))
        >>> await limiter.acquire()
        >>> limiter.remaining()
        17
    """

    def __init__(self, config: RateLimitConfig, logger: Optional[APIClientLogger] = None):
        self.config = config
        self._logger = logger
        self._timestamps: Deque[float] = deque()
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def max_requests(self) -> int:
        return self.config.max_requests

    @property
    def time_window(self) -> float:
        return self.config.time_window

    def _get_lock(self) -> asyncio.Lock:
        # Lock привязан к циклу (Python < 3.10): клиент может быть создан вне цикла
        # и использоваться из нескольких asyncio.run()
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _clean_old_requests(self, now: float) -> None:
        while self._timestamps and (now - self._timestamps[0]) >= self.time_window:
            self._timestamps.popleft()

    async def acquire(self, cancel_event: Optional[asyncio.Event] = None) -> Optional[float]:
        """
        Занять слот, при необходимости дождавшись освобождения окна.

        Args:
            cancel_event: Выставленное событие прерывает ожидание

        Returns:
            Сколько секунд пришлось ждать, или None если ожидание прервано
            отменой (слот при этом не занимается)
        """
        waited = 0.0
        async with self._get_lock():
            while True:
                now = time.monotonic()
                self._clean_old_requests(now)
                if len(self._timestamps) < self.max_requests:
                    self._timestamps.append(now)
                    return waited

                wait_time = self.time_window - (now - self._timestamps[0])
                if self._logger is not None:
                    self._logger.warning(
                        "Rate limit reached, waiting",
                        wait_time_s=round(wait_time, 3),
                        max_requests=self.max_requests,
                    )
                if await self._wait(wait_time, cancel_event):
                    return None
                waited += wait_time

    @staticmethod
    async def _wait(wait_time: float, cancel_event: Optional[asyncio.Event]) -> bool:
        if cancel_event is None:
            await asyncio.sleep(wait_time)
            return False
        if cancel_event.is_set():
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=wait_time)
        except asyncio.TimeoutError:
            return False
        return True

    def remaining(self) -> int:
        """Сколько попыток ещё доступно в текущем окне."""
        self._clean_old_requests(time.monotonic())
        return max(0, self.max_requests - len(self._timestamps))

    def reset_time(self) -> float:
        """Секунды до освобождения слота (0, если слот свободен)."""
        now = time.monotonic()
        self._clean_old_requests(now)
        if len(self._timestamps) < self.max_requests:
            return 0.0
        return max(0.0, self.time_window - (now - self._timestamps[0]))

    def reset(self) -> None:
        self._timestamps.clear()

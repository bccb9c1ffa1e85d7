"""
Retry engine: предикат retryable-ошибок и exponential backoff с jitter.

Состояние попыток живёт в экземпляре RetryEngine (один на вызов),
расчёт задержки - чистая функция calculate_retry_delay().
"""

import asyncio
import random
from typing import Optional

from .exceptions import ECONNREFUSED, ECONNRESET, ENOTFOUND, ETIMEDOUT, TIMEOUT

RETRYABLE_CODES = frozenset({ECONNRESET, ENOTFOUND, ECONNREFUSED, ETIMEDOUT, TIMEOUT})
TOO_MANY_REQUESTS = 429


def is_retryable_error(error: BaseException) -> bool:
    """
    Решить, стоит ли повторять запрос после ошибки.

    Retryable:
    - code из RETRYABLE_CODES (обрыв, DNS, отказ в соединении, таймауты)
    - status_code 5xx
    - status_code 429

    Всё остальное (4xx, неклассифицированные ошибки) - терминально.

    Examples:
        >>> from api_client.core.exceptions import HTTPError
        >>> is_retryable_error(HTTPError("HTTP 503: Service Unavailable", status_code=503))
        True
        >>> is_retryable_error(HTTPError("HTTP 404: Not Found", status_code=404))
        False
    """
    code = getattr(error, "code", None)
    if code in RETRYABLE_CODES:
        return True

    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return 500 <= status < 600 or status == TOO_MANY_REQUESTS

    return False


def calculate_retry_delay(
    attempt: int,
    base_delay: float,
    jitter: float = 1.0,
    max_delay: float = 30.0,
) -> float:
    """
    Задержка перед следующей попыткой, в секундах.

    Args:
        attempt: Номер попытки, которая только что завершилась ошибкой (с 1)
        base_delay: Базовая задержка
        jitter: Верхняя граница случайной добавки [0, jitter)
        max_delay: Потолок

    Returns:
        min(base_delay * 2 ** (attempt - 1) + uniform[0, jitter), max_delay)

    Экспонента считается от номера упавшей попытки, поэтому первый retry
    ждёт base_delay (+ jitter), а не 2 * base_delay.

    Examples:
        >>> calculate_retry_delay(1, 1.0, jitter=0)
        1.0
        >>> calculate_retry_delay(3, 1.0, jitter=0)
        4.0
        >>> calculate_retry_delay(10, 1.0, jitter=0)
        30.0
    """
    exponent = max(attempt - 1, 0)
    delay = base_delay * (2 ** exponent)
    if jitter > 0:
        delay += random.random() * jitter
    return min(delay, max_delay)


class RetryEngine:
    """
    Счётчик попыток одного вызова.

    Examples:
        >>> engine = RetryEngine(max_retries=3, base_delay=1.0)
        >>> engine.increment()                      # попытка 1
        >>> if engine.should_retry(error):
        >>>     cancelled = await engine.async_wait(cancel_event=event)
    """

    def __init__(
        self,
        max_retries: int,
        base_delay: float,
        jitter: float = 1.0,
        max_delay: float = 30.0,
    ):
        """
        Args:
            max_retries: Количество повторов (всего попыток max_retries + 1)
            base_delay: Базовая задержка backoff, секунды
            jitter: Верхняя граница jitter, секунды
            max_delay: Потолок задержки, секунды
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.jitter = jitter
        self.max_delay = max_delay
        self._attempt = 0

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @property
    def attempt(self) -> int:
        """Номер текущей (последней начатой) попытки."""
        return self._attempt

    @property
    def exhausted(self) -> bool:
        return self._attempt >= self.max_attempts

    def should_retry(self, error: BaseException) -> bool:
        """
        Нужен ли ещё один заход после ошибки текущей попытки.

        Args:
            error: Классифицированная ошибка попытки

        Returns:
            True если ошибка retryable и бюджет попыток не исчерпан
        """
        if self.exhausted:
            return False
        return is_retryable_error(error)

    def get_wait_time(self) -> float:
        """Задержка после текущей попытки."""
        return calculate_retry_delay(
            self._attempt,
            self.base_delay,
            jitter=self.jitter,
            max_delay=self.max_delay,
        )

    async def async_wait(
        self,
        wait_time: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> bool:
        """
        Асинхронное ожидание перед retry.

        Ожидание гонится с cancel_event: если событие выставлено, ожидание
        прерывается сразу.

        Args:
            wait_time: Секунды (по умолчанию get_wait_time())
            cancel_event: Сигнал отмены (опционально)

        Returns:
            True если ожидание прервано отменой
        """
        if wait_time is None:
            wait_time = self.get_wait_time()

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

    def increment(self):
        """Увеличить счётчик попыток."""
        self._attempt += 1

    def reset(self):
        """Сбросить счётчик."""
        self._attempt = 0

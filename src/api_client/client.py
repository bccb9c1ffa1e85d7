"""
Асинхронный API клиент на базе httpx.

Запрос проходит: RequestBuilder -> [rate limiter] -> Transport ->
normalize_response, с повторами по решению RetryEngine. Наружу выходит
либо ResponseEnvelope, либо ApiError.
"""

import asyncio
import time
import uuid
from typing import Any, Dict, Mapping, Optional

import httpx

from .core.config import ClientConfig, DiagnosticsPredicate
from .core.exceptions import APIClientError, ApiError, RequestCancelledError, describe
from .core.logging import APIClientLogger, get_correlation_id, set_correlation_id, reset_correlation_id
from .core.rate_limiter import AsyncRateLimiter
from .core.request_builder import RequestDescriptor, build_request
from .core.response import ResponseEnvelope, normalize_response
from .core.retry_engine import RetryEngine
from .core.stats import RequestStats, StatsSnapshot
from .core.transport import Transport


class AsyncAPIClient:
    """
    Асинхронный API клиент с retry, backoff и статистикой.

    Example:
        >>> async with AsyncAPIClient("https://x8ki-letl-twmt.n7.xano.io/api:v1") as client:
        ...     result = await client.get("/transactions", query_params={"page": 1})
        ...     print(result.data)

        >>> # Или без context manager
        >>> client = AsyncAPIClient(config=load_from_env(profile="production"))
        >>> result = await client.post("/transactions", body={"amount": 100})
        >>> await client.close()

    Features:
        - Повтор сетевых ошибок, 5xx и 429 с exponential backoff и jitter
        - Таймаут на каждую попытку
        - Отмена вызова через asyncio.Event
        - Статистика попыток
        - Опциональный rate limiting
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        logger=None,
        diagnostics: Optional[DiagnosticsPredicate] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs,
    ):
        """
        Инициализация клиента.

        Args:
            base_url: Базовый URL для относительных путей
            config: ClientConfig (если указан, остальные параметры игнорируются)
            headers: Заголовки по умолчанию
            timeout: Таймаут попытки в секундах
            max_retries: Количество повторов после первой попытки
            retry_delay: Базовая задержка backoff в секундах
            logger: logging.Logger, в который писать (handlers не трогаются)
            diagnostics: Предикат debug-записей запроса/ответа
            transport: Кастомный httpx транспорт
            **kwargs: Остальные поля ClientConfig (retry_jitter, rate_limit, logging, ...)
        """
        if config is not None:
            self._config = config
        else:
            self._config = ClientConfig.create(
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
                retry_delay=retry_delay,
                headers=headers,
                diagnostics=diagnostics,
                logger=logger,
                **kwargs,
            )

        self._logger = APIClientLogger(config=self._config.logging, logger=self._config.logger)
        self._stats = RequestStats()

        self._rate_limiter: Optional[AsyncRateLimiter] = None
        if self._config.rate_limit is not None:
            self._rate_limiter = AsyncRateLimiter(self._config.rate_limit, self._logger)

        self._transport = Transport(
            self._logger,
            verify_ssl=self._config.verify_ssl,
            diagnostics=self._config.diagnostics,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def rate_limiter(self) -> Optional[AsyncRateLimiter]:
        return self._rate_limiter

    async def __aenter__(self) -> "AsyncAPIClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Закрыть соединения и handlers логгера."""
        await self._transport.close()
        self._logger.close()

    # ==================== Статистика ====================

    def get_stats(self) -> StatsSnapshot:
        """Снимок счётчиков попыток."""
        return self._stats.snapshot()

    def reset_stats(self) -> None:
        self._stats.reset()

    # ==================== HTTP методы ====================

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        query_params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ResponseEnvelope:
        """
        Выполнить запрос с retry логикой.

        Args:
            method: HTTP метод (GET, POST, ...)
            path: Путь относительно base_url или абсолютный URL
            body: Тело (dict/list -> JSON, str/bytes как есть)
            query_params: Query параметры, None значения пропускаются
            headers: Заголовки вызова поверх заголовков клиента
            timeout: Таймаут попытки для этого вызова (сек)
            max_retries: Количество повторов для этого вызова
            cancel_event: Выставленное событие прерывает вызов

        Returns:
            ResponseEnvelope

        Raises:
            ApiError: Ошибка после исчерпания retry или не-retryable ошибка
            RequestCancelledError: cancel_event выставлен
            ConfigurationError: Некорректный URL (до любой попытки)
        """
        descriptor = build_request(
            method,
            path,
            base_url=self._config.base_url,
            body=body,
            query_params=query_params,
            default_headers=self._config.headers,
            headers=headers,
            timeout=timeout if timeout is not None else self._config.timeout,
        )
        engine = RetryEngine(
            max_retries if max_retries is not None else self._config.max_retries,
            self._config.retry_delay,
            jitter=self._config.retry_jitter,
            max_delay=self._config.max_retry_delay,
        )

        token = set_correlation_id(get_correlation_id() or str(uuid.uuid4()))
        try:
            return await self._execute_with_retry(descriptor, engine, cancel_event)
        finally:
            reset_correlation_id(token)

    async def _execute_with_retry(
        self,
        descriptor: RequestDescriptor,
        engine: RetryEngine,
        cancel_event: Optional[asyncio.Event],
    ) -> ResponseEnvelope:
        self._logger.debug(
            "Request started",
            method=descriptor.method,
            url=descriptor.url,
            timeout=descriptor.timeout,
            max_retries=engine.max_retries,
        )

        last_error: Optional[APIClientError] = None

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise self._cancelled(descriptor, engine, last_error)

            if self._rate_limiter is not None:
                if await self._rate_limiter.acquire(cancel_event) is None:
                    raise self._cancelled(descriptor, engine, last_error)

            engine.increment()
            is_retry = engine.attempt > 1
            if is_retry:
                self._logger.info(
                    "Retrying request",
                    method=descriptor.method,
                    url=descriptor.url,
                    attempt=engine.attempt,
                    max_attempts=engine.max_attempts,
                )

            start_time = time.monotonic()
            try:
                raw = await self._transport.execute(descriptor)
                result = normalize_response(raw, descriptor)
            except APIClientError as e:
                self._stats.record_attempt(success=False, retry=is_retry)
                last_error = e
            else:
                self._stats.record_attempt(success=True, retry=is_retry)
                self._logger.debug(
                    "Request completed",
                    method=descriptor.method,
                    url=descriptor.url,
                    status_code=result.status_code,
                    attempt=engine.attempt,
                    elapsed_ms=round((time.monotonic() - start_time) * 1000, 2),
                )
                return result

            if not engine.should_retry(last_error):
                self._logger.error(
                    "Request failed",
                    method=descriptor.method,
                    url=descriptor.url,
                    attempts=engine.attempt,
                    **describe(last_error),
                )
                raise ApiError(last_error, request=descriptor.summary, attempts=engine.attempt) from last_error

            wait_time = engine.get_wait_time()
            self._logger.warning(
                "Request attempt failed, will retry",
                method=descriptor.method,
                url=descriptor.url,
                attempt=engine.attempt,
                wait_time_s=round(wait_time, 3),
                **describe(last_error),
            )

            if await engine.async_wait(wait_time, cancel_event):
                raise self._cancelled(descriptor, engine, last_error)

    def _cancelled(
        self,
        descriptor: RequestDescriptor,
        engine: RetryEngine,
        last_error: Optional[APIClientError],
    ) -> RequestCancelledError:
        self._logger.warning(
            "Request cancelled",
            method=descriptor.method,
            url=descriptor.url,
            attempts=engine.attempt,
        )
        error = RequestCancelledError(last_error, request=descriptor.summary, attempts=engine.attempt)
        error.__cause__ = last_error
        return error

    # ==================== Удобные методы ====================

    async def get(self, path: str, **options) -> ResponseEnvelope:
        """GET запрос."""
        return await self.request("GET", path, **options)

    async def post(self, path: str, body: Any = None, **options) -> ResponseEnvelope:
        """POST запрос."""
        return await self.request("POST", path, body, **options)

    async def put(self, path: str, body: Any = None, **options) -> ResponseEnvelope:
        """PUT запрос."""
        return await self.request("PUT", path, body, **options)

    async def patch(self, path: str, body: Any = None, **options) -> ResponseEnvelope:
        """PATCH запрос."""
        return await self.request("PATCH", path, body, **options)

    async def delete(self, path: str, **options) -> ResponseEnvelope:
        """DELETE запрос."""
        return await self.request("DELETE", path, **options)

    def __repr__(self) -> str:
        return (
            f"AsyncAPIClient(base_url={self.base_url!r}, "
            f"timeout={self._config.timeout}, max_retries={self._config.max_retries})"
        )

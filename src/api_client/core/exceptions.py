"""
Иерархия исключений API Client.

Классификация:
- NetworkError - сбой транспорта до получения ответа (есть .code)
- TimeoutError - попытка превысила таймаут (code='TIMEOUT')
- HTTPError - корректный ответ со статусом >= 400 (есть .status_code)
- ApiError - финальная обёртка после исчерпания retry или фатальной ошибки

Решение о retry принимает RetryEngine (см. retry_engine.is_retryable_error),
а не сами исключения.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# КОДЫ ОШИБОК
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

ECONNRESET = "ECONNRESET"
ENOTFOUND = "ENOTFOUND"
ECONNREFUSED = "ECONNREFUSED"
ETIMEDOUT = "ETIMEDOUT"
TIMEOUT = "TIMEOUT"
ENETWORK = "ENETWORK"
CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class RequestSummary:
    """Метод и URL запроса, для сообщений об ошибках и логов."""

    method: str
    url: str

    def __str__(self) -> str:
        return f"{self.method} {self.url}"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class APIClientError(Exception):
    """
    Базовое исключение API Client.

    Args:
        message: Человекочитаемое сообщение
        code: Машинный код (ECONNRESET, TIMEOUT, ...)
        status_code: HTTP статус (если был ответ)
        request: Метод + URL запроса
        cause: Исходное исключение
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        request: Optional[RequestSummary] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.request = request
        self.cause = cause
        super().__init__(message)

    @property
    def method(self) -> Optional[str]:
        return self.request.method if self.request else None

    @property
    def url(self) -> Optional[str]:
        return self.request.url if self.request else None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(message={self.message!r}, "
            f"code={self.code!r}, status_code={self.status_code!r})"
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkError(APIClientError):
    """
    Сетевая ошибка до получения ответа.

    Примеры:
    - Connection refused (ECONNREFUSED)
    - Connection reset (ECONNRESET)
    - DNS resolution failed (ENOTFOUND)
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = ENETWORK,
        request: Optional[RequestSummary] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            f"Network error: {message}",
            code=code,
            request=request,
            cause=cause,
        )


class TimeoutError(NetworkError):
    """
    Попытка не уложилась в таймаут.

    Args:
        timeout: Значение таймаута (сек)
        request: Метод + URL запроса
    """

    def __init__(
        self,
        timeout: float,
        *,
        request: Optional[RequestSummary] = None,
        cause: Optional[BaseException] = None,
    ):
        self.timeout = timeout
        APIClientError.__init__(
            self,
            f"Request timeout after {timeout:g}s",
            code=TIMEOUT,
            request=request,
            cause=cause,
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPError(APIClientError):
    """
    Ответ со статусом >= 400.

    Args:
        message: Сообщение (см. response.build_error_message)
        status_code: HTTP статус
        status_message: Reason phrase
        response_body: Сырое тело ответа
        headers: Заголовки ответа
        request: Метод + URL запроса
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        status_message: str = "",
        response_body: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        request: Optional[RequestSummary] = None,
    ):
        self.status_message = status_message
        self.response_body = response_body
        self.headers = dict(headers) if headers else {}
        super().__init__(message, status_code=status_code, request=request)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФИНАЛЬНЫЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ApiError(APIClientError):
    """
    Финальная ошибка запроса.

    Оборачивает последнюю ошибку (NetworkError / TimeoutError / HTTPError),
    сохраняя её code и status_code.

    Args:
        original_error: Последняя классифицированная ошибка
        request: Метод + URL запроса, который окончательно упал
        attempts: Сколько попыток было сделано
    """

    def __init__(
        self,
        original_error: Optional[APIClientError],
        *,
        request: Optional[RequestSummary] = None,
        attempts: int = 0,
        message: Optional[str] = None,
        code: Optional[str] = None,
    ):
        self.original_error = original_error
        self.attempts = attempts
        self.response_body: Optional[str] = getattr(original_error, "response_body", None)

        if message is None:
            message = original_error.message if original_error else "Request failed"

        super().__init__(
            message,
            code=code if code is not None else getattr(original_error, "code", None),
            status_code=getattr(original_error, "status_code", None),
            request=request or getattr(original_error, "request", None),
            cause=original_error,
        )


class RequestCancelledError(ApiError):
    """Запрос отменён через cancel_event."""

    def __init__(
        self,
        original_error: Optional[APIClientError] = None,
        *,
        request: Optional[RequestSummary] = None,
        attempts: int = 0,
    ):
        super().__init__(
            original_error,
            request=request,
            attempts=attempts,
            message=f"Request cancelled after {attempts} attempt(s)",
            code=CANCELLED,
        )


class ConfigurationError(Exception):
    """Ошибка конфигурации или аргументов (до любой сетевой попытки)."""

    pass


def describe(error: BaseException) -> Dict[str, Any]:
    """Короткое описание ошибки для логов."""
    if isinstance(error, APIClientError):
        return {
            "error": error.message,
            "error_type": type(error).__name__,
            "code": error.code,
            "status_code": error.status_code,
        }
    return {"error": str(error), "error_type": type(error).__name__}

"""
Транспорт: ровно одна сетевая попытка для RequestDescriptor.

Построен на httpx.AsyncClient. Любая ошибка транспорта превращается в
NetworkError / TimeoutError с кодом в стиле errno (ECONNREFUSED, ENOTFOUND, ...),
исключения httpx наружу не выходят.
"""

import asyncio
import errno
import socket
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from .config import DiagnosticsPredicate
from .exceptions import (
    ECONNREFUSED,
    ECONNRESET,
    ENETWORK,
    ENOTFOUND,
    ETIMEDOUT,
    NetworkError,
    TimeoutError,
)
from .logging import APIClientLogger
from .request_builder import RequestDescriptor
from ..utils.sanitizer import mask_headers


@dataclass(frozen=True)
class RawResponse:
    """Сырой результат одной попытки."""
    status_code: int
    status_message: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


def host_contains(*fragments: str) -> DiagnosticsPredicate:
    """
    Предикат диагностики по подстроке в имени хоста.

    Example:
        >>> config = ClientConfig(diagnostics=host_contains("xano"))
    """
    lowered = tuple(f.lower() for f in fragments)

    def predicate(descriptor: RequestDescriptor) -> bool:
        host = descriptor.host.lower()
        return any(fragment in host for fragment in lowered)

    return predicate


def _iter_causes(exc: BaseException):
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _os_error_code(exc: BaseException) -> Optional[str]:
    """Код errno из цепочки причин исключения."""
    for cause in _iter_causes(exc):
        if isinstance(cause, socket.gaierror):
            return ENOTFOUND
        if isinstance(cause, ConnectionRefusedError):
            return ECONNREFUSED
        if isinstance(cause, ConnectionResetError):
            return ECONNRESET
        if isinstance(cause, OSError) and cause.errno:
            return errno.errorcode.get(cause.errno, ENETWORK)
    return None


def _connect_error_code(exc: httpx.ConnectError) -> str:
    code = _os_error_code(exc)
    if code:
        return code

    text = str(exc).lower()
    if "name or service not known" in text or "nodename nor servname" in text \
            or "getaddrinfo" in text or "name resolution" in text:
        return ENOTFOUND
    # "All connection attempts failed" и т.п.: соединение не установлено
    return ECONNREFUSED


def classify_transport_error(
    exc: Exception,
    descriptor: RequestDescriptor,
) -> NetworkError:
    """
    Конвертировать исключение httpx в NetworkError / TimeoutError.

    Args:
        exc: Исключение транспорта
        descriptor: Запрос (для контекста)

    Returns:
        Классифицированная ошибка

    Examples:
        >>> err = classify_transport_error(httpx.ConnectError("refused"), descriptor)
        >>> err.code
        'ECONNREFUSED'
    """
    summary = descriptor.summary

    # ConnectTimeout - подкласс TimeoutException, проверяем первым
    if isinstance(exc, httpx.ConnectTimeout):
        return NetworkError(str(exc) or "connect timeout", code=ETIMEDOUT, request=summary, cause=exc)

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        return TimeoutError(descriptor.timeout, request=summary, cause=exc)

    if isinstance(exc, httpx.ConnectError):
        return NetworkError(str(exc) or "connection failed", code=_connect_error_code(exc),
                            request=summary, cause=exc)

    if isinstance(exc, (httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError, httpx.CloseError)):
        return NetworkError(str(exc) or "connection reset", code=_os_error_code(exc) or ECONNRESET,
                            request=summary, cause=exc)

    return NetworkError(str(exc) or type(exc).__name__, code=_os_error_code(exc) or ENETWORK,
                        request=summary, cause=exc)


class Transport:
    """
    Исполнитель одной попытки.

    httpx.AsyncClient создаётся лениво и закрывается через close().

    Args:
        logger: Логгер клиента
        verify_ssl: Проверять SSL сертификаты
        diagnostics: Предикат debug-записей запроса/ответа
        transport: Кастомный httpx транспорт (например, httpx.MockTransport)
    """

    def __init__(
        self,
        logger: APIClientLogger,
        *,
        verify_ssl: bool = True,
        diagnostics: Optional[DiagnosticsPredicate] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._logger = logger
        self._verify_ssl = verify_ssl
        self._diagnostics = diagnostics
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            client_kwargs = {
                "verify": self._verify_ssl,
                "follow_redirects": False,
            }
            if self._transport is not None:
                client_kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**client_kwargs)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def execute(self, descriptor: RequestDescriptor) -> RawResponse:
        """
        Выполнить одну попытку.

        Returns:
            RawResponse (любой статус, включая 4xx/5xx)

        Raises:
            TimeoutError: Попытка дольше descriptor.timeout
            NetworkError: Ошибка соединения, DNS, обрыв
        """
        diagnose = self._wants_diagnostics(descriptor)
        if diagnose:
            self._log_request(descriptor)

        try:
            raw = await asyncio.wait_for(self._send(descriptor), timeout=descriptor.timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise classify_transport_error(e, descriptor) from e

        if diagnose:
            self._log_response(descriptor, raw)
        return raw

    async def _send(self, descriptor: RequestDescriptor) -> RawResponse:
        client = self._get_client()
        response = await client.request(
            descriptor.method,
            descriptor.url,
            headers=dict(descriptor.headers),
            content=descriptor.body,
            timeout=httpx.Timeout(descriptor.timeout),
        )
        return RawResponse(
            status_code=response.status_code,
            status_message=response.reason_phrase,
            headers=dict(response.headers),
            body=response.text,
        )

    # ==================== Diagnostics ====================

    def _wants_diagnostics(self, descriptor: RequestDescriptor) -> bool:
        if self._diagnostics is None:
            return False
        try:
            return bool(self._diagnostics(descriptor))
        except Exception as e:
            self._logger.debug("Diagnostics predicate failed", error=str(e), url=descriptor.url)
            return False

    def _log_request(self, descriptor: RequestDescriptor) -> None:
        try:
            body = descriptor.body.decode("utf-8", errors="replace") if descriptor.body else None
            self._logger.debug(
                "HTTP request debug",
                method=descriptor.method,
                path=descriptor.path,
                headers=mask_headers(descriptor.headers),
                body=body,
            )
        except Exception as e:
            self._logger.debug("Request diagnostics failed", error=str(e))

    def _log_response(self, descriptor: RequestDescriptor, raw: RawResponse) -> None:
        try:
            self._logger.debug(
                "HTTP response debug",
                method=descriptor.method,
                path=descriptor.path,
                status_code=raw.status_code,
                status_message=raw.status_message,
                body=raw.body,
            )
        except Exception as e:
            self._logger.debug("Response diagnostics failed", error=str(e))

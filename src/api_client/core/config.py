"""
Система конфигурации для API Client.

Все конфиги immutable (frozen dataclasses): один конфиг принадлежит
одному экземпляру клиента и не меняется после создания.
"""

import logging as _logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig
    from .request_builder import RequestDescriptor

DiagnosticsPredicate = Callable[["RequestDescriptor"], bool]

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RATE LIMIT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RateLimitConfig:
    """
    Ограничение частоты запросов (скользящее окно).

    Args:
        max_requests: Максимум попыток в окне
        time_window: Размер окна (сек)

    Examples:
        >>> RateLimitConfig(max_requests=18, time_window=60)  # ~18 запросов в минуту
    """
    max_requests: int = 18
    time_window: float = 60.0

    def __post_init__(self):
        """Валидация."""
        if self.max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if self.time_window <= 0:
            raise ValueError("time_window must be positive")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"Authorization": "Bearer secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType({str(k): str(v) for k, v in d.items()})


@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация AsyncAPIClient.

    Args:
        base_url: Базовый URL (опционально, без завершающего слеша)
        headers: Заголовки по умолчанию
        timeout: Таймаут одной попытки (сек)
        max_retries: Количество повторов (не включая первую попытку)
        retry_delay: Базовая задержка backoff (сек)
        retry_jitter: Верхняя граница случайной добавки к задержке (сек)
        max_retry_delay: Максимальная задержка между попытками (сек)
        verify_ssl: Проверять SSL сертификаты
        diagnostics: Предикат: писать ли debug-записи запроса/ответа
        rate_limit: Ограничение частоты (None = без ограничения)
        logging: Конфигурация логирования (None = логгер по умолчанию)
        logger: Готовый logging.Logger (sink), используется как есть

    Examples:
        >>> config = ClientConfig(base_url="https://api.example.com")
        >>> config = ClientConfig.create(timeout=60, max_retries=5)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_jitter: float = 1.0
    max_retry_delay: float = 30.0
    verify_ssl: bool = True
    diagnostics: Optional[DiagnosticsPredicate] = None
    rate_limit: Optional[RateLimitConfig] = None
    logging: Optional['LoggingConfig'] = None
    logger: Optional[_logging.Logger] = None

    def __post_init__(self):
        """Валидация, нормализация base_url и заморозка заголовков."""
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")
        if self.retry_jitter < 0:
            raise ValueError("retry_jitter must be non-negative")
        if self.max_retry_delay < 0:
            raise ValueError("max_retry_delay must be non-negative")

    @property
    def max_attempts(self) -> int:
        """Общее количество попыток (включая первую)."""
        return self.max_retries + 1

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        headers: Optional[Dict[str, str]] = None,
        verify_ssl: bool = True,
        diagnostics: Optional[DiagnosticsPredicate] = None,
        rate_limit: Optional[RateLimitConfig] = None,
        logging: Optional['LoggingConfig'] = None,
        logger: Optional[_logging.Logger] = None,
        **kwargs
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout: Таймаут попытки (сек)
            max_retries: Количество retry
            retry_delay: Базовая задержка (сек)
            headers: Заголовки
            verify_ssl: Проверять SSL
            diagnostics: Предикат диагностики
            rate_limit: Ограничение частоты
            logging: Конфигурация логирования
            logger: Готовый logger

        Returns:
            ClientConfig instance

        Examples:
            >>> config = ClientConfig.create(timeout=60)
            >>> config = ClientConfig.create(base_url="https://x.xano.io/api:v1", max_retries=5)
        """
        return cls(
            base_url=base_url,
            headers=headers or {},
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
            verify_ssl=verify_ssl,
            diagnostics=diagnostics,
            rate_limit=rate_limit,
            logging=logging,
            logger=logger,
            **kwargs
        )

    def with_timeout(self, timeout: float) -> 'ClientConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, timeout=timeout)

    def with_retries(self, max_retries: int) -> 'ClientConfig':
        """
        Создать новый конфиг с изменённым количеством retry.

        Example:
            >>> new_config = config.with_retries(5)
        """
        return replace(self, max_retries=max_retries)

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Args:
            headers: Заголовки для объединения с существующими

        Example:
            >>> new_config = config.with_headers({"Xero-tenant-id": "abc"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)  # __post_init__ заморозит

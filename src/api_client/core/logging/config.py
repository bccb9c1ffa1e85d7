"""
Конфигурация логирования клиента.

LoggingConfig описывает, куда и в каком виде писать записи APIClientLogger.
Без LoggingConfig клиент пишет в logger "api_client" и не трогает его handlers.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_LOGGER_NAME = "api_client"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def number(self) -> int:
        """Числовой уровень stdlib logging."""
        return logging.getLevelName(self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Настройки вывода логов.

    Attributes:
        level: Минимальный уровень записей
        format: json (одна запись = одна строка), text или colored
        enable_console: Писать в stdout
        enable_file: Писать в файл с ротацией
        file_path: Путь к файлу (обязателен при enable_file=True)
        max_bytes: Размер файла до ротации
        backup_count: Сколько ротированных файлов хранить
        enable_correlation_id: Добавлять correlation_id вызова в каждую запись
        extra_fields: Поля, добавляемые в каждую запись (service, env, ...)
        name: Имя stdlib logger

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json", extra_fields={"service": "xano-sync"})
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)
    name: str = DEFAULT_LOGGER_NAME

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        extra_fields: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> "LoggingConfig":
        """
        Собрать конфиг из строковых значений (env, CLI).

        Args:
            level: Имя уровня в любом регистре
            format: json / text / colored в любом регистре
            extra_fields: Постоянные поля записей
            **options: Остальные поля LoggingConfig как есть

        Raises:
            ValueError: Неизвестный уровень или формат
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            extra_fields=dict(extra_fields or {}),
            **options,
        )

# src/api_client/utils/sanitizer.py
"""
Маскирование чувствительных данных в логах.

Применяется к полям structured-логов, заголовкам и телам запросов в
диагностических записях: токены Xero, API ключи Xano, пароли Actual Budget
и т.п. не должны попадать в логи.
"""

import re
from typing import Any, Dict, Mapping


# Чувствительные имена полей (case-insensitive)
SENSITIVE_KEYS = {
    # Пароли
    'password', 'passwd', 'pwd',
    # Токены
    'token', 'access_token', 'refresh_token', 'id_token', 'api_token', 'bearer_token',
    'jwt', 'x-auth-token', 'x-session-token', 'x-csrf-token',
    # Секреты
    'secret', 'api_secret', 'client_secret', 'secret_key',
    # API ключи
    'api_key', 'apikey', 'api-key', 'x-api-key', 'private_key',
    # Аутентификация
    'authorization', 'proxy-authorization', 'auth', 'credentials',
    # Сессии и куки
    'cookie', 'set-cookie', 'session', 'sessionid', 'session_id',
}

# Короткие ключи сравниваются только точно, иначе 'auth' маскирует 'author'
_MIN_PARTIAL_MATCH = 5

SENSITIVE_PATTERNS = [
    # Bearer tokens
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1***REDACTED***'),
    # Basic auth
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1***REDACTED***'),
    # api_key=value / api-key: value
    (re.compile(r'(api[_-]?key[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
    # token=value
    (re.compile(r'(token[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
    # password=value
    (re.compile(r'(password[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1***REDACTED***'),
]

DEFAULT_MASK = "***REDACTED***"


def mask_sensitive_data(data: Any, mask: str = DEFAULT_MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Args:
        data: Данные для маскирования
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными полями

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "page": 1})
        {'Authorization': '***REDACTED***', 'page': 1}
        >>> mask_sensitive_data("https://api.example.com?api_key=abc&page=1")
        'https://api.example.com?api_key=***REDACTED***&page=1'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return _mask_string(data)

    if isinstance(data, Mapping):
        return _mask_dict(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def _mask_dict(data: Mapping[Any, Any], mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def _mask_string(text: str) -> str:
    result = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def is_sensitive_key(key: str) -> bool:
    """
    Проверяет, является ли имя поля чувствительным.

    Examples:
        >>> is_sensitive_key("X-API-Key")
        True
        >>> is_sensitive_key("author")
        False
    """
    key = key.lower()
    if key in SENSITIVE_KEYS:
        return True
    return any(
        sensitive in key
        for sensitive in SENSITIVE_KEYS
        if len(sensitive) >= _MIN_PARTIAL_MATCH
    )


def mask_headers(headers: Mapping[str, str], mask: str = DEFAULT_MASK) -> Dict[str, str]:
    """
    Маскирует чувствительные HTTP заголовки.

    Examples:
        >>> mask_headers({"Authorization": "Bearer t", "Xero-tenant-id": "42"})
        {'Authorization': '***REDACTED***', 'Xero-tenant-id': '42'}
    """
    return _mask_dict(headers or {}, mask)


def add_sensitive_keys(*keys: str) -> None:
    """
    Добавить ключи в SENSITIVE_KEYS.

    Examples:
        >>> add_sensitive_keys('xano_api_key', 'budget_sync_id')
    """
    for key in keys:
        SENSITIVE_KEYS.add(key.lower())

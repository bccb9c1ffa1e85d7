"""
Построение запроса: (method, path, body, query) -> RequestDescriptor.

Без сетевых обращений: чистые синхронные функции.
"""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import quote, urlsplit

from .exceptions import ConfigurationError, RequestSummary

# Набор символов, которые encodeURIComponent оставляет как есть
_URI_COMPONENT_SAFE = "-_.!~*'()"

DEFAULT_CONTENT_TYPE = "application/json"
SUPPORTED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Полностью разрешённый запрос одной попытки.

    Attributes:
        method: HTTP метод в верхнем регистре
        scheme: http или https
        host: Хост
        port: Порт (None = порт по умолчанию для схемы)
        path: Путь вместе с query string
        headers: Итоговые заголовки (read-only)
        body: Сериализованное тело или None
        timeout: Таймаут попытки (сек)
    """
    method: str
    scheme: str
    host: str
    port: Optional[int]
    path: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: Optional[bytes] = None
    timeout: float = 30.0

    @property
    def url(self) -> str:
        """Восстановленный абсолютный URL."""
        netloc = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is not None and self.port != DEFAULT_PORTS.get(self.scheme):
            netloc = f"{netloc}:{self.port}"
        return f"{self.scheme}://{netloc}{self.path}"

    @property
    def summary(self) -> RequestSummary:
        return RequestSummary(self.method, self.url)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_component(value: Any) -> str:
    """Percent-encode как encodeURIComponent."""
    return quote(_stringify(value), safe=_URI_COMPONENT_SAFE)


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """
    Собрать query string, пропуская значения None.

    Examples:
        >>> build_query_string({"a": 1, "b": None, "c": "x y"})
        'a=1&c=x%20y'
    """
    if not params:
        return ""
    return "&".join(
        f"{encode_component(key)}={encode_component(value)}"
        for key, value in params.items()
        if value is not None
    )


def build_url(
    path: str,
    base_url: Optional[str] = None,
    query_params: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Строит полный URL из base_url, path и query параметров.

    Args:
        path: Абсолютный URL или путь относительно base_url
        base_url: Базовый URL
        query_params: Query параметры

    Returns:
        Полный URL

    Raises:
        ConfigurationError: Относительный путь без base_url
    """
    if path.startswith(("http://", "https://")):
        url = path
    elif base_url:
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}" if path else base_url
    else:
        raise ConfigurationError(
            f"Relative path '{path}' requires base_url to be configured"
        )

    query = build_query_string(query_params)
    if query:
        url += ("&" if "?" in url else "?") + query
    return url


def serialize_body(body: Any) -> Optional[bytes]:
    """
    Сериализовать тело запроса.

    str кодируется в UTF-8, bytes передаются как есть, всё остальное
    сериализуется в компактный JSON.
    """
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def merge_headers(
    defaults: Optional[Mapping[str, str]],
    overrides: Optional[Mapping[str, str]],
) -> dict:
    """
    Объединить заголовки: per-call заголовки перекрывают дефолтные
    (без учёта регистра имени).
    """
    merged = dict(defaults or {})
    for name, value in (overrides or {}).items():
        for existing in [k for k in merged if k.lower() == name.lower()]:
            del merged[existing]
        merged[name] = str(value)
    return merged


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(k.lower() == lowered for k in headers)


def _split_url(url: str) -> Tuple[str, str, Optional[int], str]:
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise ConfigurationError(f"Unsupported URL scheme '{parts.scheme}' in {url}")
    if not parts.hostname:
        raise ConfigurationError(f"URL has no host: {url}")

    try:
        port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid port in URL {url}: {e}") from e

    path = parts.path or "/"
    if parts.query:
        path += f"?{parts.query}"
    return scheme, parts.hostname, port, path


def build_request(
    method: str,
    path: str,
    *,
    base_url: Optional[str] = None,
    body: Any = None,
    query_params: Optional[Mapping[str, Any]] = None,
    default_headers: Optional[Mapping[str, str]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = 30.0,
) -> RequestDescriptor:
    """
    Построить RequestDescriptor.

    Args:
        method: HTTP метод
        path: Абсолютный URL или путь относительно base_url
        base_url: Базовый URL клиента
        body: Тело запроса (dict/list -> JSON, str/bytes как есть)
        query_params: Query параметры (None значения пропускаются)
        default_headers: Заголовки клиента
        headers: Заголовки вызова (перекрывают default_headers)
        timeout: Таймаут попытки (сек)

    Returns:
        RequestDescriptor

    Raises:
        ConfigurationError: Некорректный URL или относительный путь без base_url

    Example:
        >>> d = build_request("post", "/transactions", base_url="https://api.test",
        ...                   body={"x": 1})
        >>> d.headers["Content-Type"], d.headers["Content-Length"]
        ('application/json', '7')
    """
    url = build_url(path, base_url, query_params)
    scheme, host, port, full_path = _split_url(url)

    merged = merge_headers(default_headers, headers)
    payload = serialize_body(body)
    if payload is not None:
        if not _has_header(merged, "Content-Type"):
            merged["Content-Type"] = DEFAULT_CONTENT_TYPE
        for existing in [k for k in merged if k.lower() == "content-length"]:
            del merged[existing]
        merged["Content-Length"] = str(len(payload))

    return RequestDescriptor(
        method=method.upper(),
        scheme=scheme,
        host=host,
        port=port,
        path=full_path,
        headers=MappingProxyType(merged),
        body=payload,
        timeout=timeout,
    )

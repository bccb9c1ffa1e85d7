"""
Нормализация ответа: сырой ответ -> ResponseEnvelope или HTTPError.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING

from .exceptions import HTTPError

if TYPE_CHECKING:
    from .request_builder import RequestDescriptor
    from .transport import RawResponse

# Сырое тело короче этого добавляется в сообщение об ошибке как есть
MAX_RAW_ERROR_BODY = 200

_NOT_JSON = object()


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    Успешный результат запроса.

    Attributes:
        status_code: HTTP статус
        status_message: Reason phrase
        headers: Заголовки ответа
        data: Распарсенный JSON, сырой текст или None для пустого тела
    """
    status_code: int
    status_message: str
    headers: Mapping[str, str] = field(default_factory=dict)
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status_code": self.status_code,
            "status_message": self.status_message,
            "headers": dict(self.headers),
            "data": self.data,
        }


def _try_json(text: Optional[str]) -> Any:
    if not text:
        return _NOT_JSON
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        # слишком глубокая вложенность тоже "не JSON"
        return _NOT_JSON


def parse_body(text: Optional[str]) -> Any:
    """
    Распарсить тело успешного ответа.

    JSON -> структура; не-JSON -> исходный текст; пустое тело -> None.

    Examples:
        >>> parse_body('{"x": 1}')
        {'x': 1}
        >>> parse_body('OK')
        'OK'
    """
    if not text:
        return None
    parsed = _try_json(text)
    return text if parsed is _NOT_JSON else parsed


def _detail(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def build_error_message(status_code: int, status_message: str, body: Optional[str]) -> str:
    """
    Сообщение для HTTP ошибки.

    "HTTP <status>: <reason>" + " - <error|message>" из JSON тела, либо
    " - <тело>" если тело не JSON и короче MAX_RAW_ERROR_BODY символов.

    Examples:
        >>> build_error_message(404, "Not Found", '{"message": "no such mapping"}')
        'HTTP 404: Not Found - no such mapping'
        >>> build_error_message(502, "Bad Gateway", "upstream down")
        'HTTP 502: Bad Gateway - upstream down'
    """
    message = f"HTTP {status_code}: {status_message}"

    parsed = _try_json(body)
    if parsed is _NOT_JSON:
        if body and len(body) < MAX_RAW_ERROR_BODY:
            message += f" - {body}"
    elif isinstance(parsed, dict):
        if parsed.get("error"):
            message += f" - {_detail(parsed['error'])}"
        elif parsed.get("message"):
            message += f" - {_detail(parsed['message'])}"

    return message


def normalize_response(raw: "RawResponse", descriptor: "RequestDescriptor") -> ResponseEnvelope:
    """
    Превратить сырой ответ в ResponseEnvelope.

    Args:
        raw: Результат одной попытки транспорта
        descriptor: Запрос (для контекста ошибки)

    Returns:
        ResponseEnvelope

    Raises:
        HTTPError: Статус >= 400 (без исключений для отдельных кодов)
    """
    if raw.status_code >= 400:
        raise HTTPError(
            build_error_message(raw.status_code, raw.status_message, raw.body),
            status_code=raw.status_code,
            status_message=raw.status_message,
            response_body=raw.body,
            headers=raw.headers,
            request=descriptor.summary,
        )

    return ResponseEnvelope(
        status_code=raw.status_code,
        status_message=raw.status_message,
        headers=raw.headers,
        data=parse_body(raw.body),
    )

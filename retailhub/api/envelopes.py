from typing import Any, Iterable

from fastapi.responses import JSONResponse

from retailhub.core.config import settings
from retailhub.core.errors import ErrorKind, ServiceResult
from retailhub.schemas import ProductRead


def status_for(result: ServiceResult) -> int:
    if result.ok or not settings.STRICT_HTTP_STATUS:
        return 200
    return result.error.http_status


def message(result: ServiceResult, success: str, internal: str, key: str = 'message') -> JSONResponse:
    """Translate a service result into the {"<key>": "<text>"} envelope.

    Expected failures carry their own user-facing text; infrastructure
    failures collapse to ``internal`` so nothing about the database leaks.
    """
    if result.ok:
        text = success
    elif result.error is ErrorKind.INTERNAL:
        text = internal
    else:
        text = result.error_detail
    return JSONResponse({key: text}, status_code=status_for(result))


def products(items: Iterable[Any]) -> list[dict]:
    return [ProductRead.model_validate(p).dump() for p in items]

"""Uniform JSON envelope for every API response."""

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


def create_response(
    message: str,
    data: Any | None = None,
    status_code: int = 200,
    success: bool = True,
    error: Any | None = None,
) -> JSONResponse:
    """Build a ``{success, message, data?, error?}`` response.

    Pydantic models in ``data`` are dumped by alias so that user payloads
    come out camelCase. ``data`` and ``error`` are omitted when ``None``.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)

    content: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        content["data"] = data
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def error_response(message: str, status_code: int = 400, error: Any | None = None) -> JSONResponse:
    return create_response(message, status_code=status_code, success=False, error=error)

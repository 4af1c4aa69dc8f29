"""Standard response envelope: {status, message, data}."""

from typing import Any

from fastapi import status as http_status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    message: str,
    data: Any = None,
    status_code: int = http_status.HTTP_200_OK,
    success: bool = True,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "success" if success else "error",
            "message": message,
            "data": jsonable_encoder(data),
        },
    )

from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ApiResponse(BaseModel):
    success: bool = True
    data: Any = None
    message: str = "Execution Successful."
    statusCode: int = status.HTTP_200_OK
    errorCode: Optional[str] = None


def send_response(
    data: Any = None,
    message: str = "Execution Successful.",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    body = ApiResponse(data=data, message=message, statusCode=status_code)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


def send_error(
    message: str,
    status_code: int,
    error_code: str,
    details: Any = None,
) -> JSONResponse:
    body = ApiResponse(
        success=False,
        data=details,
        message=message,
        statusCode=status_code,
        errorCode=error_code,
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )

"""
예외 → 응답 봉투 변환

모든 오류 응답은 {"success": false, "error": {"message", "code"}} 형태로 내려간다.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.exceptions import DomainError, PersistenceError, ProductNotFoundError, ValidationError


def error_response(status_code: int, message: str, code: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message, "code": code}},
    )


def _status_for(exc: DomainError):
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"
    if isinstance(exc, ProductNotFoundError):
        return status.HTTP_404_NOT_FOUND, "NOT_FOUND"
    if isinstance(exc, PersistenceError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, "PERSISTENCE_ERROR"
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"


async def domain_error_handler(request: Request, exc: DomainError):
    status_code, code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 실패: {exc}")
    return error_response(status_code, str(exc), code)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return error_response(status.HTTP_400_BAD_REQUEST,
                          f"입력값 검증 실패: {', '.join(messages)}", "VALIDATION_ERROR")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "요청을 처리할 수 없습니다."
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = f"Not found: {request.method} {request.url.path}"
    return error_response(exc.status_code, message, "NOT_FOUND" if exc.status_code == 404 else None)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"처리되지 않은 오류: {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "서버 내부 오류가 발생했습니다.",
                          "INTERNAL_ERROR")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

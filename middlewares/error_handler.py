import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from middlewares.timing import elapsed_ms
from schemas.common import ErrorDetail, ErrorResponse
from services.exceptions import GradeServiceError

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message),
        latency_ms=elapsed_ms(request),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def add_error_handlers(app: FastAPI):
    @app.exception_handler(GradeServiceError)
    async def grade_service_error_handler(request: Request, exc: GradeServiceError):
        # 5xx는 내부 원인을 숨기고 예외 클래스의 기본 메시지만 전달
        message = type(exc).message if exc.status_code >= 500 else exc.message
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} 처리 실패: {exc.code}")
        else:
            logger.warning(f"{request.method} {request.url.path} → {exc.status_code} {message}")
        return _error_response(request, exc.status_code, exc.code, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # FastAPI 기본 422 형식 유지. 입력값(input/ctx)은 NaN 등 JSON 직렬화 불가 값일 수 있어 제외
        detail = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=422, content={"detail": detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(request, 500, "INTERNAL_ERROR", "Seems like we messed up somewhere...")

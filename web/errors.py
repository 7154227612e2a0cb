"""
에러 핸들러

LedgerError.kind를 HTTP 상태 코드로 매핑하고
{"error": {"kind", "message", "issues"}} 형식으로 응답.
저장소 엔진 내부 메시지는 응답에 포함하지 않는다.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import LedgerError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[str, int] = {
    "VALIDATION_ERROR": 422,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "REFERENTIAL_INTEGRITY": status.HTTP_409_CONFLICT,
    "TIMEOUT": status.HTTP_504_GATEWAY_TIMEOUT,
    "CONFIGURATION_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
    "STORAGE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(status_code: int, kind: str, message: str, issues: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"kind": kind, "message": message, "issues": issues}},
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """원장 에러 → HTTP 응답"""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error(
            f"요청 실패: {request.method} {request.url.path}",
            extra={"kind": exc.kind, "error": exc.message},
        )
    else:
        logger.warning(
            f"요청 거부: {request.method} {request.url.path}",
            extra={"kind": exc.kind, "error": exc.message},
        )

    return error_response(status_code, exc.kind, exc.message, exc.issues)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """FastAPI 요청 검증 에러를 동일한 에러 형식으로 변환"""
    issues = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        issues.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    logger.warning(
        f"요청 검증 실패: {request.method} {request.url.path}",
        extra={"issues": issues},
    )

    return error_response(
        422,
        "VALIDATION_ERROR",
        f"Invalid request: {', '.join(issues)}",
        issues,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """앱에 에러 핸들러 등록"""
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils.errors import GradeServiceError, InvalidInputError

logger = logging.getLogger(__name__)


def _now_iso():
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {"code": code, "message": message},
            "generated_at": _now_iso(),
            "latency_ms": 0,
        },
    )


def add_error_handlers(app: FastAPI):
    @app.exception_handler(GradeServiceError)
    async def grade_service_exception_handler(request: Request, exc: GradeServiceError):
        return _error_response(exc.status_code, exc.code, exc.message)

    # 숫자가 아닌 learner_id / class_id → 400 INVALID_INPUT
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        message = f"Invalid value for: {', '.join(fields)}" if fields else "Invalid input"
        return _error_response(InvalidInputError.status_code, InvalidInputError.code, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error_response(500, "INTERNAL_ERROR", str(exc))

"""API errors, validation helpers and FastAPI error handlers."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.errors import InstallError, SecurityError, WorkerError


class NotFoundError(Exception):
    """Resource not found."""

    def __init__(self, message: str = "Resource not found"):
        self.message = message
        super().__init__(self.message)


class ValidationError(Exception):
    """Validation error."""

    def __init__(self, message: str = "Validation error"):
        self.message = message
        super().__init__(self.message)


def validate_scope(scope: str) -> None:
    """Scopes are origin-relative paths."""
    if not scope.startswith("/") or scope.startswith("//"):
        raise ValidationError(f"Invalid scope: {scope!r}. Must be an absolute path like '/'")


def validate_cache_name(name: str) -> None:
    if not name.strip():
        raise ValidationError("Cache name must not be empty")


# Worker errors -> HTTP status
_WORKER_STATUS = {
    SecurityError: status.HTTP_403_FORBIDDEN,
    InstallError: status.HTTP_502_BAD_GATEWAY,
}


def _error(code: int, kind: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=code, content={"error": {"code": kind, "message": message}})


def register_error_handlers(app: FastAPI) -> None:
    """Map API and worker errors to structured JSON responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, "NOT_FOUND", exc.message)

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        logger.warning("Validation error on {}: {}", request.url.path, exc.message)
        return _error(422, "VALIDATION_ERROR", exc.message)

    @app.exception_handler(WorkerError)
    async def worker_error_handler(request: Request, exc: WorkerError):
        code = next((c for t, c in _WORKER_STATUS.items() if isinstance(exc, t)), status.HTTP_409_CONFLICT)
        logger.error("{} on {}: {}", type(exc).__name__, request.url.path, exc.message)
        return _error(code, type(exc).__name__.upper(), exc.message)

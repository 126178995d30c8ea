from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class UploadError(Exception):
    """Загруженный файл не прошёл проверку (тип, размер, содержимое)."""

    def __init__(self, message: str = "File upload error."):
        super().__init__(message)
        self.message = message


class StorageError(Exception):
    """Внешнее хранилище медиафайлов не настроено или недоступно."""

    def __init__(self, message: str = "Media storage is unavailable."):
        super().__init__(message)
        self.message = message


def _validation_message(exc: RequestValidationError) -> str:
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        if loc:
            fields.append(".".join(loc))
    if fields:
        return f"Missing or invalid fields: {', '.join(fields)}."
    return "Invalid request."


def setup_exception_handlers(app: FastAPI) -> None:
    """Единый формат ошибок API: {"message": ...}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc), "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(UploadError)
    async def upload_exception_handler(request: Request, exc: UploadError):
        logger.warning(f"Upload rejected on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": exc.message})

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error(f"Storage error on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "An unexpected error occurred."},
        )

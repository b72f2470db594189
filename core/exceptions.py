from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from utils.logger import get_logger

logger = get_logger("Global_Exception")

ROUTE_NOT_FOUND = "Route non trouvée"
DUPLICATE_EMAIL = "Un utilisateur avec cet email existe déjà"


class AppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class BadRequestError(AppException):
    def __init__(self, detail: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class UnauthorizedError(AppException):
    def __init__(self, detail: str = "Non autorisé à accéder à cette route"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class ForbiddenError(AppException):
    def __init__(self, detail: str):
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class NotFoundError(AppException):
    def __init__(self, detail: str):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class QueryFilterError(AppException):
    """Malformed listing filter; fails the whole request."""
    def __init__(self, detail: str):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message}, headers=headers)


def format_validation_errors(errors) -> str:
    messages = []
    for err in errors:
        # drop the "body"/"query" prefix from the location
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return ", ".join(messages)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = ROUTE_NOT_FOUND
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {message}")
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = format_validation_errors(exc.errors())
    logger.info("Validation error", extra={"path": request.url.path, "errors": message})
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    logger.warning("Duplicate key", extra={"path": request.url.path})
    return error_response(status.HTTP_400_BAD_REQUEST, DUPLICATE_EMAIL)


def register_exception_handlers(app):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from utils.logger import get_logger
from core.exceptions import error_response

logger = get_logger("Middleware")

SERVER_ERROR = "Erreur serveur"

class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler: anything the routers did not map becomes a 500 envelope."""
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled Exception on {request.method} {request.url.path}: {e}", exc_info=True)
            return error_response(500, SERVER_ERROR)

"""
Application exception handlers.

Turn hokku exceptions and request decoding failures into APIResponse error
bodies with the mapped HTTP status code.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import HokkuError, get_http_status_code
from ..models.responses import APIResponse

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers the error handlers of the webhook API."""

    def __init__(self, is_production: bool = True):
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application.

        Args:
            app: FastAPI application instance
        """
        @app.exception_handler(HokkuError)
        async def hokku_exception_handler(request: Request, exc: HokkuError):
            """Handle hokku exceptions."""
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            body = APIResponse.fail(
                message=exc.message,
                error=exc.error_code,
                errors=[exc.to_dict()],
            )
            headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
            return JSONResponse(
                status_code=status_code,
                content=body.model_dump(mode="json"),
                headers=headers,
            )

        @app.exception_handler(RequestValidationError)
        async def request_validation_handler(request: Request, exc: RequestValidationError):
            """Handle malformed request bodies."""
            errors = [
                {
                    "field": ".".join(str(part) for part in err.get("loc", ())),
                    "message": err.get("msg", ""),
                    "type": err.get("type", ""),
                }
                for err in exc.errors()
            ]
            body = APIResponse.fail(
                message="invalid request body",
                error="InvalidPayload",
                errors=errors,
            )
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=body.model_dump(mode="json"),
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)

            if self.is_production:
                message = "An unexpected error occurred"
            else:
                message = str(exc)

            body = APIResponse.fail(message=message, error="InternalError")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=body.model_dump(mode="json"),
            )


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """
    Register exception handlers for a FastAPI application.

    Args:
        app: FastAPI application instance
        is_production: Hide unexpected error details when True
    """
    registry = ExceptionHandlerRegistry(is_production)
    registry.register_handlers(app)

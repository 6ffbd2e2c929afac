"""Error handlers for the command server."""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config.configuration_service import ConfigurationValidationError
from ..utils.error_messages import error_messages, format_validation_errors
from ..utils.logging_config import get_logger, get_error_logger


logger = get_logger(__name__)


class WebErrorHandler:
    """Turn bridge-level failures into JSON responses."""

    def error_body(
        self,
        message: str,
        code: str,
        status_code: int,
        fields: Optional[Dict[str, List[str]]] = None,
        error_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Common JSON shape for bridge errors."""
        body = {
            "error": {
                "message": message,
                "code": code,
                "status_code": status_code,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        }
        if fields:
            body["error"]["fields"] = fields
        if error_id:
            body["error"]["error_id"] = error_id
        return body

    def handle_500(self, request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions.

        Args:
            request: FastAPI request object
            exc: Exception that occurred

        Returns:
            JSON response with a short error id for the logs
        """
        error_id = str(uuid.uuid4())[:8]

        get_error_logger().log_exception(
            exc,
            context=f"Command error (ID: {error_id})",
            extra_data={
                "path": request.url.path,
                "method": request.method
            }
        )

        return JSONResponse(
            content=self.error_body(
                error_messages.get_error_message("internal_error"), "internal_error", 500, error_id=error_id
            ),
            status_code=500
        )

    def handle_configuration_validation(
        self,
        request: Request,
        exc: ConfigurationValidationError
    ) -> JSONResponse:
        """Handle settings that failed validation."""
        logger.warning(f"Rejected configuration update on {request.url.path}: {exc}")
        return JSONResponse(
            content=self.error_body(
                error_messages.get_error_message("config_save_failed"),
                "validation_failed",
                400,
                fields=format_validation_errors(exc.result.errors)
            ),
            status_code=400
        )

    def handle_request_validation(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request bodies that do not match the command schema."""
        fields: Dict[str, List[str]] = {}
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part != "body"]
            field = ".".join(location) or "body"
            fields.setdefault(field, []).append(error.get("msg", "Invalid value"))

        logger.warning(f"Invalid request to {request.url.path}: {fields}")
        return JSONResponse(
            content=self.error_body("The request is invalid.", "invalid_request", 400, fields=fields),
            status_code=400
        )


def create_error_handlers(app) -> WebErrorHandler:
    """Create and register error handlers for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        WebErrorHandler instance
    """
    error_handler = WebErrorHandler()

    @app.exception_handler(ConfigurationValidationError)
    async def configuration_validation_handler(request: Request, exc: ConfigurationValidationError):
        return error_handler.handle_configuration_validation(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_handler.handle_request_validation(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            content=error_handler.error_body(str(exc.detail), "http_error", exc.status_code),
            status_code=exc.status_code
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        return error_handler.handle_500(request, exc)

    return error_handler

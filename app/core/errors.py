"""
Domain error taxonomy and the FastAPI handlers that render it.

Every error reaches the client as {"success": false, "error": "<message>"}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging_config import sanitize_log_data

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors with a client-facing message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


# ============================================
# 400
# ============================================

class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request payload"


class WeakPasswordError(ValidationError):
    message = "Password is too short"


# ============================================
# 401
# ============================================

class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class UnauthenticatedError(AuthenticationError):
    message = "Invalid or expired session"


class TokenExpiredError(AuthenticationError):
    message = "Session expired"


class InvalidCredentialsError(AuthenticationError):
    # Same message for unknown email and wrong password
    message = "Invalid credentials"


# ============================================
# 404
# ============================================

class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class SessionNotFoundError(NotFoundError):
    # Also raised for sessions owned by another user
    message = "Session not found"


# ============================================
# 409
# ============================================

class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class EmailTakenError(ConflictError):
    message = "User with this email already exists"


class PasswordMismatchError(ConflictError):
    message = "Passwords do not match"


class InvalidTransitionError(ConflictError):
    message = "Invalid status transition"


# ============================================
# 502
# ============================================

class ExternalServiceError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "External service unavailable"


class CoachConfigUnavailableError(ExternalServiceError):
    message = "Interview coach model unavailable"


def _error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON request body"
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request payload: {location}: {first.get('msg')}"
    return f"Invalid request payload: {first.get('msg')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers for domain, validation, and unexpected errors."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        body = sanitize_log_data(exc.body) if isinstance(exc.body, dict) else None
        logger.debug(f"Rejected request to {request.url.path}: {message} body={body}")
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from shoplist.core.logging import logger, request_id


class AppError(Exception):
	"""Base for errors that map onto an ``{error: message}`` response."""

	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	default_message = "Internal server error"

	def __init__(self, message: str | None = None):
		self.message = message or self.default_message
		super().__init__(self.message)


class ValidationError(AppError):
	status_code = status.HTTP_400_BAD_REQUEST
	default_message = "Invalid request"


class Unauthenticated(AppError):
	status_code = status.HTTP_401_UNAUTHORIZED
	default_message = "Not authenticated"


class InvalidCredentials(Unauthenticated):
	default_message = "Invalid email or password"


class Forbidden(AppError):
	status_code = status.HTTP_403_FORBIDDEN
	default_message = "Forbidden"


class NotFound(AppError):
	status_code = status.HTTP_404_NOT_FOUND
	default_message = "Not found"


class Conflict(AppError):
	status_code = status.HTTP_409_CONFLICT
	default_message = "Conflict"


def error_response(status_code: int, message: str, headers=None):
	return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)

async def app_error_handler(request: Request, exc: AppError):
	headers = None
	if isinstance(exc, Unauthenticated):
		headers = {"WWW-Authenticate": "Bearer"}
	return error_response(exc.status_code, exc.message, headers=headers)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
	message = exc.detail if isinstance(exc.detail, str) else "Request failed"
	return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

def _describe(error: dict) -> str:
	loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
	field = ".".join(loc)
	msg = error.get("msg", "invalid value")
	return f"{field}: {msg}" if field else msg

async def validation_exception_handler(request: Request, exc: RequestValidationError):
	errors = exc.errors()
	message = _describe(errors[0]) if errors else "Invalid request"
	return error_response(status.HTTP_400_BAD_REQUEST, message)

async def unexpected_exception_handler(request: Request, exc: Exception):
	logger.exception("unhandled error (request_id=%s): %s", request_id(request), exc)
	return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

from typing import Dict, Optional

from fastapi import FastAPI, Request
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
import traceback
from .logging import get_logger
from .responses import ResponseBuilder

logger = get_logger()


class FieldValidationError(Exception):
    """Raised when a submitted student fails one or more field rules."""

    def __init__(
        self,
        errors: Dict[str, str],
        message: str = "Por favor corrija los errores en el formulario",
        error_code: str = "FIELD_VALIDATION_ERROR",
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.errors = errors


class EmptyExportError(Exception):
    """Raised when an export is requested while the store holds no records."""

    def __init__(
        self, message: str = "No hay datos para exportar", error_code: str = "EMPTY_EXPORT"
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class DecodeError(Exception):
    """
    Raised when import content cannot be parsed by the selected codec.

    `message` is the generic notice shown to the user; `detail` says what
    was actually wrong and only goes to the log.
    """

    def __init__(
        self,
        detail: Optional[str] = None,
        message: str = "Error al importar el archivo. Verifique el formato.",
        error_code: str = "DECODE_ERROR",
    ):
        super().__init__(detail or message)
        self.message = message
        self.error_code = error_code
        self.detail = detail


class UnsupportedFormatError(Exception):
    """Raised for an import file whose extension maps to no codec."""

    def __init__(self, message: str, error_code: str = "UNSUPPORTED_FORMAT"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class EncodeError(Exception):
    """Raised when stored records hold text the chosen export format cannot carry."""

    def __init__(
        self,
        detail: Optional[str] = None,
        message: str = "No se pudo exportar en este formato. Pruebe con otro formato.",
        error_code: str = "ENCODE_ERROR",
    ):
        super().__init__(detail or message)
        self.message = message
        self.error_code = error_code
        self.detail = detail


def _format_validation_errors(exc: ValidationError):
    formatted_errors = []
    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        formatted_errors.append(
            {
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
                "input": error.get("input"),
            }
        )
    return formatted_errors


def setup_error_handlers(app: FastAPI):
    """Setup custom error handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        return ResponseBuilder.error(
            request=request,
            message=str(exc.detail),
            error_code="HTTP_ERROR",
            status_code=exc.status_code,
            meta={"http_status": exc.status_code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        logger.error(f"Request Validation Error: {exc.errors()}")

        return ResponseBuilder.error(
            request=request,
            message="Request validation failed",
            errors=_format_validation_errors(exc),
            error_code="VALIDATION_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_exception_handler(
        request: Request, exc: ValidationError
    ):
        logger.error(f"Pydantic Validation Error: {exc.errors()}")

        return ResponseBuilder.error(
            request=request,
            message="Data validation failed",
            error_code="INTERNAL_VALIDATION_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(FieldValidationError)
    async def field_validation_exception_handler(
        request: Request, exc: FieldValidationError
    ):
        logger.warning(f"Field Validation Error: {sorted(exc.errors)}")

        return ResponseBuilder.error(
            request=request,
            message=exc.message,
            errors=[
                {"field": field, "message": message}
                for field, message in exc.errors.items()
            ],
            error_code=exc.error_code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            meta={"error_type": "FIELD_VALIDATION_ERROR"},
        )

    @app.exception_handler(EmptyExportError)
    async def empty_export_exception_handler(request: Request, exc: EmptyExportError):
        logger.warning(f"Empty Export Error: {exc.message}")

        return ResponseBuilder.error(
            request=request,
            message=exc.message,
            error_code=exc.error_code,
            status_code=status.HTTP_409_CONFLICT,
            meta={"error_type": "EMPTY_EXPORT_ERROR"},
        )

    @app.exception_handler(DecodeError)
    async def decode_exception_handler(request: Request, exc: DecodeError):
        logger.error(f"Decode Error: {exc.detail or exc.message}")

        return ResponseBuilder.error(
            request=request,
            message=exc.message,
            error_code=exc.error_code,
            status_code=status.HTTP_400_BAD_REQUEST,
            meta={"error_type": "DECODE_ERROR"},
        )

    @app.exception_handler(EncodeError)
    async def encode_exception_handler(request: Request, exc: EncodeError):
        logger.error(f"Encode Error: {exc.detail or exc.message}")

        return ResponseBuilder.error(
            request=request,
            message=exc.message,
            error_code=exc.error_code,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            meta={"error_type": "ENCODE_ERROR"},
        )

    @app.exception_handler(UnsupportedFormatError)
    async def unsupported_format_exception_handler(
        request: Request, exc: UnsupportedFormatError
    ):
        logger.error(f"Unsupported Format Error: {exc.message}")

        return ResponseBuilder.error(
            request=request,
            message=exc.message,
            error_code=exc.error_code,
            status_code=status.HTTP_400_BAD_REQUEST,
            meta={"error_type": "UNSUPPORTED_FORMAT_ERROR"},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.error(f"Value Error: {str(exc)}")

        return ResponseBuilder.error(
            request=request,
            message=str(exc),
            error_code="VALUE_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            meta={"error_type": "VALUE_ERROR"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions"""
        logger.error(f"Unhandled Exception: {str(exc)}")
        logger.error(f"Traceback: {traceback.format_exc()}")

        return ResponseBuilder.error(
            request=request,
            message="An internal server error occurred",
            error_code="INTERNAL_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            meta={"error_type": "INTERNAL_ERROR"},
        )

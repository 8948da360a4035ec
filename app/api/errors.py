"""
Translation of exceptions into structured JSON error responses.

Every failure leaves the API as an ``ErrorResponse`` body; the mapping from
exception type to HTTP status lives entirely in this module.
"""
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import compile_path

from app.schemas.error import ErrorResponse
from app.services.exceptions import (
    BusinessValidationError,
    ProductNotFoundError,
    StructuralValidationError,
)
from app.services.validation import collect_remaining_violations

logger = logging.getLogger(__name__)

# pydantic error types raised when a path or query value can't be parsed
_PARAMETER_TYPES = {
    "int_parsing": "int",
    "int_type": "int",
    "float_parsing": "float",
    "float_type": "float",
    "bool_parsing": "bool",
    "enum": "enum",
}

# Errors on the body as a whole: absent, or JSON that isn't an object
_MALFORMED_BODY_TYPES = {"missing", "model_attributes_type", "dict_type"}


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[list[str]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build the JSON response shared by every error handler."""
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
        details=details,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def _field_name(loc) -> str:
    return ".".join(str(part) for part in loc[1:]) or str(loc[0])


def _allowed_methods(request: Request, allow_header: Optional[str] = None) -> list[str]:
    """
    Collect the verbs of every documented path matching the request.

    The OpenAPI path table is flat whatever the router nesting, so it
    sees routes from every included router.
    """
    methods = set()
    for path, operations in request.app.openapi().get("paths", {}).items():
        path_regex, _, _ = compile_path(path)
        if path_regex.match(request.url.path):
            methods.update(verb.upper() for verb in operations)
    if not methods:
        methods = {m.strip() for m in (allow_header or "").split(",") if m.strip()}
    return sorted(methods)


async def handle_not_found(request: Request, exc: ProductNotFoundError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(request, status.HTTP_404_NOT_FOUND, "Not Found", str(exc))


async def handle_business_validation(request: Request, exc: BusinessValidationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(
        request,
        HTTPStatus.UNPROCESSABLE_ENTITY.value,
        "Business Validation Failed",
        str(exc),
    )


async def handle_structural_validation(request: Request, exc: StructuralValidationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: invalid input {exc.violations}")
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation Failed",
        "Invalid input data",
        details=exc.violations,
    )


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Split FastAPI's request validation errors into three kinds:

    - unparseable or missing body -> Malformed JSON Request
    - bad path or query parameter -> Type Mismatch
    - invalid body fields         -> Validation Failed, one detail per field
    """
    errors = exc.errors()
    logger.warning(f"{request.method} {request.url.path}: request validation failed {errors}")

    for err in errors:
        if err["type"] == "json_invalid" or (
            tuple(err["loc"]) == ("body",) and err["type"] in _MALFORMED_BODY_TYPES
        ):
            return error_response(
                request,
                status.HTTP_400_BAD_REQUEST,
                "Malformed JSON Request",
                "The request body is invalid",
                details=[err["msg"]],
            )

    for err in errors:
        if err["loc"] and err["loc"][0] in ("path", "query"):
            name = err["loc"][-1]
            type_name = _PARAMETER_TYPES.get(err["type"], "unknown")
            return error_response(
                request,
                status.HTTP_400_BAD_REQUEST,
                "Type Mismatch",
                f"{name} should be of type {type_name}",
            )

    details = [f"{_field_name(err['loc'])}: {err['msg']}" for err in errors]

    # Report the presence and range checks of the fields that did parse
    if isinstance(exc.body, dict):
        rejected = {str(err["loc"][1]) for err in errors if len(err["loc"]) > 1 and err["loc"][0] == "body"}
        details.extend(collect_remaining_violations(exc.body, rejected))

    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation Failed",
        "Invalid input data",
        details=details,
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    headers = getattr(exc, "headers", None)

    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = f"{request.method} method is not supported for this request."
        allowed = ", ".join(_allowed_methods(request, (headers or {}).get("Allow")))
        if allowed:
            message += f" Supported methods are {allowed}"
            headers = {**(headers or {}), "Allow": allowed}
        return error_response(
            request,
            exc.status_code,
            "Method Not Allowed",
            message,
            headers=headers,
        )

    phrase = HTTPStatus(exc.status_code).phrase
    message = exc.detail if isinstance(exc.detail, str) else phrase
    return error_response(request, exc.status_code, phrase, message, headers=headers)


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: integrity error {exc.orig}")
    return error_response(
        request,
        status.HTTP_409_CONFLICT,
        "Database Error",
        "Database integrity constraint violated",
        details=[str(exc.orig)],
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path}: unexpected error")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
        details=[str(exc)],
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every error handler to the application."""
    app.add_exception_handler(ProductNotFoundError, handle_not_found)
    app.add_exception_handler(BusinessValidationError, handle_business_validation)
    app.add_exception_handler(StructuralValidationError, handle_structural_validation)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_unexpected)

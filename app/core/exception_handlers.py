"""
Manejadores de excepciones centralizados para la aplicación FastAPI.

Este módulo define los manejadores de excepciones personalizados y globales,
proporcionando respuestas consistentes y logging apropiado para cada tipo de error.
"""

import logging
import traceback
from datetime import UTC, datetime
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.utils.error_handler import (
    AppException,
    MalformedPriceError,
    ShopifyAPIException,
    UpstreamFetchError,
    ValidationException,
)

settings = get_settings()
logger = logging.getLogger(__name__)


def _base_content(request: Request, error_type: str) -> Dict[str, Any]:
    return {
        "error": True,
        "error_type": error_type,
        "path": str(request.url.path),
        "timestamp": datetime.now(UTC).isoformat(),
        "request_id": request.headers.get("X-Request-ID"),
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Manejador para excepciones personalizadas de la aplicación.

    Args:
        request: Request de FastAPI
        exc: Excepción personalizada de la app

    Returns:
        JSONResponse: Respuesta JSON con error formateado
    """
    logger.error(
        f"App Exception: {exc.message} - "
        f"Code: {exc.error_code.value} - "
        f"URL: {request.url} - "
        f"Details: {exc.details}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request, "application_error"),
            "error_code": exc.error_code.value,
            "message": exc.message,
            "details": exc.details if settings.DEBUG else None,
        },
    )


async def upstream_fetch_exception_handler(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    """
    Manejador para fallos al obtener pedidos de Shopify.

    El listado no avanza: se devuelven los filtros de la página pedida para
    que el cliente pueda reintentar la misma navegación.
    """
    logger.error(f"Upstream Fetch Error: {exc.message} - Operation: {exc.operation} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request, "upstream_fetch_error"),
            "error_code": exc.error_code.value,
            "message": exc.message,
            "operation": exc.operation,
            "retryable": exc.is_retryable,
            "page_state": exc.details.get("page_state"),
        },
    )


async def shopify_api_exception_handler(request: Request, exc: ShopifyAPIException) -> JSONResponse:
    """
    Manejador específico para errores de la API de Shopify.

    Args:
        request: Request de FastAPI
        exc: Excepción de Shopify API

    Returns:
        JSONResponse: Respuesta JSON con información del error de Shopify
    """
    logger.error(
        f"Shopify API Exception: {exc.message} - "
        f"API Code: {exc.api_response_code} - "
        f"Rate Limited: {exc.rate_limited} - "
        f"Retry After: {exc.retry_after} - "
        f"URL: {request.url}"
    )

    # Headers adicionales para rate limiting
    headers = {}
    if exc.rate_limited and exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
        headers["X-Rate-Limit-Exceeded"] = "true"

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request, "shopify_api_error"),
            "error_code": exc.error_code.value,
            "message": exc.message,
            "shopify_response_code": exc.api_response_code,
            "rate_limited": exc.rate_limited,
            "retry_after": exc.retry_after,
        },
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: ValidationException) -> JSONResponse:
    """
    Manejador para errores de validación de datos (filtros, precios).

    Args:
        request: Request de FastAPI
        exc: Excepción de validación

    Returns:
        JSONResponse: Respuesta JSON con detalles de validación
    """
    logger.warning(
        f"Validation Exception: {exc.message} - "
        f"Field: {exc.field} - "
        f"Value: {exc.invalid_value} - "
        f"URL: {request.url}"
    )

    content = {
        **_base_content(request, "validation_error"),
        "error_code": exc.error_code.value,
        "message": exc.message,
        "field": exc.field,
        "invalid_value": exc.invalid_value if settings.DEBUG else None,
        "expected_format": exc.expected_format,
    }
    if isinstance(exc, MalformedPriceError):
        content["line_item_id"] = exc.line_item_id

    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Errores de validación de parámetros detectados por FastAPI."""
    logger.warning(f"Request Validation Error: {exc.errors()} - URL: {request.url}")

    return JSONResponse(
        status_code=422,
        content={
            **_base_content(request, "validation_error"),
            "error_code": "VALIDATION_ERROR",
            "message": "Invalid request parameters",
            "errors": [{"loc": list(error.get("loc", ())), "msg": error.get("msg")} for error in exc.errors()],
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Manejador para HTTPException de FastAPI y Starlette.

    Args:
        request: Request de FastAPI
        exc: HTTPException

    Returns:
        JSONResponse: Respuesta JSON estandarizada
    """
    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            **_base_content(request, "http_error"),
            "status_code": exc.status_code,
            "message": exc.detail,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Manejador global para excepciones no capturadas.

    Args:
        request: Request de FastAPI
        exc: Excepción no manejada

    Returns:
        JSONResponse: Respuesta JSON de error interno
    """
    logger.error(
        f"Unhandled Exception: {str(exc)} - "
        f"Type: {type(exc).__name__} - "
        f"URL: {request.url} - "
        f"Traceback: {traceback.format_exc()}"
    )

    # Respuesta genérica (sin exponer detalles internos)
    error_message = "Internal server error occurred"
    if settings.DEBUG:
        error_message = f"{type(exc).__name__}: {str(exc)}"

    return JSONResponse(
        status_code=500,
        content={
            **_base_content(request, "internal_server_error"),
            "message": error_message,
            "traceback": traceback.format_exc() if settings.DEBUG else None,
        },
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configura todos los manejadores de excepciones de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando manejadores de excepciones...")

    # Manejadores específicos (orden de especificidad)
    app.add_exception_handler(ValidationException, validation_exception_handler)
    app.add_exception_handler(UpstreamFetchError, upstream_fetch_exception_handler)
    app.add_exception_handler(ShopifyAPIException, shopify_api_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)

    # Manejadores HTTP estándar
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Manejador global (debe ser el último)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("✅ Manejadores de excepciones configurados correctamente")

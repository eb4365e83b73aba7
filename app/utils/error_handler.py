"""
Sistema de manejo de errores personalizado.

Este módulo define todas las excepciones personalizadas de la aplicación
y proporciona utilidades para manejo consistente de errores.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Códigos de error estandardizados para la aplicación.
    """

    # Errores generales
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Errores de Shopify
    SHOPIFY_API_ERROR = "SHOPIFY_API_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    UPSTREAM_FETCH_FAILED = "UPSTREAM_FETCH_FAILED"

    # Errores de datos
    MALFORMED_PRICE = "MALFORMED_PRICE"
    INVALID_ORDER_DATA = "INVALID_ORDER_DATA"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"

    # Errores de paginación
    INVALID_PAGER_TRANSITION = "INVALID_PAGER_TRANSITION"


class ErrorSeverity(Enum):
    """
    Niveles de severidad para errores.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Excepción base para todas las excepciones personalizadas de la aplicación.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        is_retryable: bool = False,
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error
            error_code: Código de error estandardizado
            details: Información adicional del error
            status_code: Código HTTP asociado
            severity: Severidad del error
            is_retryable: Si la operación puede reintentarse
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte la excepción a diccionario.

        Returns:
            Dict: Representación de la excepción
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation del error."""
        return f"{self.error_code.value}: {self.message}"


class ValidationException(AppException):
    """
    Excepción para errores de validación de datos.
    """

    def __init__(
        self,
        message: str,
        field: str,
        invalid_value: Any = None,
        expected_format: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        **kwargs,
    ):
        """
        Inicializa la excepción de validación.

        Args:
            message: Mensaje de error
            field: Campo que falló la validación
            invalid_value: Valor que causó el error
            expected_format: Formato esperado
            error_code: Código de error (permite subclases más específicas)
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.invalid_value = invalid_value
        self.expected_format = expected_format

        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value) if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class MalformedPriceError(ValidationException):
    """
    Precio que no se puede interpretar como decimal.

    Nunca se convierte a cero: un precio silenciado corrompería los totales.
    """

    def __init__(self, raw_value: Any, line_item_id: Optional[str] = None, field: str = "amount"):
        """
        Args:
            raw_value: Valor recibido de Shopify
            line_item_id: Line item que contenía el precio
            field: Campo de precio afectado
        """
        subject = f"line item {line_item_id}" if line_item_id else "order"
        super().__init__(
            message=f"Malformed price {raw_value!r} on {subject}",
            field=field,
            invalid_value=raw_value,
            expected_format="decimal string, e.g. '19.90'",
            error_code=ErrorCode.MALFORMED_PRICE,
        )
        self.raw_value = raw_value
        self.line_item_id = line_item_id
        self.details["line_item_id"] = line_item_id


class ShopifyAPIException(AppException):
    """
    Excepción para errores de la API de Shopify.
    """

    def __init__(
        self,
        message: str,
        api_response_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        rate_limited: bool = False,
        retry_after: Optional[int] = None,
        **kwargs,
    ):
        """
        Inicializa la excepción de Shopify API.

        Args:
            message: Mensaje de error
            api_response_code: Código de respuesta de Shopify
            endpoint: Endpoint que falló
            rate_limited: Si es por rate limiting
            retry_after: Segundos para reintentar
            **kwargs: Argumentos adicionales para AppException
        """
        error_code = ErrorCode.SHOPIFY_API_ERROR
        severity = ErrorSeverity.MEDIUM

        if rate_limited:
            error_code = ErrorCode.RATE_LIMIT_EXCEEDED
            severity = ErrorSeverity.LOW
        elif api_response_code and api_response_code >= 500:
            severity = ErrorSeverity.HIGH

        super().__init__(
            message=message,
            error_code=error_code,
            status_code=api_response_code or 503,
            severity=severity,
            is_retryable=True,
            **kwargs,
        )

        self.api_response_code = api_response_code
        self.endpoint = endpoint
        self.rate_limited = rate_limited
        self.retry_after = retry_after

        self.details.update(
            {
                "api_response_code": api_response_code,
                "endpoint": endpoint,
                "rate_limited": rate_limited,
                "retry_after": retry_after,
            }
        )


class UpstreamFetchError(AppException):
    """
    Fallo del colaborador que obtiene pedidos (transporte o payload ilegible).

    El listado queda en estado ERROR y el cursor no avanza.
    """

    def __init__(self, message: str, operation: str = "fetch_orders_page", **kwargs):
        """
        Args:
            message: Mensaje de error
            operation: Operación del colaborador que falló
            **kwargs: Argumentos adicionales para AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.UPSTREAM_FETCH_FAILED,
            status_code=502,
            severity=ErrorSeverity.HIGH,
            is_retryable=True,
            **kwargs,
        )
        self.operation = operation
        self.details["operation"] = operation


class OrderNotFoundException(AppException):
    """Pedido inexistente en Shopify."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order {order_id} not found",
            error_code=ErrorCode.ORDER_NOT_FOUND,
            status_code=404,
            severity=ErrorSeverity.LOW,
            details={"order_id": order_id},
        )
        self.order_id = order_id


class InvalidPagerTransition(AppException):
    """Transición no permitida en la máquina de estados del paginador."""

    def __init__(self, status: str, event: str):
        super().__init__(
            message=f"Cannot apply '{event}' while pager is '{status}'",
            error_code=ErrorCode.INVALID_PAGER_TRANSITION,
            status_code=409,
            severity=ErrorSeverity.LOW,
            details={"status": status, "event": event},
        )


# === FUNCIONES DE UTILIDAD ===


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Loggea un error de manera consistente.

    Args:
        exception: Excepción a loggear
        context: Contexto adicional
        level: Nivel de logging
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
                "is_retryable": exception.is_retryable,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"

    logger.log(level, message, extra=log_data)
